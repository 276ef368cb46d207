"""Field normalizer.

One code path per field kind, driven entirely by the locale rule table:
clean, strip to the allow-list, apply the case policy, lay out the
template. Normalization never raises for bad data; it falls back to a
best-effort cleanup and says why.
"""

from recordkit.errors import UnsupportedLocaleError
from recordkit.normalization.casing import (
    address_case,
    name_case,
    split_legal_suffix,
    title_case,
)
from recordkit.normalization.cleanup import (
    clean_text,
    generic_cleanup,
    strip_disallowed,
    unwrap_email,
)
from recordkit.normalization.inference import infer_countries
from recordkit.normalization.models import NormalizationFallback, NormalizedField, RawField
from recordkit.normalization.phones import fits_length, national_digits
from recordkit.observability.logging import get_logger
from recordkit.observability.metrics import NORMALIZATION_FALLBACKS, field_kind_label
from recordkit.rules import (
    ANY_COUNTRY,
    CasePolicy,
    FieldKind,
    LocaleRule,
    LocaleRuleTable,
    fill_template,
    get_default_rule_table,
)

logger = get_logger(__name__)


class FieldNormalizer:
    """Turns RawFields into NormalizedFields using a locale rule table."""

    def __init__(self, table: LocaleRuleTable | None = None) -> None:
        self._table = table

    @property
    def table(self) -> LocaleRuleTable:
        if self._table is None:
            self._table = get_default_rule_table()
        return self._table

    def normalize(
        self,
        raw: RawField,
        default_country: str | None = None,
    ) -> NormalizedField:
        """Normalize one field.

        Args:
            raw: Field as received
            default_country: Record-level country used when the field has no hint

        Returns:
            NormalizedField; check `fallback` to see whether a rule was applied
        """
        text = clean_text(raw.value or "")
        kind = FieldKind.parse(raw.kind)
        if kind is None:
            logger.warning("unsupported_field_kind", field_kind=raw.kind)
            return self._fallback(
                raw,
                text,
                NormalizationFallback.UNSUPPORTED_KIND,
                note=f"unknown field kind {raw.kind!r}",
            )

        if kind == FieldKind.EMAIL:
            text = unwrap_email(text)

        country = (raw.country or default_country or "").strip().upper() or None
        if country is None and not self._has_generic_rule(kind):
            candidates = infer_countries(kind, text, self.table, raw.as_of)
            if len(candidates) != 1:
                return self._fallback(
                    raw,
                    generic_cleanup(kind, text),
                    NormalizationFallback.AMBIGUOUS_LOCALE,
                    candidates=tuple(candidates),
                    note=(
                        f"{len(candidates)} candidate countries"
                        if candidates
                        else "no country matches the value"
                    ),
                )
            country = candidates[0]

        try:
            rule = self.table.lookup(kind, country, raw.as_of)
        except UnsupportedLocaleError as e:
            logger.info("locale_unsupported", field_kind=kind.value, country=country)
            return self._fallback(
                raw,
                generic_cleanup(kind, text),
                NormalizationFallback.UNSUPPORTED_LOCALE,
                note=e.message,
            )

        locale = rule.country if rule.country != ANY_COUNTRY else country
        value, attributes, fitted = self._apply_rule(kind, rule, text)
        if not fitted:
            return self._fallback(
                raw,
                value,
                NormalizationFallback.TEMPLATE_MISMATCH,
                locale=locale,
                attributes=attributes,
                note=f"does not fit template {rule.canonical_template}",
            )

        return NormalizedField(
            kind=kind.value,
            raw=raw.value,
            value=value,
            locale=locale,
            attributes=attributes,
            as_of=raw.as_of,
        )

    def _has_generic_rule(self, kind: FieldKind) -> bool:
        try:
            return self.table.lookup(kind, None).country == ANY_COUNTRY
        except UnsupportedLocaleError:
            return False

    def _apply_rule(
        self,
        kind: FieldKind,
        rule: LocaleRule,
        text: str,
    ) -> tuple[str, dict[str, str], bool]:
        """Run the rule's steps. Returns (value, attributes, fits template)."""
        if kind == FieldKind.PHONE:
            return self._apply_phone_rule(rule, text)

        attributes: dict[str, str] = {}
        if kind == FieldKind.COMPANY_NAME:
            text, suffix = split_legal_suffix(text, self.table.tokens)
            if suffix is not None:
                attributes["legal_entity"] = suffix

        value = self._apply_case(kind, rule, strip_disallowed(rule, text))
        if rule.canonical_template is None:
            return value, attributes, True

        significant = "".join(c for c in value if c.isalnum())
        filled = fill_template(rule.canonical_template, significant)
        if filled is None:
            return value, attributes, False
        return filled, attributes, True

    def _apply_phone_rule(
        self,
        rule: LocaleRule,
        text: str,
    ) -> tuple[str, dict[str, str], bool]:
        stripped = strip_disallowed(rule, text)
        national = national_digits(rule, stripped)
        if national is None or not fits_length(rule, national):
            return generic_cleanup(FieldKind.PHONE, stripped), {}, False

        if rule.canonical_template is None:
            return f"+{rule.calling_code or ''}{national}", {}, True

        filled = fill_template(rule.canonical_template, national)
        if filled is None:
            return generic_cleanup(FieldKind.PHONE, stripped), {}, False
        return filled, {}, True

    def _apply_case(self, kind: FieldKind, rule: LocaleRule, value: str) -> str:
        tokens = self.table.tokens
        if rule.case == CasePolicy.UPPER:
            return value.upper()
        if rule.case == CasePolicy.LOWER:
            return value.lower()
        if rule.case == CasePolicy.NAME:
            return name_case(value, tokens)
        if rule.case == CasePolicy.TITLE:
            if kind == FieldKind.STREET_ADDRESS:
                return address_case(value, rule, tokens)
            return title_case(value, tokens)
        return value

    def _fallback(
        self,
        raw: RawField,
        value: str,
        fallback: NormalizationFallback,
        locale: str | None = None,
        candidates: tuple[str, ...] = (),
        attributes: dict[str, str] | None = None,
        note: str | None = None,
    ) -> NormalizedField:
        NORMALIZATION_FALLBACKS.labels(
            field_kind=field_kind_label(raw.kind), fallback=fallback.value
        ).inc()
        logger.debug(
            "normalization_fallback",
            field_kind=raw.kind,
            fallback=fallback.value,
            candidates=list(candidates),
        )
        kind = FieldKind.parse(raw.kind)
        return NormalizedField(
            kind=kind.value if kind is not None else raw.kind,
            raw=raw.value,
            value=value,
            locale=locale,
            fully_normalized=False,
            fallback=fallback,
            candidates=candidates,
            attributes=attributes or {},
            note=note,
            as_of=raw.as_of,
        )


_default_normalizer = FieldNormalizer()


def normalize(raw: RawField, default_country: str | None = None) -> NormalizedField:
    """Normalize a field with the process-wide default rule table."""
    return _default_normalizer.normalize(raw, default_country)
