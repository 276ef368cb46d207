"""Field validator.

Validation is structural and offline: pattern, length, assigned range and
checksum. Whether a value exists in the world is verification's business.
"""

from recordkit.errors import UnsupportedLocaleError
from recordkit.normalization.models import NormalizationFallback, NormalizedField
from recordkit.observability.logging import get_logger
from recordkit.rules import FieldKind, LocaleRule, LocaleRuleTable, get_default_rule_table
from recordkit.validation.checksums import CHECKSUM_ALGORITHMS
from recordkit.validation.models import OutcomeStatus, ValidationOutcome

logger = get_logger(__name__)


class FieldValidator:
    """Checks NormalizedFields against their locale rules.

    Checks run in a fixed order and the first failure wins:
    1. Unsupported kind or locale
    2. Ambiguous locale
    3. Structural pattern
    4. Significant length
    5. Assigned range
    6. Checksum
    """

    def __init__(self, table: LocaleRuleTable | None = None) -> None:
        self._table = table

    @property
    def table(self) -> LocaleRuleTable | None:
        return self._table

    def validate(
        self,
        field: NormalizedField,
        locale: str | None = None,
    ) -> ValidationOutcome:
        """Validate a normalized field.

        Args:
            field: Output of a FieldNormalizer
            locale: Country override; defaults to the locale the normalizer used

        Returns:
            ValidationOutcome describing the first failed check, or valid

        Raises:
            ValueError: If the validator was built without a rule table
        """
        if self._table is None:
            raise ValueError("FieldValidator requires a rule table")

        kind = FieldKind.parse(field.kind)
        if kind is None or field.fallback == NormalizationFallback.UNSUPPORTED_KIND:
            return ValidationOutcome.unsupported(f"unknown field kind {field.kind!r}")

        if field.fallback == NormalizationFallback.UNSUPPORTED_LOCALE and locale is None:
            return ValidationOutcome.unsupported(field.note or "no rule for locale")

        if field.fallback == NormalizationFallback.AMBIGUOUS_LOCALE and locale is None:
            confidence = 1 / len(field.candidates) if field.candidates else 0.0
            if field.candidates:
                reason = f"locale ambiguous between {', '.join(field.candidates)}"
            else:
                reason = "locale could not be inferred"
            return ValidationOutcome.ambiguous(reason, confidence)

        try:
            rule = self._table.lookup(kind, locale or field.locale, field.as_of)
        except UnsupportedLocaleError as e:
            return ValidationOutcome.unsupported(e.message)

        return self._check(rule, field.value)

    def _check(self, rule: LocaleRule, value: str) -> ValidationOutcome:
        if not value:
            return ValidationOutcome.invalid_format("empty value")

        if not rule.matches(value):
            return ValidationOutcome.invalid_format(
                f"does not match pattern {rule.pattern}", pattern=rule.pattern
            )

        significant = rule.significant(value)
        if rule.length_min is not None and len(significant) < rule.length_min:
            return ValidationOutcome.invalid_format(
                f"too short: {len(significant)} < {rule.length_min} significant characters"
            )
        if rule.length_max is not None and len(significant) > rule.length_max:
            return ValidationOutcome.invalid_format(
                f"too long: {len(significant)} > {rule.length_max} significant characters"
            )

        if rule.range_min is not None and rule.range_max is not None:
            head = significant[: len(rule.range_min)]
            if head in rule.excluded or not rule.range_min <= head <= rule.range_max:
                return ValidationOutcome.invalid_format(
                    f"{head} out of assigned range {rule.range_min}-{rule.range_max}"
                )
        elif significant in rule.excluded:
            return ValidationOutcome.invalid_format(f"{significant} is a reserved value")

        if rule.checksum_algorithm is not None:
            return self._check_checksum(rule, significant)

        return ValidationOutcome.valid()

    def _check_checksum(self, rule: LocaleRule, significant: str) -> ValidationOutcome:
        algorithm = CHECKSUM_ALGORITHMS.get(rule.checksum_algorithm or "")
        if algorithm is None:
            logger.error(
                "unknown_checksum_algorithm",
                algorithm=rule.checksum_algorithm,
                field_kind=rule.field_kind.value,
                country=rule.country,
            )
            return ValidationOutcome.unsupported(
                f"checksum algorithm {rule.checksum_algorithm!r} is not registered"
            )

        payload, supplied = algorithm.split(significant.upper())
        expected = algorithm.compute(payload)
        if expected is None:
            return ValidationOutcome(
                status=OutcomeStatus.INVALID_CHECKSUM,
                reason=f"{algorithm.name}: no valid check character exists",
                supplied_check=supplied,
            )
        if expected != supplied:
            return ValidationOutcome(
                status=OutcomeStatus.INVALID_CHECKSUM,
                reason=f"{algorithm.name}: expected {expected}, got {supplied}",
                expected_check=expected,
                supplied_check=supplied,
            )
        return ValidationOutcome.valid()


_default_validator: FieldValidator | None = None


def validate(field: NormalizedField, locale: str | None = None) -> ValidationOutcome:
    """Validate a field with the process-wide default rule table."""
    global _default_validator
    if _default_validator is None:
        _default_validator = FieldValidator(get_default_rule_table())
    return _default_validator.validate(field, locale)
