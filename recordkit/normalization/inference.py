"""Locale inference for fields that arrive without a country hint.

Phones resolve by calling code, postal codes and national IDs by the shape
of the raw value, street addresses by province/state names. Exactly one
candidate means the locale is known; anything else is ambiguous.
"""

import re
from datetime import date

import phonenumbers

from recordkit.errors import UnsupportedLocaleError
from recordkit.rules import FieldKind, LocaleRule, LocaleRuleTable, fold_accents


def infer_countries(
    kind: FieldKind,
    value: str,
    table: LocaleRuleTable,
    as_of: date | None = None,
) -> list[str]:
    """Countries whose rules plausibly describe a raw value.

    Args:
        kind: Field kind
        value: Whitespace-cleaned raw value
        table: Rule table to consult
        as_of: Rule selection date

    Returns:
        Sorted candidate countries (possibly empty)
    """
    rules = _effective_rules(kind, table, as_of)
    if not rules:
        return []

    if kind == FieldKind.PHONE:
        return _phone_countries(value, rules)
    if kind == FieldKind.STREET_ADDRESS:
        return sorted(country for country, rule in rules.items() if _mentions_region(value, rule))
    return sorted(country for country, rule in rules.items() if rule.accepts(value))


def _effective_rules(
    kind: FieldKind,
    table: LocaleRuleTable,
    as_of: date | None,
) -> dict[str, LocaleRule]:
    rules: dict[str, LocaleRule] = {}
    for country in table.countries_for(kind):
        try:
            rules[country] = table.lookup(kind, country, as_of)
        except UnsupportedLocaleError:
            continue
    return rules


def _phone_countries(value: str, rules: dict[str, LocaleRule]) -> list[str]:
    """Resolve the region of an internationally-prefixed number."""
    text = value.strip()
    if text.startswith("00"):
        text = "+" + text[2:]
    if not text.startswith("+"):
        return []

    try:
        number = phonenumbers.parse(text, None)
    except phonenumbers.NumberParseException:
        return []

    region = phonenumbers.region_code_for_number(number)
    if region in rules:
        return [region]

    # Shared calling code (e.g. +1) with no resolvable region
    regions = phonenumbers.region_codes_for_country_code(number.country_code)
    return sorted(region for region in regions if region in rules)


def _mentions_region(value: str, rule: LocaleRule) -> bool:
    """Whether an address names one of the rule's provinces or states.

    Short tokens are abbreviations and must appear uppercase ("NY", "ON");
    longer names match case- and accent-insensitively.
    """
    folded = fold_accents(value).casefold()
    for token in rule.region_tokens:
        if len(token) <= 3:
            if re.search(rf"(?<!\w){re.escape(token)}(?!\w)", value):
                return True
        elif re.search(rf"(?<!\w){re.escape(fold_accents(token).casefold())}(?!\w)", folded):
            return True
    return False
