"""National significant digits of a phone number."""

from recordkit.rules import LocaleRule

INTERNATIONAL_PREFIX = "00"

# Area codes the mobile prefix may follow run two to four digits
MOBILE_PREFIX_OFFSETS = (2, 3, 4)


def fits_length(rule: LocaleRule, digits: str) -> bool:
    """Whether a digit string is within the rule's length bounds."""
    if rule.length_min is not None and len(digits) < rule.length_min:
        return False
    if rule.length_max is not None and len(digits) > rule.length_max:
        return False
    return True


def rewrite_mobile_prefix(rule: LocaleRule, digits: str) -> str:
    """Move a domestic mobile prefix into its international position.

    For AR ("15" -> "9"): "111512345678" -> "91112345678". Digits that
    already fit, or that still don't fit after the rewrite, are returned
    unchanged.
    """
    prefix, marker = rule.mobile_prefix, rule.mobile_marker
    if not prefix or marker is None or fits_length(rule, digits):
        return digits

    for offset in MOBILE_PREFIX_OFFSETS:
        if digits[offset:offset + len(prefix)] != prefix:
            continue
        candidate = marker + digits[:offset] + digits[offset + len(prefix):]
        if fits_length(rule, candidate):
            return candidate
    return digits


def national_digits(rule: LocaleRule, value: str) -> str | None:
    """Strip the international prefix, calling code or trunk prefix.

    "+1 (212) 555-1234", "001 212 555 1234", "1 212 555 1234" and
    "(212) 555-1234" all give "2125551234" for a +1 rule.

    Returns:
        National digits, or None for an international number carrying a
        different calling code
    """
    digits = "".join(c for c in value if c.isdigit())
    code = rule.calling_code or ""

    international = value.lstrip().startswith("+")
    if not international and digits.startswith(INTERNATIONAL_PREFIX):
        digits = digits[len(INTERNATIONAL_PREFIX):]
        international = True

    if international:
        if code and digits.startswith(code):
            return rewrite_mobile_prefix(rule, digits[len(code):])
        return None

    # A calling code typed without '+': only when the rest fits and the whole doesn't
    if code and digits.startswith(code):
        rest = digits[len(code):]
        if fits_length(rule, rest) and not fits_length(rule, digits):
            return rest

    if rule.trunk_prefix and digits.startswith(rule.trunk_prefix):
        digits = digits[len(rule.trunk_prefix):]
    return rewrite_mobile_prefix(rule, digits)
