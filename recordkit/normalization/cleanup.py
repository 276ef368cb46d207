"""Character-level cleanup shared by every field kind."""

import re
import unicodedata

from recordkit.rules import FieldKind, LocaleRule

WHITESPACE = re.compile(r"\s+")

# Typographic apostrophes seen in pasted names
APOSTROPHES = str.maketrans({"’": "'", "‘": "'", "ʼ": "'"})

MAILTO_PREFIX = "mailto:"


def clean_text(value: str) -> str:
    """NFC, trim and collapse internal whitespace to single spaces."""
    value = unicodedata.normalize("NFC", value).translate(APOSTROPHES)
    return WHITESPACE.sub(" ", value).strip()


def unwrap_email(value: str) -> str:
    """Drop a mailto: prefix and enclosing angle brackets."""
    value = value.strip()
    if value.startswith("<") and value.endswith(">"):
        value = value[1:-1].strip()
    if value.casefold().startswith(MAILTO_PREFIX):
        value = value[len(MAILTO_PREFIX):]
    return value.strip()


def strip_disallowed(rule: LocaleRule, value: str) -> str:
    """Remove characters outside the rule's allow-list."""
    kept = "".join(c for c in value if rule.allows(c))
    return WHITESPACE.sub(" ", kept).strip()


def generic_cleanup(kind: FieldKind, value: str) -> str:
    """Best-effort cleanup used when no locale rule applies."""
    if kind == FieldKind.PHONE:
        digits = "".join(c for c in value if c.isdigit())
        return f"+{digits}" if value.startswith("+") else digits
    if kind == FieldKind.EMAIL:
        return unwrap_email(value).replace(" ", "").lower()
    if kind in (FieldKind.NATIONAL_ID, FieldKind.POSTAL_CODE):
        kept = "".join(c for c in value if c.isalnum() or c in " -.")
        return WHITESPACE.sub(" ", kept).strip().upper()
    return value
