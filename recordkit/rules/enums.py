"""Enums for the locale rule domain."""

from enum import Enum


class FieldKind(str, Enum):
    """Kinds of customer fields the pipeline understands."""

    PERSONAL_NAME = "personal_name"
    COMPANY_NAME = "company_name"
    NATIONAL_ID = "national_id"
    PHONE = "phone"
    EMAIL = "email"
    POSTAL_CODE = "postal_code"
    STREET_ADDRESS = "street_address"

    @classmethod
    def parse(cls, value: "str | FieldKind") -> "FieldKind | None":
        """Return the matching kind, or None for an unrecognized identifier."""
        if isinstance(value, FieldKind):
            return value
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


class CasePolicy(str, Enum):
    """Case transformation applied after character stripping."""

    UPPER = "upper"  # IDs, postal codes
    LOWER = "lower"  # Email
    NAME = "name"  # Personal names: particles lowercase, parts capitalized
    TITLE = "title"  # Company names, street addresses
    PRESERVE = "preserve"


class TokenClass(str, Enum):
    """Classification of a single name token."""

    PARTICLE = "particle"  # de, van, von... rendered lowercase
    LEGAL_SUFFIX = "legal_suffix"  # S.A., Inc., GmbH...
    ACRONYM = "acronym"  # rendered uppercase
    WORD = "word"
