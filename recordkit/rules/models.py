"""Locale rule model.

A LocaleRule is pure data: patterns, templates, bounds and token lists for
one (field kind, country) pair. Normalizers and validators interpret it.
"""

import re
from datetime import date
from functools import lru_cache

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from recordkit.rules.enums import CasePolicy, FieldKind
from recordkit.rules.templates import parse_template

ANY_COUNTRY = "*"

# Named character classes usable in allowed_chars; anything else is a literal
CHAR_CLASSES = {
    "letters": str.isalpha,
    "digits": lambda c: "0" <= c <= "9",
    "alnum": str.isalnum,
    "space": lambda c: c == " ",
}


@lru_cache(maxsize=512)
def compile_pattern(pattern: str) -> re.Pattern[str]:
    """Compile a rule pattern once per process."""
    return re.compile(pattern)


class LocaleRule(BaseModel):
    """Structural and formatting rule for one field kind in one country."""

    model_config = ConfigDict(frozen=True)

    field_kind: FieldKind = Field(..., description="Field kind the rule applies to")
    country: str = Field(..., description="ISO-3166-1 alpha-2 code, or '*' for any")
    pattern: str = Field(..., description="Canonical pattern, matched in full")
    canonical_template: str | None = Field(
        default=None, description="Layout of significant characters"
    )
    checksum_algorithm: str | None = Field(
        default=None, description="Registered checksum algorithm id"
    )
    length_min: int | None = Field(default=None, ge=0, description="Min significant chars")
    length_max: int | None = Field(default=None, ge=0, description="Max significant chars")

    accept_pattern: str | None = Field(
        default=None, description="Tolerant raw-input pattern used for inference"
    )
    allowed_chars: tuple[str, ...] = Field(
        default=("alnum",), description="Allow-list: class names or literal characters"
    )
    case: CasePolicy = Field(default=CasePolicy.PRESERVE, description="Case policy")
    calling_code: str | None = Field(default=None, description="Phone country calling code")
    trunk_prefix: str | None = Field(default=None, description="Domestic trunk prefix")
    mobile_prefix: str | None = Field(
        default=None, description="Domestic mobile prefix written after the area code"
    )
    mobile_marker: str | None = Field(
        default=None, description="Digits replacing mobile_prefix ahead of the area code"
    )
    range_min: str | None = Field(default=None, description="Lowest assigned value")
    range_max: str | None = Field(default=None, description="Highest assigned value")
    excluded: tuple[str, ...] = Field(default=(), description="Reserved, never-assigned values")
    region_tokens: tuple[str, ...] = Field(
        default=(), description="Province/state names and abbreviations"
    )
    abbreviations: dict[str, str] = Field(
        default_factory=dict, description="Word -> canonical abbreviation"
    )
    effective_from: date | None = Field(default=None, description="First day the rule applies")
    effective_to: date | None = Field(default=None, description="Last day the rule applies")
    description: str | None = Field(default=None, description="Human-readable note")

    @field_validator("country")
    @classmethod
    def normalize_country(cls, v: str) -> str:
        v = v.strip().upper()
        if v != ANY_COUNTRY and not re.fullmatch(r"[A-Z]{2}", v):
            raise ValueError(f"country must be ISO-3166-1 alpha-2 or '*', got {v!r}")
        return v

    @field_validator("pattern", "accept_pattern")
    @classmethod
    def check_regex(cls, v: str | None) -> str | None:
        if v is not None:
            try:
                compile_pattern(v)
            except re.error as e:
                raise ValueError(f"invalid regex {v!r}: {e}") from e
        return v

    @field_validator("canonical_template")
    @classmethod
    def check_template(cls, v: str | None) -> str | None:
        if v is not None:
            parse_template(v)
        return v

    @field_validator("abbreviations")
    @classmethod
    def lower_abbreviation_keys(cls, v: dict[str, str]) -> dict[str, str]:
        return {key.casefold(): value for key, value in v.items()}

    @model_validator(mode="after")
    def check_bounds(self) -> "LocaleRule":
        if (
            self.length_min is not None
            and self.length_max is not None
            and self.length_min > self.length_max
        ):
            raise ValueError("length_min is greater than length_max")
        if (self.mobile_prefix is None) != (self.mobile_marker is None):
            raise ValueError("mobile_prefix and mobile_marker must be given together")
        if (self.range_min is None) != (self.range_max is None):
            raise ValueError("range_min and range_max must be given together")
        if self.range_min is not None and len(self.range_min) != len(self.range_max or ""):
            raise ValueError("range_min and range_max must have the same length")
        if (
            self.effective_from is not None
            and self.effective_to is not None
            and self.effective_from > self.effective_to
        ):
            raise ValueError("effective_from is after effective_to")
        return self

    @property
    def key(self) -> tuple[FieldKind, str]:
        return self.field_kind, self.country

    def is_effective(self, on: date) -> bool:
        """Whether the rule applies on the given day."""
        if self.effective_from is not None and on < self.effective_from:
            return False
        if self.effective_to is not None and on > self.effective_to:
            return False
        return True

    def overlaps(self, other: "LocaleRule") -> bool:
        """Whether two rules for the same key have intersecting effective ranges."""
        start = max(self.effective_from or date.min, other.effective_from or date.min)
        end = min(self.effective_to or date.max, other.effective_to or date.max)
        return start <= end

    def allows(self, char: str) -> bool:
        """Whether a character survives the allow-list."""
        for entry in self.allowed_chars:
            check = CHAR_CLASSES.get(entry)
            if check is not None:
                if check(char):
                    return True
            elif char == entry:
                return True
        return False

    def matches(self, value: str) -> bool:
        """Full match of the canonical pattern."""
        return compile_pattern(self.pattern).fullmatch(value) is not None

    def accepts(self, raw: str) -> bool:
        """Whether a raw value looks like this locale's input format."""
        if self.accept_pattern is None:
            return False
        return compile_pattern(self.accept_pattern).fullmatch(raw) is not None

    def significant(self, value: str) -> str:
        """Letters and digits of a value; national digits only for phones."""
        if self.field_kind == FieldKind.PHONE and self.calling_code:
            prefix = f"+{self.calling_code}"
            if value.startswith(prefix):
                value = value[len(prefix):]
        return "".join(c for c in value if c.isalnum())
