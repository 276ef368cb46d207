"""Normalization domain models."""

from datetime import date
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class NormalizationFallback(str, Enum):
    """Why a normalizer fell back to a best-effort cleanup."""

    NONE = "none"
    AMBIGUOUS_LOCALE = "ambiguous_locale"  # Zero or several inferred countries
    UNSUPPORTED_LOCALE = "unsupported_locale"  # Country given, no rule for it
    UNSUPPORTED_KIND = "unsupported_kind"  # Field kind not recognized
    TEMPLATE_MISMATCH = "template_mismatch"  # Characters don't fit the template


class RawField(BaseModel):
    """A field value as received, before any processing."""

    model_config = ConfigDict(frozen=True)

    kind: str = Field(..., description="Field kind identifier, possibly unknown")
    value: str | None = Field(default=None, description="Raw value")
    country: str | None = Field(default=None, description="Country hint")
    as_of: date | None = Field(
        default=None, description="Date the value was captured, selects historical rules"
    )


class NormalizedField(BaseModel):
    """Canonical form of a field plus how it was obtained."""

    model_config = ConfigDict(frozen=True)

    kind: str = Field(..., description="Field kind identifier")
    raw: str | None = Field(default=None, description="Raw value as received")
    value: str = Field(..., description="Canonical value")
    locale: str | None = Field(default=None, description="Country actually used")
    fully_normalized: bool = Field(
        default=True, description="False when a fallback cleanup was applied"
    )
    fallback: NormalizationFallback = Field(default=NormalizationFallback.NONE)
    candidates: tuple[str, ...] = Field(
        default=(), description="Countries considered during locale inference"
    )
    attributes: dict[str, str] = Field(
        default_factory=dict, description="Extracted attributes, e.g. legal_entity"
    )
    note: str | None = Field(default=None, description="Why a fallback happened")
    as_of: date | None = Field(default=None, description="Rule selection date")
