"""Validation outcome models."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class OutcomeStatus(str, Enum):
    """Result of validating one field."""

    VALID = "valid"
    INVALID_FORMAT = "invalid_format"
    INVALID_CHECKSUM = "invalid_checksum"
    UNSUPPORTED = "unsupported"
    AMBIGUOUS = "ambiguous"


class ValidationOutcome(BaseModel):
    """Structured validation result for one field."""

    model_config = ConfigDict(frozen=True)

    status: OutcomeStatus
    reason: str | None = Field(default=None, description="Human-readable explanation")
    confidence: float | None = Field(default=None, ge=0.0, le=1.0)
    expected_check: str | None = Field(
        default=None, description="Check characters the algorithm computed"
    )
    supplied_check: str | None = Field(
        default=None, description="Check characters found in the value"
    )
    pattern: str | None = Field(default=None, description="Pattern a format failure refers to")

    @property
    def is_valid(self) -> bool:
        return self.status == OutcomeStatus.VALID

    @classmethod
    def valid(cls) -> "ValidationOutcome":
        return cls(status=OutcomeStatus.VALID, confidence=1.0)

    @classmethod
    def invalid_format(cls, reason: str, pattern: str | None = None) -> "ValidationOutcome":
        return cls(status=OutcomeStatus.INVALID_FORMAT, reason=reason, pattern=pattern)

    @classmethod
    def unsupported(cls, reason: str) -> "ValidationOutcome":
        return cls(status=OutcomeStatus.UNSUPPORTED, reason=reason)

    @classmethod
    def ambiguous(cls, reason: str, confidence: float) -> "ValidationOutcome":
        return cls(status=OutcomeStatus.AMBIGUOUS, reason=reason, confidence=confidence)
