"""Structural, range and checksum validation of normalized fields."""

from recordkit.validation.checksums import (
    CHECKSUM_ALGORITHMS,
    ChecksumAlgorithm,
    register_checksum,
)
from recordkit.validation.models import OutcomeStatus, ValidationOutcome
from recordkit.validation.validator import FieldValidator, validate

__all__ = [
    "CHECKSUM_ALGORITHMS",
    "ChecksumAlgorithm",
    "FieldValidator",
    "OutcomeStatus",
    "ValidationOutcome",
    "register_checksum",
    "validate",
]
