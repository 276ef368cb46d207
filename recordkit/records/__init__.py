"""Record orchestration: per-record and batch processing."""

from recordkit.records.models import (
    CustomerRecord,
    FieldReport,
    FieldState,
    FieldVerification,
    RecordReport,
    RecordSchema,
)
from recordkit.records.orchestrator import RecordOrchestrator

__all__ = [
    "CustomerRecord",
    "FieldReport",
    "FieldState",
    "FieldVerification",
    "RecordOrchestrator",
    "RecordReport",
    "RecordSchema",
]
