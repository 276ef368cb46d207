"""Prometheus metrics for recordkit.

Counts processed fields and records and times record processing and
external verification calls.
"""

from prometheus_client import Counter, Histogram

from recordkit.rules.enums import FieldKind

UNKNOWN_KIND = "unknown"


def field_kind_label(kind: str) -> str:
    """Label value for a caller-supplied field kind.

    Unrecognized kinds share one series so callers cannot grow the label set.
    """
    parsed = FieldKind.parse(kind)
    return parsed.value if parsed is not None else UNKNOWN_KIND

# Field metrics
FIELDS_PROCESSED = Counter(
    "recordkit_fields_processed_total",
    "Total number of fields normalized and validated",
    labelnames=["field_kind", "outcome"],
)

NORMALIZATION_FALLBACKS = Counter(
    "recordkit_normalization_fallbacks_total",
    "Fields that fell back to a best-effort cleanup",
    labelnames=["field_kind", "fallback"],
)

# Record metrics
RECORDS_PROCESSED = Counter(
    "recordkit_records_processed_total",
    "Total number of records processed",
    labelnames=["valid"],
)

RECORD_LATENCY = Histogram(
    "recordkit_record_latency_seconds",
    "Time spent processing one record",
    buckets=(0.0001, 0.0005, 0.001, 0.0025, 0.005, 0.01, 0.025, 0.05, 0.1),
)

# Verification metrics
VERIFICATION_CALLS = Counter(
    "recordkit_verification_calls_total",
    "External verification calls by collaborator and result",
    labelnames=["collaborator", "result"],
)

VERIFICATION_LATENCY = Histogram(
    "recordkit_verification_latency_seconds",
    "External verification latency in seconds",
    labelnames=["collaborator"],
    buckets=(0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
)
