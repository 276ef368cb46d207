"""Duplicate candidate detection across record reports.

Pairs are only ever flagged for manual review; nothing is merged.
"""

from collections.abc import Sequence
from itertools import combinations

from pydantic import BaseModel, ConfigDict, Field

from recordkit.dedup.similarity import phonetic_key, similarity
from recordkit.observability.logging import get_logger
from recordkit.records.models import RecordReport
from recordkit.rules import FieldKind

logger = get_logger(__name__)


class DuplicateCandidate(BaseModel):
    """A pair of records that may describe the same customer."""

    model_config = ConfigDict(frozen=True)

    left: str = Field(..., description="Record id, or '#<index>' when the record has none")
    right: str
    left_value: str
    right_value: str
    score: float = Field(..., ge=0.0, le=1.0, description="Jaro-Winkler similarity")
    phonetic_match: bool = Field(..., description="Both values share a phonetic key")
    needs_review: bool = True


def _field_value(report: RecordReport, kind: FieldKind) -> str | None:
    for field in report.fields.values():
        if field.kind != kind.value:
            continue
        if field.normalized is not None:
            return field.normalized.value
        return field.raw
    return None


def find_duplicates(
    reports: Sequence[RecordReport],
    field_kind: FieldKind | str,
    threshold: float,
) -> list[DuplicateCandidate]:
    """Compare one field across every pair of reports.

    A pair is a candidate when its similarity reaches the threshold or both
    values share a phonetic key.

    Args:
        reports: Processed records
        field_kind: Field to compare
        threshold: Minimum similarity, in [0, 1]

    Returns:
        Candidates, most similar first
    """
    kind = FieldKind.parse(field_kind)
    if kind is None:
        raise ValueError(f"Unknown field kind: {field_kind!r}")
    if not 0.0 <= threshold <= 1.0:
        raise ValueError(f"threshold must be within [0, 1], got {threshold}")

    entries = []
    for index, report in enumerate(reports):
        value = _field_value(report, kind)
        if value:
            entries.append((report.record_id or f"#{index}", value, phonetic_key(value)))

    candidates: list[DuplicateCandidate] = []
    for (left_id, left, left_key), (right_id, right, right_key) in combinations(entries, 2):
        score = similarity(left, right)
        phonetic_match = bool(left_key) and left_key == right_key
        if score >= threshold or phonetic_match:
            candidates.append(
                DuplicateCandidate(
                    left=left_id,
                    right=right_id,
                    left_value=left,
                    right_value=right,
                    score=score,
                    phonetic_match=phonetic_match,
                )
            )

    candidates.sort(key=lambda c: c.score, reverse=True)
    logger.info(
        "duplicates_scanned",
        field_kind=kind.value,
        record_count=len(entries),
        candidate_count=len(candidates),
        threshold=threshold,
    )
    return candidates
