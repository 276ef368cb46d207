"""Tests for duplicate candidate detection."""

import pytest

from recordkit.dedup import find_duplicates
from recordkit.records import CustomerRecord, RecordOrchestrator, RecordReport


@pytest.fixture
def reports(orchestrator: RecordOrchestrator) -> list[RecordReport]:
    rows = [
        {"record_id": "a", "personal_name": "JON SMITH"},
        {"record_id": "b", "personal_name": "john smyth"},
        {"record_id": "c", "personal_name": "Maria Gonzalez"},
        {"personal_name": "María González"},
    ]
    return [orchestrator.process(CustomerRecord.from_dict(row)) for row in rows]


class TestFindDuplicates:
    """Tests for find_duplicates."""

    def test_flags_similar_pairs(self, reports: list[RecordReport]) -> None:
        candidates = find_duplicates(reports, "personal_name", threshold=0.85)
        pairs = [(c.left, c.right) for c in candidates]

        assert pairs == [("c", "#3"), ("a", "b")]
        assert candidates[0].score == 1.0
        assert all(c.needs_review for c in candidates)

    def test_compares_normalized_values(self, reports: list[RecordReport]) -> None:
        candidates = find_duplicates(reports, "personal_name", threshold=0.85)
        jon = next(c for c in candidates if c.left == "a")
        assert (jon.left_value, jon.right_value) == ("Jon Smith", "John Smyth")
        assert jon.phonetic_match

    def test_phonetic_match_below_threshold(self, reports: list[RecordReport]) -> None:
        candidates = find_duplicates(reports, "personal_name", threshold=0.99)
        jon = next(c for c in candidates if c.left == "a")
        assert jon.score < 0.99
        assert jon.phonetic_match

    def test_records_without_the_field_skipped(
        self, orchestrator: RecordOrchestrator, reports: list[RecordReport]
    ) -> None:
        extra = orchestrator.process(CustomerRecord.from_dict({"email": "x@example.com"}))
        candidates = find_duplicates([*reports, extra], "personal_name", threshold=0.85)
        assert len(candidates) == 2

    def test_unknown_kind(self, reports: list[RecordReport]) -> None:
        with pytest.raises(ValueError, match="Unknown field kind"):
            find_duplicates(reports, "nickname", threshold=0.5)

    @pytest.mark.parametrize("threshold", [-0.1, 1.5])
    def test_threshold_bounds(self, reports: list[RecordReport], threshold: float) -> None:
        with pytest.raises(ValueError, match="threshold"):
            find_duplicates(reports, "personal_name", threshold=threshold)
