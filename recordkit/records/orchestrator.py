"""Record orchestrator.

Dispatches each field of a record to its normalizer and validator and
assembles the record report. Records are independent, so batches fan out
over a thread pool.
"""

import threading
import time
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor

from recordkit.config import get_settings
from recordkit.normalization import FieldNormalizer, NormalizedField, RawField
from recordkit.observability.logging import get_logger
from recordkit.observability.metrics import (
    FIELDS_PROCESSED,
    RECORD_LATENCY,
    RECORDS_PROCESSED,
    field_kind_label,
)
from recordkit.records.models import (
    CustomerRecord,
    FieldReport,
    FieldState,
    RecordReport,
    RecordSchema,
)
from recordkit.validation import FieldValidator, ValidationOutcome

logger = get_logger(__name__)

MISSING_REASON = "missing required field"

NEXT_STATE = {
    FieldState.RECEIVED: FieldState.NORMALIZED,
    FieldState.NORMALIZED: FieldState.VALIDATED,
    FieldState.VALIDATED: FieldState.REPORTED,
}


class FieldLifecycle:
    """Enforces received -> normalized -> validated -> reported."""

    def __init__(self) -> None:
        self.state = FieldState.RECEIVED

    def advance(self, target: FieldState) -> None:
        if NEXT_STATE.get(self.state) != target:
            raise RuntimeError(f"Illegal field transition {self.state.value} -> {target.value}")
        self.state = target

    def abort(self) -> None:
        """Jump to reported after an unexpected failure."""
        self.state = FieldState.REPORTED


class RecordOrchestrator:
    """Runs records through normalization and validation."""

    def __init__(
        self,
        normalizer: FieldNormalizer | None = None,
        validator: FieldValidator | None = None,
    ) -> None:
        self.normalizer = normalizer or FieldNormalizer()
        self.validator = validator or FieldValidator(self.normalizer.table)

    def process(
        self,
        record: CustomerRecord,
        schema: RecordSchema | None = None,
    ) -> RecordReport:
        """Process one record.

        Args:
            record: Raw record
            schema: Mandatory fields and default country; without one every
                present field is mandatory

        Returns:
            RecordReport with one entry per input field plus one per missing
            mandatory field
        """
        started = time.perf_counter()
        schema = schema or RecordSchema()
        country = record.country or schema.default_country

        reports: dict[str, FieldReport] = {}
        for name, raw in record.fields.items():
            mandatory = schema.is_mandatory(name, raw.kind)
            reports[name] = self._process_field(name, raw, country, mandatory)

        present = set(record.fields) | {raw.kind for raw in record.fields.values()}
        for kind in sorted((schema.mandatory or frozenset()) - present):
            reports[kind] = FieldReport(
                kind=kind,
                outcome=ValidationOutcome.invalid_format(MISSING_REASON),
                mandatory=True,
            )

        # Validity is only decided once every field has a report
        is_valid = all(report.outcome.is_valid for report in reports.values() if report.mandatory)
        report = RecordReport(record_id=record.record_id, fields=reports, is_valid=is_valid)

        RECORDS_PROCESSED.labels(valid=str(is_valid).lower()).inc()
        RECORD_LATENCY.observe(time.perf_counter() - started)
        logger.info(
            "record_processed",
            record_id=record.record_id,
            is_valid=is_valid,
            field_count=len(reports),
            failed_fields=[
                name for name, field in reports.items() if not field.outcome.is_valid
            ],
        )
        return report

    def _process_field(
        self,
        name: str,
        raw: RawField,
        default_country: str | None,
        mandatory: bool,
    ) -> FieldReport:
        lifecycle = FieldLifecycle()
        normalized = None
        try:
            if raw.value is None or not raw.value.strip():
                # A blank has nothing to normalize and is judged on presence alone
                lifecycle.advance(FieldState.NORMALIZED)
                outcome = ValidationOutcome.invalid_format(
                    MISSING_REASON if mandatory else "empty value"
                )
            else:
                normalized = self.normalizer.normalize(raw, default_country)
                lifecycle.advance(FieldState.NORMALIZED)
                outcome = self.validator.validate(normalized)
            lifecycle.advance(FieldState.VALIDATED)
            lifecycle.advance(FieldState.REPORTED)
        except Exception as e:
            logger.exception(
                "field_processing_failed",
                field_name=name,
                field_kind=raw.kind,
                state=lifecycle.state.value,
                error_type=type(e).__name__,
            )
            lifecycle.abort()
            outcome = ValidationOutcome.unsupported(f"internal error: {type(e).__name__}")

        self._record_field(name, raw.kind, outcome, normalized)
        return FieldReport(
            kind=normalized.kind if normalized else raw.kind,
            raw=raw.value,
            normalized=normalized,
            outcome=outcome,
            state=lifecycle.state,
            mandatory=mandatory,
        )

    def _record_field(
        self,
        name: str,
        kind: str,
        outcome: ValidationOutcome,
        normalized: NormalizedField | None = None,
    ) -> None:
        FIELDS_PROCESSED.labels(
            field_kind=field_kind_label(kind), outcome=outcome.status.value
        ).inc()
        logger.debug(
            "field_processed",
            field_name=name,
            field_kind=kind,
            outcome=outcome.status.value,
            locale=normalized.locale if normalized else None,
            fallback=normalized.fallback.value if normalized else None,
        )

    def process_batch(
        self,
        records: Iterable[CustomerRecord],
        schema: RecordSchema | None = None,
        max_workers: int | None = None,
        cancel_event: threading.Event | None = None,
    ) -> list[RecordReport]:
        """Process records concurrently.

        Reports come back in input order. Records not yet started when
        `cancel_event` is set are skipped, so the result may be shorter
        than the input. A failing record gets an invalid report carrying
        the error instead of aborting the batch.
        """
        records = list(records)
        workers = max_workers or get_settings().pipeline.max_workers

        def run(record: CustomerRecord) -> RecordReport | None:
            if cancel_event is not None and cancel_event.is_set():
                return None
            try:
                return self.process(record, schema)
            except Exception as e:
                logger.exception(
                    "record_processing_failed",
                    record_id=record.record_id,
                    error_type=type(e).__name__,
                )
                return RecordReport(
                    record_id=record.record_id,
                    is_valid=False,
                    error=f"{type(e).__name__}: {e}",
                )

        with ThreadPoolExecutor(max_workers=workers) as pool:
            results = list(pool.map(run, records))

        reports = [report for report in results if report is not None]
        skipped = len(results) - len(reports)
        if skipped:
            logger.warning("batch_cancelled", processed=len(reports), skipped=skipped)
        logger.info("batch_processed", record_count=len(reports), workers=workers)
        return reports
