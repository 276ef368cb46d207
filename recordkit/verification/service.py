"""Verification service: an optional async second pass over a record report.

Each collaborator call is bounded by a timeout and retried with
exponential backoff. A collaborator that stays down never fails the
record; it leaves a trace in the field's verification entry instead.
"""

import asyncio
import time
from collections.abc import Awaitable, Callable, Mapping
from functools import partial
from typing import Any, TypeVar

from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)
from tenacity.wait import wait_base

from recordkit.config import get_settings
from recordkit.errors import VerificationUnavailableError
from recordkit.observability.logging import get_logger
from recordkit.observability.metrics import VERIFICATION_CALLS, VERIFICATION_LATENCY
from recordkit.records.models import FieldReport, FieldVerification, RecordReport
from recordkit.rules import FieldKind
from recordkit.validation import OutcomeStatus, ValidationOutcome
from recordkit.verification.base import AddressLookup, FieldVerifier

logger = get_logger(__name__)

T = TypeVar("T")

# Confidence left on a valid address whose existence couldn't be checked
UNVERIFIED_ADDRESS_CONFIDENCE = 0.5


class VerificationService:
    """Runs injected collaborators over the valid fields of a report."""

    def __init__(
        self,
        address_lookup: AddressLookup | None = None,
        verifiers: Mapping[FieldKind | str, FieldVerifier] | None = None,
        timeout: float | None = None,
        max_attempts: int | None = None,
        block_on_failure: bool | None = None,
        retry_wait: wait_base | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            address_lookup: Registry for street addresses
            verifiers: Verifiers by field kind (phone, email...)
            timeout: Seconds per call; defaults to settings
            max_attempts: Attempts per call; defaults to settings
            block_on_failure: Downgrade negative results to ambiguous;
                defaults to settings
            retry_wait: tenacity wait strategy between attempts
        """
        config = get_settings().verification
        self._address_lookup = address_lookup
        self._verifiers: dict[FieldKind, FieldVerifier] = {}
        for kind, verifier in (verifiers or {}).items():
            parsed = FieldKind.parse(kind)
            if parsed is None:
                raise ValueError(f"Unknown field kind for verifier: {kind!r}")
            self._verifiers[parsed] = verifier
        self.timeout = timeout if timeout is not None else config.timeout_seconds
        self.max_attempts = max_attempts if max_attempts is not None else config.max_attempts
        self.block_on_failure = (
            block_on_failure if block_on_failure is not None else config.block_on_failure
        )
        self._retry_wait = retry_wait or wait_exponential_jitter(initial=0.5, max=5.0)

    async def verify_report(self, report: RecordReport) -> RecordReport:
        """Verify every eligible field and return a new report.

        Only fields that validated successfully and have a collaborator are
        checked. Record validity is recomputed from the updated outcomes.
        """
        names = list(report.fields)
        updated = await asyncio.gather(
            *(self._verify_field(report.fields[name]) for name in names)
        )
        fields = dict(zip(names, updated, strict=True))
        is_valid = all(field.outcome.is_valid for field in fields.values() if field.mandatory)
        return report.model_copy(update={"fields": fields, "is_valid": is_valid})

    async def _verify_field(self, field: FieldReport) -> FieldReport:
        kind = FieldKind.parse(field.kind)
        if (
            kind is None
            or field.normalized is None
            or field.outcome.status != OutcomeStatus.VALID
        ):
            return field

        value = field.normalized.value
        country = field.normalized.locale

        if kind == FieldKind.STREET_ADDRESS:
            if self._address_lookup is None:
                return field
            collaborator = self._address_lookup.provider_name
            call: Callable[[], Awaitable[Any]] = partial(
                self._address_lookup.lookup_address, value, country
            )
        else:
            verifier = self._verifiers.get(kind)
            if verifier is None:
                return field
            collaborator = verifier.provider_name
            call = partial(verifier.verify, value, country)

        try:
            result = await self._call(collaborator, call)
        except VerificationUnavailableError as e:
            logger.warning(
                "verification_unavailable",
                collaborator=e.collaborator,
                field_kind=kind.value,
                error=e.message,
            )
            outcome = field.outcome
            if kind == FieldKind.STREET_ADDRESS:
                outcome = ValidationOutcome.ambiguous(
                    "address could not be verified: lookup unavailable",
                    UNVERIFIED_ADDRESS_CONFIDENCE,
                )
            verification = FieldVerification(collaborator=collaborator, available=False)
            return field.model_copy(update={"verification": verification, "outcome": outcome})

        if kind == FieldKind.STREET_ADDRESS:
            verified = result.exists
            verification = FieldVerification(
                collaborator=collaborator,
                available=True,
                verified=verified,
                canonical_form=result.canonical_form,
                metadata={"geocode": list(result.geocode)} if result.geocode else {},
            )
        else:
            verified = result.verified
            verification = FieldVerification(
                collaborator=collaborator,
                available=True,
                verified=verified,
                metadata=dict(result.metadata),
            )

        VERIFICATION_CALLS.labels(
            collaborator=collaborator, result="verified" if verified else "rejected"
        ).inc()

        outcome = field.outcome
        if not verified and self.block_on_failure:
            outcome = ValidationOutcome.ambiguous("failed external verification", 0.0)
        logger.debug(
            "field_verified",
            collaborator=collaborator,
            field_kind=kind.value,
            verified=verified,
            blocked=outcome is not field.outcome,
        )
        return field.model_copy(update={"verification": verification, "outcome": outcome})

    async def _call(self, collaborator: str, call: Callable[[], Awaitable[T]]) -> T:
        """Run one collaborator call with timeout and retries.

        Raises:
            VerificationUnavailableError: If every attempt failed
        """
        started = time.perf_counter()
        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(self.max_attempts),
                wait=self._retry_wait,
                retry=retry_if_exception_type(Exception),
                reraise=True,
            ):
                with attempt:
                    return await asyncio.wait_for(call(), timeout=self.timeout)
        except Exception as e:
            VERIFICATION_CALLS.labels(collaborator=collaborator, result="unavailable").inc()
            raise VerificationUnavailableError(collaborator, str(e) or type(e).__name__) from e
        finally:
            VERIFICATION_LATENCY.labels(collaborator=collaborator).observe(
                time.perf_counter() - started
            )
        raise VerificationUnavailableError(collaborator, "no attempt was made")
