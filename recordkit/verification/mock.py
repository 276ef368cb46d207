"""Mock verification collaborators for testing and local runs."""

import asyncio
from typing import Any

from recordkit.verification.base import (
    AddressLookup,
    AddressLookupResult,
    FieldVerifier,
    VerificationResult,
)


class _Flaky:
    """Shared failure and latency simulation."""

    def __init__(self, fail_times: int = 0, delay: float = 0.0) -> None:
        self._fail_times = fail_times
        self._delay = delay
        self._call_history: list[dict[str, Any]] = []

    @property
    def call_history(self) -> list[dict[str, Any]]:
        """Return history of calls for testing assertions."""
        return self._call_history

    def clear_history(self) -> None:
        """Clear call history."""
        self._call_history.clear()

    async def _simulate(self, value: str, country: str | None) -> None:
        self._call_history.append({"value": value, "country": country})
        if self._delay:
            await asyncio.sleep(self._delay)
        if len(self._call_history) <= self._fail_times:
            raise ConnectionError("mock collaborator unavailable")


class MockAddressLookup(_Flaky, AddressLookup):
    """Mock address registry.

    Knows the addresses it is given; everything else exists or not
    according to `default_exists`. The first `fail_times` calls raise
    ConnectionError and every call sleeps `delay` seconds.
    """

    def __init__(
        self,
        known: dict[str, AddressLookupResult] | None = None,
        default_exists: bool = True,
        fail_times: int = 0,
        delay: float = 0.0,
    ) -> None:
        super().__init__(fail_times=fail_times, delay=delay)
        self._known = known or {}
        self._default_exists = default_exists

    @property
    def provider_name(self) -> str:
        """Return the provider name."""
        return "mock_address_lookup"

    async def lookup_address(
        self,
        normalized_address: str,
        country: str | None,
    ) -> AddressLookupResult:
        await self._simulate(normalized_address, country)
        if normalized_address in self._known:
            return self._known[normalized_address]
        return AddressLookupResult(exists=self._default_exists)


class MockFieldVerifier(_Flaky, FieldVerifier):
    """Mock phone/email verifier.

    `results` maps values to verdicts; other values get `default`.
    """

    def __init__(
        self,
        results: dict[str, bool] | None = None,
        default: bool = True,
        fail_times: int = 0,
        delay: float = 0.0,
        name: str = "mock_verifier",
    ) -> None:
        super().__init__(fail_times=fail_times, delay=delay)
        self._results = results or {}
        self._default = default
        self._name = name

    @property
    def provider_name(self) -> str:
        """Return the provider name."""
        return self._name

    async def verify(
        self,
        normalized_value: str,
        country: str | None,
    ) -> VerificationResult:
        await self._simulate(normalized_value, country)
        verified = self._results.get(normalized_value, self._default)
        return VerificationResult(verified=verified, metadata={"source": "mock"})
