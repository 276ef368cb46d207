"""External verification interfaces.

Verification asks an outside registry whether a structurally valid value
exists. It runs after validation, out-of-band, and its collaborators are
injected; nothing in the normalize/validate path touches the network.
"""

from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel, Field


class AddressLookupResult(BaseModel):
    """Answer from an address registry."""

    exists: bool = Field(..., description="Whether the address is known")
    canonical_form: str | None = Field(
        default=None, description="Registry spelling of the address"
    )
    geocode: tuple[float, float] | None = Field(
        default=None, description="(latitude, longitude)"
    )


class VerificationResult(BaseModel):
    """Answer from a phone or email verifier."""

    verified: bool = Field(..., description="Whether the value was confirmed")
    metadata: dict[str, Any] = Field(
        default_factory=dict, description="Verifier-specific details"
    )


class AddressLookup(ABC):
    """Looks up normalized street addresses."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return the collaborator name used in logs and metrics."""
        pass

    @abstractmethod
    async def lookup_address(
        self,
        normalized_address: str,
        country: str | None,
    ) -> AddressLookupResult:
        """Look up an address.

        Args:
            normalized_address: Canonical address string
            country: Country the address was normalized for

        Returns:
            AddressLookupResult
        """
        pass


class FieldVerifier(ABC):
    """Confirms a phone number, email address or other field value."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return the collaborator name used in logs and metrics."""
        pass

    @abstractmethod
    async def verify(
        self,
        normalized_value: str,
        country: str | None,
    ) -> VerificationResult:
        """Verify a value.

        Args:
            normalized_value: Canonical field value
            country: Country the value was normalized for

        Returns:
            VerificationResult
        """
        pass
