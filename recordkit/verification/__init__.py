"""External verification adapters.

Narrow async interfaces to address registries and phone/email verifiers,
plus a service that applies them to finished record reports.
"""

from recordkit.verification.base import (
    AddressLookup,
    AddressLookupResult,
    FieldVerifier,
    VerificationResult,
)
from recordkit.verification.mock import MockAddressLookup, MockFieldVerifier
from recordkit.verification.service import VerificationService

__all__ = [
    "AddressLookup",
    "AddressLookupResult",
    "FieldVerifier",
    "MockAddressLookup",
    "MockFieldVerifier",
    "VerificationResult",
    "VerificationService",
]
