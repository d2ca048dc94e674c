"""
Payment DTOs for API responses.
"""
from dataclasses import dataclass
from typing import Optional


@dataclass
class PaymentEventResultDTO:
    """Outcome of processing an inbound event."""

    received: bool
    kind: str
    license_key: Optional[str] = None
    created: bool = False


@dataclass
class SessionLicenseDTO:
    """License key resolved from a checkout session."""

    license: str


@dataclass
class CheckoutSessionDTO:
    """Hosted checkout redirect."""

    url: str
