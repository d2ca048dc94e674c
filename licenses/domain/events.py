"""
License domain events.

Domain events represent something that happened in the license domain.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from core.domain.events import DomainEvent


@dataclass(frozen=True, kw_only=True)
class LicenseIssued(DomainEvent):
    """Event raised when a payment or order produced a new license."""

    license_key: str
    email: str
    external_order_ref: Optional[str] = None
    source: str = ""


@dataclass(frozen=True, kw_only=True)
class LicensesGenerated(DomainEvent):
    """Event raised when a batch of inactive licenses was generated."""

    license_keys: Tuple[str, ...]
    email: Optional[str] = None


@dataclass(frozen=True, kw_only=True)
class LicenseActivated(DomainEvent):
    """Event raised when a license moved from inactive to active."""

    license_key: str
    activated_at: str
