"""
Issuance trigger.

A trigger is the authenticated, normalized form of an inbound payment or
order event. Every issuance path produces one before a license is minted.
"""
from dataclasses import dataclass
from typing import Optional

from core.domain.value_objects import EventKind


@dataclass(frozen=True)
class Trigger:
    """Normalized issuance trigger."""

    email: Optional[str]
    external_order_ref: Optional[str]
    kind: EventKind
    source: str
    session_id: Optional[str] = None

    @property
    def issues_license(self) -> bool:
        """Whether this event kind mints a license."""
        return self.kind in (EventKind.CHECKOUT_COMPLETED, EventKind.ORDER_CREATED)
