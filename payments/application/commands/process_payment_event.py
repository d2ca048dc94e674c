"""
ProcessPaymentEventCommand.

Command to process a signed inbound payment or order event.
"""
from dataclasses import dataclass


@dataclass(frozen=True)
class ProcessPaymentEventCommand:
    """Raw event body and the signature header delivered with it."""

    payload: bytes
    signature: str
