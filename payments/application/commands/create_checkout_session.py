"""
CreateCheckoutSessionCommand.
"""
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class CreateCheckoutSessionCommand:
    """Command to start a hosted checkout."""

    external_order_ref: Optional[str] = None
