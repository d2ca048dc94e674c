"""
Payment gateway port (interface).

Checkout session operations delegated to the payment processor.
"""
from abc import ABC, abstractmethod
from typing import Optional


class PaymentGateway(ABC):
    """Abstract payment processor client."""

    @abstractmethod
    async def create_checkout_session(self, external_order_ref: Optional[str] = None) -> str:
        """
        Create a hosted checkout session for the product.

        Args:
            external_order_ref: Storefront order reference to carry through checkout

        Returns:
            URL the customer is redirected to

        Raises:
            PaymentGatewayError: If the processor call fails
        """
        pass

    @abstractmethod
    async def get_session_email(self, session_id: str) -> str:
        """
        Resolve a checkout session to the customer's email.

        Args:
            session_id: Checkout session id

        Returns:
            Customer email

        Raises:
            CheckoutSessionNotFoundError: If the session is unknown or has no email
            PaymentGatewayError: If the processor call fails
        """
        pass
