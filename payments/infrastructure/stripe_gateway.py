"""
Stripe implementation of the PaymentGateway port.
"""
import logging
from typing import Optional

import stripe
from asgiref.sync import sync_to_async

from core.domain.exceptions import CheckoutSessionNotFoundError, PaymentGatewayError
from payments.ports.payment_gateway import PaymentGateway

logger = logging.getLogger(__name__)


class StripePaymentGateway(PaymentGateway):
    """
    Stripe Checkout adapter.

    Uses a per-call API key so the module-level stripe configuration is
    never mutated.
    """

    def __init__(
        self,
        api_key: str,
        price_id: str,
        success_url: str,
        cancel_url: str,
        stripe_client=stripe,
    ):
        """Initialize gateway with Stripe credentials and checkout settings."""
        self.api_key = api_key
        self.price_id = price_id
        self.success_url = success_url
        self.cancel_url = cancel_url
        self._stripe = stripe_client

    async def create_checkout_session(self, external_order_ref: Optional[str] = None) -> str:
        """
        Create a one-off payment Checkout Session.

        Args:
            external_order_ref: Storefront order reference to carry through checkout

        Returns:
            Hosted checkout URL
        """
        if not self.api_key or not self.price_id:
            raise PaymentGatewayError("Stripe checkout is not configured")

        params = {
            "mode": "payment",
            "line_items": [{"price": self.price_id, "quantity": 1}],
            "success_url": self.success_url,
            "cancel_url": self.cancel_url,
            "api_key": self.api_key,
        }
        if external_order_ref:
            params["client_reference_id"] = external_order_ref
            params["metadata"] = {"external_order_ref": external_order_ref}

        try:
            session = await sync_to_async(self._stripe.checkout.Session.create)(**params)
        except stripe.StripeError as e:
            logger.error("Stripe checkout session creation failed: %s", e)
            raise PaymentGatewayError(f"Could not create checkout session: {e}") from e

        logger.info(
            "Checkout session created",
            extra={"session_id": session.id, "external_order_ref": external_order_ref},
        )
        return session.url

    async def get_session_email(self, session_id: str) -> str:
        """
        Resolve a Checkout Session to its customer email.

        Args:
            session_id: Checkout session id

        Returns:
            Customer email
        """
        if not self.api_key:
            raise PaymentGatewayError("Stripe is not configured")

        try:
            session = await sync_to_async(self._stripe.checkout.Session.retrieve)(
                session_id, api_key=self.api_key
            )
        except stripe.InvalidRequestError as e:
            logger.info("Unknown checkout session %s: %s", session_id, e)
            raise CheckoutSessionNotFoundError(f"Checkout session {session_id} not found") from e
        except stripe.StripeError as e:
            logger.error("Stripe session lookup failed: %s", e)
            raise PaymentGatewayError(f"Could not retrieve checkout session: {e}") from e

        # StripeObject is not a dict; missing fields raise AttributeError
        customer_details = getattr(session, "customer_details", None)
        email = getattr(customer_details, "email", None) or getattr(
            session, "customer_email", None
        )
        if not email:
            raise CheckoutSessionNotFoundError(f"Checkout session {session_id} has no customer email")
        return email
