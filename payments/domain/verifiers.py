"""
Payment event verifiers.

Each verifier authenticates an inbound webhook against the raw request
body and only then decodes it into a Trigger. Business fields are never
read from a payload whose signature failed.
"""
import base64
import hashlib
import hmac
import json
import logging
from typing import Any, Callable, Dict, Optional

import stripe

from core.domain.exceptions import AuthenticityError, MalformedEventError
from core.domain.value_objects import EventKind
from payments.domain.trigger import Trigger

logger = logging.getLogger(__name__)

STRIPE_CHECKOUT_COMPLETED = "checkout.session.completed"

# Matches the external_order_ref column width
MAX_ORDER_REF_LENGTH = 128


def _decode_json(payload: bytes) -> Dict[str, Any]:
    """Parse a verified payload body."""
    try:
        data = json.loads(payload)
    except (TypeError, ValueError) as e:
        raise MalformedEventError(f"Event body is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise MalformedEventError("Event body must be a JSON object")
    return data


def _clean(value: Any) -> Optional[str]:
    """Stringify and strip an optional field; empty becomes None."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _order_ref(value: Any) -> Optional[str]:
    """Clean an order reference and reject ones too long to store."""
    order_ref = _clean(value)
    if order_ref and len(order_ref) > MAX_ORDER_REF_LENGTH:
        raise MalformedEventError(
            f"Order reference exceeds {MAX_ORDER_REF_LENGTH} characters"
        )
    return order_ref


class StripeEventVerifier:
    """
    Verifier for Stripe webhook events.

    The signature check is delegated to Stripe's verification primitive and
    runs over the body bytes exactly as received.
    """

    source = "stripe"

    def __init__(
        self,
        secret: str,
        tolerance: int = 300,
        verify_signature: Callable[..., Any] = None,
    ):
        """
        Initialize verifier.

        Args:
            secret: Stripe webhook signing secret
            tolerance: Allowed timestamp skew in seconds
            verify_signature: Verification primitive, defaults to
                stripe.WebhookSignature.verify_header
        """
        self.secret = secret
        self.tolerance = tolerance
        self.verify_signature = verify_signature or stripe.WebhookSignature.verify_header

    def verify(self, payload: bytes, signature: str) -> Trigger:
        """
        Authenticate and normalize a Stripe event.

        Args:
            payload: Raw request body
            signature: Stripe-Signature header value

        Returns:
            Normalized Trigger

        Raises:
            AuthenticityError: If the signature does not match
            MalformedEventError: If required fields are missing
        """
        if not self.secret:
            logger.warning("Stripe webhook secret not configured, rejecting event")
            raise AuthenticityError("Webhook secret not configured")
        if not signature:
            raise AuthenticityError("Missing Stripe-Signature header")

        try:
            self.verify_signature(
                payload.decode("utf-8"), signature, self.secret, self.tolerance
            )
        except UnicodeDecodeError as e:
            raise AuthenticityError("Event body is not valid UTF-8") from e
        except stripe.SignatureVerificationError as e:
            logger.warning("Stripe signature verification failed: %s", e)
            raise AuthenticityError() from e

        event = _decode_json(payload)
        return self._normalize(event)

    def _normalize(self, event: Dict[str, Any]) -> Trigger:
        """Build a Trigger from a verified Stripe event."""
        event_type = event.get("type")
        if not event_type:
            raise MalformedEventError("Event has no type")

        if event_type != STRIPE_CHECKOUT_COMPLETED:
            logger.info("Ignoring Stripe event of type %s", event_type)
            return Trigger(
                email=None,
                external_order_ref=None,
                kind=EventKind.IGNORED,
                source=self.source,
            )

        session = (event.get("data") or {}).get("object")
        if not isinstance(session, dict):
            raise MalformedEventError("Checkout event has no session object")

        customer_details = session.get("customer_details") or {}
        email = _clean(customer_details.get("email")) or _clean(session.get("customer_email"))
        if not email:
            raise MalformedEventError("Checkout session has no customer email")

        metadata = session.get("metadata") or {}
        order_ref = _order_ref(metadata.get("external_order_ref")) or _order_ref(
            session.get("client_reference_id")
        )

        return Trigger(
            email=email,
            external_order_ref=order_ref,
            kind=EventKind.CHECKOUT_COMPLETED,
            source=self.source,
            session_id=_clean(session.get("id")),
        )


class ShopifyOrderVerifier:
    """
    Verifier for Shopify order-created webhooks.

    Shopify signs the raw body with HMAC-SHA256 and sends the base64 digest
    in the X-Shopify-Hmac-Sha256 header. Without a configured secret every
    event is rejected.
    """

    source = "shopify"

    def __init__(self, secret: str):
        """Initialize verifier with the shared webhook secret."""
        self.secret = secret

    def compute_signature(self, payload: bytes) -> str:
        """
        Compute the base64 HMAC-SHA256 signature for a body.

        Args:
            payload: Raw request body

        Returns:
            Base64-encoded digest
        """
        digest = hmac.new(self.secret.encode("utf-8"), payload, hashlib.sha256).digest()
        return base64.b64encode(digest).decode("utf-8")

    def verify(self, payload: bytes, signature: str) -> Trigger:
        """
        Authenticate and normalize a Shopify order event.

        Args:
            payload: Raw request body
            signature: X-Shopify-Hmac-Sha256 header value

        Returns:
            Normalized Trigger

        Raises:
            AuthenticityError: If the signature does not match
            MalformedEventError: If required fields are missing
        """
        if not self.secret:
            logger.warning("Shopify webhook secret not configured, rejecting event")
            raise AuthenticityError("Webhook secret not configured")
        if not signature:
            raise AuthenticityError("Missing X-Shopify-Hmac-Sha256 header")

        expected = self.compute_signature(payload).encode("utf-8")
        if not hmac.compare_digest(expected, signature.encode("utf-8")):
            logger.warning("Shopify signature verification failed")
            raise AuthenticityError()

        order = _decode_json(payload)

        order_id = _order_ref(order.get("id"))
        if not order_id:
            raise MalformedEventError("Order has no id")

        customer = order.get("customer") or {}
        email = _clean(order.get("email")) or _clean(customer.get("email"))
        if not email:
            raise MalformedEventError("Order has no customer email")

        return Trigger(
            email=email,
            external_order_ref=order_id,
            kind=EventKind.ORDER_CREATED,
            source=self.source,
        )
