"""
Pytest configuration and shared fixtures.
"""

import hashlib
import hmac
import json
import time

import pytest

from core.infrastructure.events import InMemoryEventBus
from payments.domain.verifiers import ShopifyOrderVerifier, StripeEventVerifier
from tests.fakes import InMemoryLicenseStore, RecordingEventBus

STRIPE_SECRET = "whsec_test_secret"
SHOPIFY_SECRET = "shpss_test_secret"


def stripe_signature(payload: bytes, secret: str = STRIPE_SECRET, timestamp: int = None) -> str:
    """Build a Stripe-Signature header the way Stripe signs deliveries."""
    timestamp = int(time.time()) if timestamp is None else timestamp
    signed = f"{timestamp}.".encode("utf-8") + payload
    digest = hmac.new(secret.encode("utf-8"), signed, hashlib.sha256).hexdigest()
    return f"t={timestamp},v1={digest}"


def checkout_completed(email="a@b.com", order_ref="1001", session_id="cs_test_1") -> bytes:
    """Raw body of a checkout.session.completed event."""
    event = {
        "id": "evt_test_1",
        "type": "checkout.session.completed",
        "data": {
            "object": {
                "id": session_id,
                "object": "checkout.session",
                "customer_details": {"email": email},
                "metadata": {"external_order_ref": order_ref} if order_ref else {},
            }
        },
    }
    return json.dumps(event).encode("utf-8")


def shopify_order(order_id=5001, email="buyer@example.com") -> bytes:
    """Raw body of a Shopify orders/create delivery."""
    return json.dumps({"id": order_id, "email": email, "total_price": "19.00"}).encode("utf-8")


@pytest.fixture
def license_store():
    """Fixture for an in-memory LicenseStore."""
    return InMemoryLicenseStore()


@pytest.fixture
def recording_bus():
    """Fixture for an event bus that records published events."""
    return RecordingEventBus()


@pytest.fixture
def event_bus():
    """Fixture for a fresh in-memory event bus."""
    return InMemoryEventBus()


@pytest.fixture
def stripe_verifier():
    """Fixture for a Stripe verifier using the real signature primitive."""
    return StripeEventVerifier(secret=STRIPE_SECRET, tolerance=300)


@pytest.fixture
def shopify_verifier():
    """Fixture for a Shopify verifier."""
    return ShopifyOrderVerifier(secret=SHOPIFY_SECRET)


@pytest.fixture
def django_license_store():
    """Fixture for the Django-backed LicenseStore."""
    from licenses.infrastructure.repositories.django_license_store import DjangoLicenseStore

    return DjangoLicenseStore()


@pytest.fixture
def api_client():
    """Fixture for DRF API client."""
    from rest_framework.test import APIClient

    return APIClient()
