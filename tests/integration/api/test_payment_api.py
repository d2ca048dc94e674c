"""
Integration tests for webhook and checkout endpoints.
"""

import pytest
from django.urls import reverse

from core.domain.exceptions import CheckoutSessionNotFoundError, PaymentGatewayError
from licenses.infrastructure.models import License
from payments.domain.verifiers import ShopifyOrderVerifier
from tests.conftest import SHOPIFY_SECRET, checkout_completed, shopify_order, stripe_signature
from tests.fakes import RecordingAnnotator, timing_out_annotator


def post_stripe(client, payload, signature=None):
    return client.generic(
        "POST",
        reverse("stripe-webhook"),
        payload,
        content_type="application/json",
        HTTP_STRIPE_SIGNATURE=stripe_signature(payload) if signature is None else signature,
    )


def post_shopify(client, payload, signature=None):
    if signature is None:
        signature = ShopifyOrderVerifier(SHOPIFY_SECRET).compute_signature(payload)
    return client.generic(
        "POST",
        reverse("shopify-webhook"),
        payload,
        content_type="application/json",
        HTTP_X_SHOPIFY_HMAC_SHA256=signature,
    )


@pytest.fixture
def annotator(monkeypatch):
    """Replace the Shopify annotator used by the Celery task."""
    recording = RecordingAnnotator()
    monkeypatch.setattr("orders.tasks.build_order_annotator", lambda: recording)
    return recording


@pytest.mark.django_db
@pytest.mark.integration
class TestStripeWebhookAPI:
    """Integration tests for POST /webhook."""

    def test_checkout_completed_issues_one_license(self, client, annotator):
        """Signed checkout for a@b.com / order 1001 stores one active record and annotates the order."""
        response = post_stripe(client, checkout_completed(email="a@b.com", order_ref="1001"))

        assert response.status_code == 200
        assert response.json() == {"received": True}
        row = License.objects.get()
        assert row.email == "a@b.com"
        assert row.active is True
        assert row.activated_at is None
        assert row.external_order_ref == "1001"
        assert annotator.calls == [("1001", row.key)]

    def test_redelivery_does_not_duplicate(self, client, annotator):
        payload = checkout_completed()

        post_stripe(client, payload)
        response = post_stripe(client, payload)

        assert response.status_code == 200
        assert License.objects.count() == 1
        assert len(annotator.calls) == 1

    def test_invalid_signature(self, client, annotator):
        payload = checkout_completed()

        response = post_stripe(client, payload, signature="t=1,v1=deadbeef")

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_SIGNATURE"
        assert License.objects.count() == 0
        assert annotator.calls == []

    def test_missing_signature_header(self, client):
        response = client.generic(
            "POST", "/webhook", checkout_completed(), content_type="application/json"
        )

        assert response.status_code == 400

    def test_oversized_order_ref_is_rejected_not_retried(self, client, annotator):
        """An order ref too long to store is a 400, so Stripe stops redelivering."""
        response = post_stripe(client, checkout_completed(order_ref="x" * 500))

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "MALFORMED_EVENT"
        assert License.objects.count() == 0
        assert annotator.calls == []

    def test_ignored_event(self, client):
        payload = b'{"type": "customer.created", "data": {"object": {}}}'

        response = post_stripe(client, payload)

        assert response.status_code == 200
        assert License.objects.count() == 0

    def test_store_failure_returns_500_without_annotation(self, client, annotator, monkeypatch):
        from core.domain.exceptions import StoreError
        from licenses.infrastructure.repositories.django_license_store import DjangoLicenseStore

        async def failing_insert(self, records):
            raise StoreError("database unavailable")

        monkeypatch.setattr(DjangoLicenseStore, "insert", failing_insert)

        response = post_stripe(client, checkout_completed())

        assert response.status_code == 500
        assert response.json()["error"]["code"] == "STORE_ERROR"
        assert "license" not in response.json()
        assert annotator.calls == []

    def test_annotation_timeout_does_not_change_response(self, client, monkeypatch):
        monkeypatch.setattr("orders.tasks.build_order_annotator", timing_out_annotator)
        baseline = post_stripe(client, checkout_completed(order_ref="2001"))

        response = post_stripe(client, checkout_completed(email="c@d.com", order_ref="2002"))

        assert response.status_code == baseline.status_code == 200
        assert response.json() == baseline.json()
        assert License.objects.filter(external_order_ref="2002").exists()


@pytest.mark.django_db
@pytest.mark.integration
class TestShopifyWebhookAPI:
    """Integration tests for POST /shopify-webhook."""

    def test_signed_order_issues_license(self, client, annotator):
        response = post_shopify(client, shopify_order(order_id=5001, email="buyer@example.com"))

        assert response.status_code == 200
        row = License.objects.get(external_order_ref="5001")
        assert row.email == "buyer@example.com"
        assert annotator.calls == [("5001", row.key)]

    def test_unsigned_order_rejected(self, client):
        response = client.generic(
            "POST", "/shopify-webhook", shopify_order(), content_type="application/json"
        )

        assert response.status_code == 400
        assert License.objects.count() == 0

    def test_unconfigured_secret_rejects(self, client, settings):
        payload = shopify_order()
        signature = ShopifyOrderVerifier(SHOPIFY_SECRET).compute_signature(payload)
        settings.SHOPIFY_WEBHOOK_SECRET = ""

        response = post_shopify(client, payload, signature=signature)

        assert response.status_code == 400
        assert License.objects.count() == 0

    def test_same_order_from_both_sources_is_one_license(self, client, annotator):
        post_stripe(client, checkout_completed(email="buyer@example.com", order_ref="5001"))
        post_shopify(client, shopify_order(order_id=5001, email="buyer@example.com"))

        assert License.objects.filter(external_order_ref="5001").count() == 1


class FakeGateway:
    def __init__(self, email=None, error=None):
        self.email = email
        self.error = error

    async def create_checkout_session(self, external_order_ref=None):
        if self.error:
            raise self.error
        return f"https://checkout.stripe.com/c/pay/cs_test?ref={external_order_ref}"

    async def get_session_email(self, session_id):
        if self.error:
            raise self.error
        return self.email


@pytest.mark.django_db
@pytest.mark.integration
class TestCheckoutAPI:
    """Integration tests for /get-license and /create-checkout-session."""

    def test_get_license_for_session(self, client, api_client, monkeypatch):
        post_stripe(client, checkout_completed(email="a@b.com", order_ref="1001"))
        monkeypatch.setattr(
            "api.v1.payments.views.build_payment_gateway", lambda: FakeGateway(email="a@b.com")
        )

        response = api_client.get(reverse("get-license"), {"session_id": "cs_test_1"})

        assert response.status_code == 200
        assert response.json() == {"license": License.objects.get().key}

    def test_get_license_none_yet(self, api_client, monkeypatch):
        monkeypatch.setattr(
            "api.v1.payments.views.build_payment_gateway", lambda: FakeGateway(email="a@b.com")
        )

        response = api_client.get("/get-license", {"session_id": "cs_test_1"})

        assert response.status_code == 404

    def test_get_license_unknown_session(self, api_client, monkeypatch):
        monkeypatch.setattr(
            "api.v1.payments.views.build_payment_gateway",
            lambda: FakeGateway(error=CheckoutSessionNotFoundError()),
        )

        response = api_client.get("/get-license", {"session_id": "cs_missing"})

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "CHECKOUT_SESSION_NOT_FOUND"

    def test_get_license_requires_session_id(self, api_client):
        response = api_client.get("/get-license")

        assert response.status_code == 400

    def test_create_checkout_session(self, api_client, monkeypatch):
        monkeypatch.setattr("api.v1.payments.views.build_payment_gateway", lambda: FakeGateway())

        response = api_client.post(
            reverse("create-checkout-session"), {"external_order_ref": "1001"}, format="json"
        )

        assert response.status_code == 200
        assert response.json()["url"].endswith("ref=1001")

    def test_create_checkout_session_gateway_failure(self, api_client, monkeypatch):
        monkeypatch.setattr(
            "api.v1.payments.views.build_payment_gateway",
            lambda: FakeGateway(error=PaymentGatewayError("stripe down")),
        )

        response = api_client.post("/create-checkout-session", {}, format="json")

        assert response.status_code == 502
        assert response.json()["error"]["code"] == "PAYMENT_GATEWAY_ERROR"
