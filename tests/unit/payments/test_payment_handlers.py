"""
Unit tests for payment handlers.
"""

import json
from dataclasses import replace
from datetime import timedelta

import pytest

from core.domain.exceptions import (
    AuthenticityError,
    CheckoutSessionNotFoundError,
    LicenseNotFoundError,
    MalformedEventError,
    StoreError,
)
from core.infrastructure.event_handlers import register_event_handlers
from licenses.domain.events import LicenseIssued
from licenses.domain.license import License
from orders.application.event_handlers import OrderAnnotationEventHandler
from payments.application.commands.create_checkout_session import CreateCheckoutSessionCommand
from payments.application.commands.process_payment_event import ProcessPaymentEventCommand
from payments.application.handlers.create_checkout_session_handler import (
    CreateCheckoutSessionHandler,
)
from payments.application.handlers.get_license_by_session_handler import (
    GetLicenseBySessionHandler,
)
from payments.application.handlers.process_payment_event_handler import (
    ProcessPaymentEventHandler,
)
from payments.application.queries.get_license_by_session import GetLicenseBySessionQuery
from payments.ports.payment_gateway import PaymentGateway
from tests.conftest import checkout_completed, shopify_order, stripe_signature


def _signed(payload: bytes) -> ProcessPaymentEventCommand:
    return ProcessPaymentEventCommand(payload=payload, signature=stripe_signature(payload))


@pytest.fixture
def queued():
    """Orders queued for annotation."""
    return []


@pytest.fixture
def annotating_bus(event_bus, queued):
    """Event bus wired with the order annotation handler."""
    event_bus.subscribe(
        LicenseIssued,
        OrderAnnotationEventHandler(enqueue=lambda ref, key: queued.append((ref, key))),
    )
    return event_bus


@pytest.mark.asyncio
class TestProcessPaymentEventHandler:
    """Tests for ProcessPaymentEventHandler."""

    async def test_checkout_issues_license_and_annotates_order(
        self, stripe_verifier, license_store, annotating_bus, queued
    ):
        """One signed checkout event produces one active record and one annotation."""
        handler = ProcessPaymentEventHandler(stripe_verifier, license_store, annotating_bus)

        result = await handler.handle(_signed(checkout_completed(email="a@b.com", order_ref="1001")))

        assert result.received is True
        assert result.created is True
        assert len(license_store.records) == 1
        record = license_store.records[result.license_key]
        assert record.email == "a@b.com"
        assert record.active is True
        assert record.activated_at is None
        assert record.external_order_ref == "1001"
        assert queued == [("1001", record.key)]

    async def test_redelivery_is_idempotent(
        self, stripe_verifier, license_store, annotating_bus, queued
    ):
        handler = ProcessPaymentEventHandler(stripe_verifier, license_store, annotating_bus)
        payload = checkout_completed()

        first = await handler.handle(_signed(payload))
        second = await handler.handle(_signed(payload))

        assert second.created is False
        assert second.license_key == first.license_key
        assert len(license_store.records) == 1
        assert len(queued) == 1

    async def test_tampered_event_never_touches_store(
        self, stripe_verifier, license_store, annotating_bus, queued
    ):
        handler = ProcessPaymentEventHandler(stripe_verifier, license_store, annotating_bus)
        payload = checkout_completed()
        command = ProcessPaymentEventCommand(
            payload=payload.replace(b"1001", b"9999"),
            signature=stripe_signature(payload),
        )

        with pytest.raises(AuthenticityError):
            await handler.handle(command)

        assert license_store.insert_calls == 0
        assert queued == []

    async def test_ignored_event_type(self, stripe_verifier, license_store, annotating_bus):
        handler = ProcessPaymentEventHandler(stripe_verifier, license_store, annotating_bus)
        payload = json.dumps({"type": "invoice.paid", "data": {"object": {}}}).encode("utf-8")

        result = await handler.handle(_signed(payload))

        assert result.received is True
        assert result.kind == "ignored"
        assert result.license_key is None
        assert license_store.insert_calls == 0

    async def test_store_failure_skips_annotation(
        self, stripe_verifier, license_store, annotating_bus, queued
    ):
        """A failed insert returns no key and never reaches the annotator."""
        license_store.fail_inserts = True
        handler = ProcessPaymentEventHandler(stripe_verifier, license_store, annotating_bus)

        with pytest.raises(StoreError):
            await handler.handle(_signed(checkout_completed()))

        assert license_store.records == {}
        assert queued == []

    async def test_annotation_failure_does_not_change_result(
        self, stripe_verifier, license_store, event_bus
    ):
        """A broken annotation handler leaves the license and the result intact."""

        def broken_enqueue(ref, key):
            raise ConnectionError("broker unreachable")

        event_bus.subscribe(LicenseIssued, OrderAnnotationEventHandler(enqueue=broken_enqueue))
        handler = ProcessPaymentEventHandler(stripe_verifier, license_store, event_bus)

        result = await handler.handle(_signed(checkout_completed()))

        assert result.created is True
        assert result.license_key in license_store.records

    async def test_no_order_ref_issues_without_annotation(
        self, stripe_verifier, license_store, annotating_bus, queued
    ):
        handler = ProcessPaymentEventHandler(stripe_verifier, license_store, annotating_bus)

        result = await handler.handle(_signed(checkout_completed(order_ref=None)))

        assert result.created is True
        assert queued == []

    async def test_shopify_order_issues_license(
        self, shopify_verifier, license_store, annotating_bus, queued
    ):
        handler = ProcessPaymentEventHandler(shopify_verifier, license_store, annotating_bus)
        payload = shopify_order(order_id=5001, email="Buyer@Example.com")

        result = await handler.handle(
            ProcessPaymentEventCommand(
                payload=payload, signature=shopify_verifier.compute_signature(payload)
            )
        )

        record = license_store.records[result.license_key]
        assert record.email == "buyer@example.com"
        assert record.external_order_ref == "5001"
        assert queued == [("5001", record.key)]

    async def test_malformed_event(self, stripe_verifier, license_store, recording_bus):
        handler = ProcessPaymentEventHandler(stripe_verifier, license_store, recording_bus)

        with pytest.raises(MalformedEventError):
            await handler.handle(_signed(b"[1, 2, 3]"))

        assert recording_bus.published == []

    async def test_registered_handlers_include_order_annotation(self, event_bus):
        register_event_handlers(event_bus)

        handler_types = {type(h) for h in event_bus._handlers[LicenseIssued]}

        assert OrderAnnotationEventHandler in handler_types


class FakeGateway(PaymentGateway):
    """PaymentGateway double."""

    def __init__(self, email=None, url="https://checkout.stripe.com/c/pay/cs_test_1"):
        self.email = email
        self.url = url
        self.created_refs = []

    async def create_checkout_session(self, external_order_ref=None):
        self.created_refs.append(external_order_ref)
        return self.url

    async def get_session_email(self, session_id):
        if self.email is None:
            raise CheckoutSessionNotFoundError()
        return self.email


@pytest.mark.asyncio
class TestGetLicenseBySessionHandler:
    """Tests for GetLicenseBySessionHandler."""

    async def test_returns_latest_license_for_session_email(self, license_store):
        older = License.issue(email="a@b.com", external_order_ref="1")
        newer = replace(
            License.issue(email="a@b.com", external_order_ref="2"),
            created_at=older.created_at + timedelta(seconds=1),
        )
        await license_store.insert([older])
        await license_store.insert([newer])
        handler = GetLicenseBySessionHandler(FakeGateway(email="A@B.com"), license_store)

        result = await handler.handle(GetLicenseBySessionQuery(session_id="cs_1"))

        assert result.license == newer.key

    async def test_no_license_yet(self, license_store):
        handler = GetLicenseBySessionHandler(FakeGateway(email="a@b.com"), license_store)

        with pytest.raises(LicenseNotFoundError):
            await handler.handle(GetLicenseBySessionQuery(session_id="cs_1"))

    async def test_unknown_session(self, license_store):
        handler = GetLicenseBySessionHandler(FakeGateway(email=None), license_store)

        with pytest.raises(CheckoutSessionNotFoundError):
            await handler.handle(GetLicenseBySessionQuery(session_id="cs_missing"))


@pytest.mark.asyncio
class TestCreateCheckoutSessionHandler:
    """Tests for CreateCheckoutSessionHandler."""

    async def test_returns_url_and_passes_order_ref(self):
        gateway = FakeGateway()

        result = await CreateCheckoutSessionHandler(gateway).handle(
            CreateCheckoutSessionCommand(external_order_ref=" 1001 ")
        )

        assert result.url == gateway.url
        assert gateway.created_refs == ["1001"]

    async def test_blank_order_ref_is_dropped(self):
        gateway = FakeGateway()

        await CreateCheckoutSessionHandler(gateway).handle(
            CreateCheckoutSessionCommand(external_order_ref="")
        )

        assert gateway.created_refs == [None]
