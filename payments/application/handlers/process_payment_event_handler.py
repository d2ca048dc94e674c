"""
ProcessPaymentEventHandler.

Turns an authenticated payment or order event into exactly one license.
"""

import logging
from typing import Union

from core.domain.events import EventBus
from core.domain.exceptions import DomainException
from core.infrastructure.events import event_bus as default_event_bus
from core.metrics import licenses_issued_total, payment_events_total
from licenses.domain.events import LicenseIssued
from licenses.domain.services import LicenseIssuer
from licenses.ports.license_store import LicenseStore
from payments.application.commands.process_payment_event import ProcessPaymentEventCommand
from payments.application.dto.payment_dto import PaymentEventResultDTO
from payments.domain.verifiers import ShopifyOrderVerifier, StripeEventVerifier

logger = logging.getLogger(__name__)


class ProcessPaymentEventHandler:
    """Handler for ProcessPaymentEventCommand."""

    def __init__(
        self,
        verifier: Union[StripeEventVerifier, ShopifyOrderVerifier],
        license_store: LicenseStore,
        event_bus: EventBus = None,
    ):
        """Initialize handler with a verifier for one event source."""
        self.verifier = verifier
        self.issuer = LicenseIssuer(license_store)
        self.event_bus = event_bus or default_event_bus

    async def handle(self, command: ProcessPaymentEventCommand) -> PaymentEventResultDTO:
        """
        Handle an inbound event.

        The license is persisted before LicenseIssued is published, and the
        event is published only for a newly created record, so a failed
        insert or a redelivery never reaches the order annotator.

        Args:
            command: ProcessPaymentEventCommand

        Returns:
            PaymentEventResultDTO describing the outcome

        Raises:
            AuthenticityError: If the signature does not match
            MalformedEventError: If the verified body lacks required fields
            EmailMissingError: If the purchase has no email
            StoreError: If the license could not be persisted
        """
        source = self.verifier.source
        try:
            trigger = self.verifier.verify(command.payload, command.signature)
        except DomainException as e:
            payment_events_total.labels(source=source, outcome="rejected").inc()
            logger.warning("Rejected %s event: %s", source, e.message, extra={"code": e.code})
            raise

        if not trigger.issues_license:
            payment_events_total.labels(source=source, outcome="ignored").inc()
            logger.info("Ignoring %s event that does not issue a license", source)
            return PaymentEventResultDTO(received=True, kind=trigger.kind.value)

        try:
            result = await self.issuer.issue(trigger)
        except DomainException:
            payment_events_total.labels(source=source, outcome="failed").inc()
            raise

        record = result.license
        if not result.created:
            payment_events_total.labels(source=source, outcome="duplicate").inc()
            return PaymentEventResultDTO(
                received=True,
                kind=trigger.kind.value,
                license_key=record.key,
                created=False,
            )

        payment_events_total.labels(source=source, outcome="issued").inc()
        licenses_issued_total.labels(source=source).inc()
        logger.info(
            "License issued",
            extra={
                "license_key": record.key,
                "external_order_ref": record.external_order_ref,
                "source": source,
            },
        )

        await self.event_bus.publish(
            LicenseIssued(
                aggregate_id=record.key,
                license_key=record.key,
                email=record.email,
                external_order_ref=record.external_order_ref,
                source=source,
            )
        )

        return PaymentEventResultDTO(
            received=True,
            kind=trigger.kind.value,
            license_key=record.key,
            created=True,
        )
