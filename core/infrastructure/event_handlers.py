"""
Event handlers for domain events.

These handlers process domain events for side effects like audit logging
and order annotation.
"""

import logging

from core.domain.events import DomainEvent, EventHandler
from licenses.domain.events import LicenseActivated, LicenseIssued, LicensesGenerated

logger = logging.getLogger(__name__)


class AuditLogEventHandler(EventHandler):
    """
    Event handler for audit logging.

    Writes every license event to the audit logger.
    """

    async def handle(self, event: DomainEvent) -> None:
        """
        Handle domain event for audit logging.

        Args:
            event: Domain event to log
        """
        logger.info(
            "Audit log: %s - %s",
            event.event_type,
            event.aggregate_id,
            extra={
                "event_id": str(event.event_id),
                "event_type": event.event_type,
                "aggregate_id": event.aggregate_id,
                "occurred_at": event.occurred_at.isoformat(),
            },
        )


def register_event_handlers(bus=None):
    """Register all event handlers with the event bus."""
    from core.infrastructure.events import event_bus
    from orders.application.event_handlers import OrderAnnotationEventHandler

    bus = bus or event_bus
    audit_handler = AuditLogEventHandler()

    bus.subscribe(LicenseIssued, audit_handler)
    bus.subscribe(LicensesGenerated, audit_handler)
    bus.subscribe(LicenseActivated, audit_handler)

    bus.subscribe(LicenseIssued, OrderAnnotationEventHandler())

    logger.info("Event handlers registered")
