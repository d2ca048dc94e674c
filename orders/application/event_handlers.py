"""
Event handlers bridging license events to order annotation.
"""
import logging

from asgiref.sync import sync_to_async

from core.domain.events import DomainEvent, EventHandler
from licenses.domain.events import LicenseIssued

logger = logging.getLogger(__name__)


class OrderAnnotationEventHandler(EventHandler):
    """Queues order annotation for every license issued against an order."""

    def __init__(self, enqueue=None):
        """
        Args:
            enqueue: Callable taking (order_ref, license_key); defaults to
                annotate_order_task.delay
        """
        if enqueue is None:
            from orders.tasks import annotate_order_task

            enqueue = annotate_order_task.delay
        self.enqueue = enqueue

    async def handle(self, event: DomainEvent) -> None:
        if not isinstance(event, LicenseIssued):
            return
        if not event.external_order_ref:
            logger.debug("License %s has no order to annotate", event.license_key)
            return

        await sync_to_async(self.enqueue)(event.external_order_ref, event.license_key)
        logger.info(
            "Order annotation queued",
            extra={"external_order_ref": event.external_order_ref, "license_key": event.license_key},
        )
