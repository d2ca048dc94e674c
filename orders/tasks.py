"""
Celery tasks for order annotation.

Annotation is fire-and-forget: failures are logged and counted, never
retried and never propagated to the request that issued the license.
"""
import logging

from django.conf import settings

from LicenseGateway.celery import app

from core.domain.exceptions import AnnotationError
from core.metrics import order_annotations_total
from orders.infrastructure.shopify_annotator import ShopifyOrderAnnotator
from orders.ports.order_annotator import OrderAnnotator

logger = logging.getLogger(__name__)


def build_order_annotator() -> OrderAnnotator:
    """Build the annotator from settings."""
    return ShopifyOrderAnnotator(
        shop_url=settings.SHOPIFY_SHOP_URL,
        access_token=settings.SHOPIFY_ACCESS_TOKEN,
        api_version=settings.SHOPIFY_API_VERSION,
        timeout=settings.ORDER_ANNOTATION_TIMEOUT_SECONDS,
    )


def annotate_order(annotator: OrderAnnotator, order_ref: str, license_key: str) -> str:
    """
    Annotate one order and record the outcome.

    Returns:
        "skipped", "annotated" or "failed"
    """
    if not annotator.is_configured:
        logger.info(
            "Order system not configured, skipping annotation",
            extra={"external_order_ref": order_ref},
        )
        order_annotations_total.labels(outcome="skipped").inc()
        return "skipped"

    try:
        annotator.annotate(order_ref, license_key)
    except AnnotationError as e:
        logger.error(
            "Order annotation failed: %s",
            e.message,
            extra={"external_order_ref": order_ref, "license_key": license_key},
        )
        order_annotations_total.labels(outcome="failed").inc()
        return "failed"

    order_annotations_total.labels(outcome="annotated").inc()
    return "annotated"


@app.task(ignore_result=True)
def annotate_order_task(order_ref: str, license_key: str) -> str:
    """
    Celery task for order annotation.

    Args:
        order_ref: Storefront order id
        license_key: Issued license key
    """
    return annotate_order(build_order_annotator(), order_ref, license_key)
