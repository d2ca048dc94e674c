"""
Shopify implementation of the OrderAnnotator port.
"""
import logging

import requests

from core.domain.exceptions import AnnotationError
from orders.ports.order_annotator import OrderAnnotator

logger = logging.getLogger(__name__)


class ShopifyOrderAnnotator(OrderAnnotator):
    """Writes the license key into a Shopify order's note attributes."""

    def __init__(
        self,
        shop_url: str,
        access_token: str,
        api_version: str = "2024-10",
        timeout: float = 10,
        session: requests.Session = None,
    ):
        """
        Initialize annotator.

        Args:
            shop_url: Shop domain, with or without scheme (e.g. "store.myshopify.com")
            access_token: Admin API access token
            api_version: Admin API version segment
            timeout: Seconds before the call counts as failed
            session: Optional requests session
        """
        self.shop_url = (shop_url or "").strip()
        self.access_token = access_token or ""
        self.api_version = api_version
        self.timeout = timeout
        self.session = session or requests.Session()

    @property
    def is_configured(self) -> bool:
        return bool(self.shop_url and self.access_token)

    def order_url(self, order_ref: str) -> str:
        """Admin API URL for an order."""
        shop = self.shop_url
        for prefix in ("https://", "http://"):
            if shop.startswith(prefix):
                shop = shop[len(prefix):]
        shop = shop.rstrip("/")
        return f"https://{shop}/admin/api/{self.api_version}/orders/{order_ref}.json"

    def annotate(self, order_ref: str, license_key: str) -> None:
        payload = {
            "order": {
                "id": order_ref,
                "note_attributes": [{"name": "license_key", "value": license_key}],
            }
        }
        headers = {
            "Content-Type": "application/json",
            "X-Shopify-Access-Token": self.access_token,
        }

        try:
            response = self.session.put(
                self.order_url(order_ref),
                json=payload,
                headers=headers,
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.exceptions.Timeout as e:
            raise AnnotationError(
                f"Timed out annotating order {order_ref} after {self.timeout}s"
            ) from e
        except requests.exceptions.RequestException as e:
            raise AnnotationError(f"Failed to annotate order {order_ref}: {e}") from e

        logger.info(
            "Order annotated with license key",
            extra={"external_order_ref": order_ref, "status_code": response.status_code},
        )
