"""
Order annotator port (interface).
"""
from abc import ABC, abstractmethod


class OrderAnnotator(ABC):
    """Abstract sink that records a license key on a storefront order."""

    @property
    @abstractmethod
    def is_configured(self) -> bool:
        """Whether credentials for the order system are present."""
        pass

    @abstractmethod
    def annotate(self, order_ref: str, license_key: str) -> None:
        """
        Attach a license key to an order.

        Args:
            order_ref: Storefront order id
            license_key: Issued license key

        Raises:
            AnnotationError: If the order system rejected or did not answer the call
        """
        pass
