"""
License store port (interface).

This defines the contract for license persistence operations.
Implementations are in the infrastructure layer.
"""
from abc import ABC, abstractmethod
from typing import List, Optional

from licenses.domain.license import License, LicensePatch


class LicenseStore(ABC):
    """
    Abstract store for License records.

    This is a port in hexagonal architecture - it defines
    what operations are available, not how they're implemented.
    """

    @abstractmethod
    async def insert(self, records: List[License]) -> None:
        """
        Insert license records, all or nothing.

        Args:
            records: License records to insert

        Raises:
            DuplicateLicenseError: If a key or order reference already exists
            StoreError: If the records could not be persisted
        """
        pass

    @abstractmethod
    async def find_by_key(self, key: str) -> Optional[License]:
        """
        Find a license by key.

        Args:
            key: License key string

        Returns:
            License or None if not found
        """
        pass

    @abstractmethod
    async def find_latest_by_email(self, email: str) -> Optional[License]:
        """
        Find the most recently created license for an email.

        Args:
            email: Owning email

        Returns:
            License or None if not found
        """
        pass

    @abstractmethod
    async def find_by_order_ref(self, external_order_ref: str) -> Optional[License]:
        """
        Find the license issued for a storefront order.

        Args:
            external_order_ref: Storefront order reference

        Returns:
            License or None if not found
        """
        pass

    @abstractmethod
    async def update(
        self,
        key: str,
        patch: LicensePatch,
        expected_active: Optional[bool] = None,
    ) -> License:
        """
        Apply a patch to a license atomically.

        Args:
            key: License key string
            patch: New active flag and activation time
            expected_active: When given, only update if the stored active
                flag still has this value

        Returns:
            Updated License

        Raises:
            LicenseNotFoundError: If the key is unknown
            LicenseStateConflictError: If expected_active does not match
            StoreError: If the update could not be persisted
        """
        pass
