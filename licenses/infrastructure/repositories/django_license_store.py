"""
Django implementation of the LicenseStore port.

This adapter converts between domain entities and Django ORM models.
"""
import logging
from typing import List, Optional

from asgiref.sync import sync_to_async
from django.db import DatabaseError, IntegrityError, transaction

from core.domain.exceptions import (
    DuplicateLicenseError,
    LicenseNotFoundError,
    LicenseStateConflictError,
    StoreError,
)
from licenses.domain.license import License, LicensePatch
from licenses.infrastructure.models import License as LicenseModel
from licenses.ports.license_store import LicenseStore

logger = logging.getLogger(__name__)


class DjangoLicenseStore(LicenseStore):
    """
    Django ORM implementation of LicenseStore.

    This adapter:
    1. Converts Django models to domain entities
    2. Converts domain entities to Django models
    3. Translates database failures into StoreError
    """

    def _to_domain(self, model: LicenseModel) -> License:
        """
        Convert Django model to domain entity.

        Args:
            model: Django License model

        Returns:
            License domain entity
        """
        return License(
            key=model.key,
            email=model.email,
            active=model.active,
            created_at=model.created_at,
            activated_at=model.activated_at,
            external_order_ref=model.external_order_ref,
        )

    def _to_model(self, license: License) -> LicenseModel:
        """
        Convert domain entity to an unsaved Django model.

        Args:
            license: License domain entity

        Returns:
            Django License model
        """
        return LicenseModel(
            key=license.key,
            email=license.email,
            active=license.active,
            created_at=license.created_at,
            activated_at=license.activated_at,
            external_order_ref=license.external_order_ref,
        )

    def _bulk_insert(self, records: List[License]) -> None:
        with transaction.atomic():
            # pylint: disable=no-member
            LicenseModel.objects.bulk_create([self._to_model(r) for r in records])

    async def insert(self, records: List[License]) -> None:
        """
        Insert license records in one transaction.

        Args:
            records: License records to insert
        """
        keys = [record.key for record in records]
        try:
            await sync_to_async(self._bulk_insert)(records)
        except IntegrityError as e:
            logger.warning(
                "License insert rejected by unique constraint",
                extra={"license_keys": keys, "error": str(e)},
            )
            raise DuplicateLicenseError(f"License already exists: {e}") from e
        except DatabaseError as e:
            logger.error(
                "License insert failed",
                extra={"license_keys": keys, "error": str(e)},
                exc_info=True,
            )
            raise StoreError(f"Could not persist {len(keys)} license(s)") from e

    async def find_by_key(self, key: str) -> Optional[License]:
        """
        Find a license by key.

        Args:
            key: License key string

        Returns:
            License or None if not found
        """
        try:
            # pylint: disable=no-member
            model = await sync_to_async(LicenseModel.objects.get)(key=key)
            return self._to_domain(model)
        except LicenseModel.DoesNotExist:  # pylint: disable=no-member
            return None
        except DatabaseError as e:
            raise StoreError(f"Could not read license: {e}") from e

    async def find_latest_by_email(self, email: str) -> Optional[License]:
        """
        Find the most recently created license for an email.

        Args:
            email: Owning email

        Returns:
            License or None if not found
        """
        try:
            model = await sync_to_async(
                lambda: LicenseModel.objects.filter(  # pylint: disable=no-member
                    email=email
                )
                .order_by("-created_at", "-id")
                .first()
            )()
        except DatabaseError as e:
            raise StoreError(f"Could not read licenses: {e}") from e
        return self._to_domain(model) if model else None

    async def find_by_order_ref(self, external_order_ref: str) -> Optional[License]:
        """
        Find the license issued for a storefront order.

        Args:
            external_order_ref: Storefront order reference

        Returns:
            License or None if not found
        """
        try:
            # pylint: disable=no-member
            model = await sync_to_async(LicenseModel.objects.get)(
                external_order_ref=external_order_ref
            )
            return self._to_domain(model)
        except LicenseModel.DoesNotExist:  # pylint: disable=no-member
            return None
        except DatabaseError as e:
            raise StoreError(f"Could not read license: {e}") from e

    def _conditional_update(self, key, patch, expected_active):
        """Run the UPDATE and re-read the row in one transaction."""
        queryset = LicenseModel.objects.filter(key=key)  # pylint: disable=no-member
        if expected_active is not None:
            queryset = queryset.filter(active=expected_active)
        with transaction.atomic():
            updated = queryset.update(active=patch.active, activated_at=patch.activated_at)
            model = LicenseModel.objects.filter(key=key).first()  # pylint: disable=no-member
        return updated, model

    async def update(
        self,
        key: str,
        patch: LicensePatch,
        expected_active: Optional[bool] = None,
    ) -> License:
        """
        Apply a patch with a single conditional UPDATE statement.

        Args:
            key: License key string
            patch: New active flag and activation time
            expected_active: Required current active flag, if any

        Returns:
            Updated License
        """
        try:
            updated, model = await sync_to_async(self._conditional_update)(
                key, patch, expected_active
            )
        except DatabaseError as e:
            logger.error(
                "License update failed",
                extra={"license_key": key, "error": str(e)},
                exc_info=True,
            )
            raise StoreError(f"Could not update license: {e}") from e

        if model is None:
            raise LicenseNotFoundError(f"License {key} not found")
        if not updated:
            raise LicenseStateConflictError(
                f"License {key} is no longer {'active' if expected_active else 'inactive'}"
            )
        return self._to_domain(model)
