"""
ActivateLicenseHandler.

Handler for activating a license.
"""

import logging

from core.domain.events import EventBus
from core.domain.exceptions import (
    LicenseAlreadyActiveError,
    LicenseNotFoundError,
    LicenseStateConflictError,
)
from core.domain.value_objects import ReactivationPolicy
from core.infrastructure.events import event_bus as default_event_bus
from core.metrics import licenses_activated_total
from licenses.application.commands.activate_license import ActivateLicenseCommand
from licenses.application.dto.license_dto import ActivateLicenseResponseDTO, LicenseDTO
from licenses.domain.events import LicenseActivated
from licenses.domain.license import License
from licenses.ports.license_store import LicenseStore

logger = logging.getLogger(__name__)


class ActivateLicenseHandler:
    """Handler for ActivateLicenseCommand."""

    def __init__(
        self,
        license_store: LicenseStore,
        reactivation_policy: ReactivationPolicy = ReactivationPolicy.NOOP,
        event_bus: EventBus = None,
    ):
        """Initialize handler with store and re-activation policy."""
        self.license_store = license_store
        self.reactivation_policy = ReactivationPolicy(reactivation_policy)
        self.event_bus = event_bus or default_event_bus

    async def handle(self, command: ActivateLicenseCommand) -> ActivateLicenseResponseDTO:
        """
        Handle activate license command.

        Args:
            command: ActivateLicenseCommand

        Returns:
            ActivateLicenseResponseDTO with the license after activation

        Raises:
            LicenseNotFoundError: If the key is unknown
            LicenseAlreadyActiveError: If already active and policy is conflict
            StoreError: If the update could not be persisted
        """
        license = await self.license_store.find_by_key(command.key)
        if not license:
            raise LicenseNotFoundError(f"License {command.key} not found")

        if license.active:
            return self._reactivated(license)

        try:
            activated = await self.license_store.update(
                license.key,
                license.activation_patch(),
                expected_active=False,
            )
        except LicenseStateConflictError:
            # Another request activated the key between our read and write
            current = await self.license_store.find_by_key(command.key)
            if not current:
                raise LicenseNotFoundError(f"License {command.key} not found")
            return self._reactivated(current)

        licenses_activated_total.inc()
        logger.info("License activated", extra={"license_key": activated.key})

        await self.event_bus.publish(
            LicenseActivated(
                aggregate_id=activated.key,
                license_key=activated.key,
                activated_at=activated.activated_at.isoformat(),
            )
        )

        return ActivateLicenseResponseDTO(success=True, license=LicenseDTO.from_domain(activated))

    def _reactivated(self, license: License) -> ActivateLicenseResponseDTO:
        """Apply the re-activation policy to an already active license."""
        if self.reactivation_policy is ReactivationPolicy.CONFLICT:
            raise LicenseAlreadyActiveError(f"License {license.key} is already active")
        logger.debug("License already active, nothing to do", extra={"license_key": license.key})
        return ActivateLicenseResponseDTO(success=True, license=LicenseDTO.from_domain(license))
