"""
GenerateLicensesHandler.

Handles bulk pre-issuance of inactive licenses.
"""

import logging

from core.domain.events import EventBus
from core.infrastructure.events import event_bus as default_event_bus
from core.metrics import licenses_generated_total
from licenses.application.commands.generate_licenses import GenerateLicensesCommand
from licenses.application.dto.license_dto import GenerateLicensesResponseDTO
from licenses.domain.events import LicensesGenerated
from licenses.domain.services import LicenseIssuer
from licenses.ports.license_store import LicenseStore

logger = logging.getLogger(__name__)


class GenerateLicensesHandler:
    """Handler for GenerateLicensesCommand."""

    def __init__(
        self,
        license_store: LicenseStore,
        max_batch_size: int = 1000,
        event_bus: EventBus = None,
    ):
        """Initialize handler with store and batch limit."""
        self.issuer = LicenseIssuer(license_store, max_batch_size=max_batch_size)
        self.event_bus = event_bus or default_event_bus

    async def handle(self, command: GenerateLicensesCommand) -> GenerateLicensesResponseDTO:
        """
        Handle generate licenses command.

        Args:
            command: GenerateLicensesCommand

        Returns:
            GenerateLicensesResponseDTO with the new keys

        Raises:
            InvalidCountError: If count is out of range
            InvalidEmailError: If the email is malformed
            StoreError: If the batch could not be persisted
        """
        records = await self.issuer.generate_batch(command.count, command.email)
        keys = [record.key for record in records]

        licenses_generated_total.inc(len(keys))
        logger.info("Generated %d inactive license(s)", len(keys))

        await self.event_bus.publish(
            LicensesGenerated(
                aggregate_id=keys[0],
                license_keys=tuple(keys),
                email=records[0].email,
            )
        )

        return GenerateLicensesResponseDTO(keys=keys, count=len(keys))
