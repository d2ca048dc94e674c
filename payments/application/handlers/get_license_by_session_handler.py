"""
GetLicenseBySessionHandler.
"""

import logging

from core.domain.exceptions import LicenseNotFoundError
from licenses.ports.license_store import LicenseStore
from payments.application.dto.payment_dto import SessionLicenseDTO
from payments.application.queries.get_license_by_session import GetLicenseBySessionQuery
from payments.ports.payment_gateway import PaymentGateway

logger = logging.getLogger(__name__)


class GetLicenseBySessionHandler:
    """Resolves session -> customer email -> newest license for that email."""

    def __init__(self, gateway: PaymentGateway, license_store: LicenseStore):
        self.gateway = gateway
        self.license_store = license_store

    async def handle(self, query: GetLicenseBySessionQuery) -> SessionLicenseDTO:
        """
        Handle get license by session query.

        Raises:
            CheckoutSessionNotFoundError: If the session cannot be resolved
            LicenseNotFoundError: If no license exists for the session's email
            PaymentGatewayError: If the processor call fails
        """
        email = await self.gateway.get_session_email(query.session_id)
        license = await self.license_store.find_latest_by_email(email.strip().lower())
        if not license:
            # The webhook may not have been delivered yet
            logger.info("No license yet for checkout session %s", query.session_id)
            raise LicenseNotFoundError("No license found for this checkout session")
        return SessionLicenseDTO(license=license.key)
