"""
VerifyLicenseHandler.

Read-only license verification.
"""

from licenses.application.dto.license_dto import LicenseDTO, VerifyLicenseResponseDTO
from licenses.application.queries.verify_license import VerifyLicenseQuery
from licenses.ports.license_store import LicenseStore


class VerifyLicenseHandler:
    """Handler for VerifyLicenseQuery."""

    def __init__(self, license_store: LicenseStore):
        """Initialize handler with store."""
        self.license_store = license_store

    async def handle(self, query: VerifyLicenseQuery) -> VerifyLicenseResponseDTO:
        """
        Handle verify license query.

        An unknown key is a normal outcome and yields valid=False.

        Args:
            query: VerifyLicenseQuery

        Returns:
            VerifyLicenseResponseDTO
        """
        license = await self.license_store.find_by_key(query.key)
        if not license:
            return VerifyLicenseResponseDTO(valid=False)

        return VerifyLicenseResponseDTO(
            valid=True,
            active=license.active,
            license=LicenseDTO.from_domain(license),
        )
