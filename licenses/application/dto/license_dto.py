"""
License DTOs for API responses.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from licenses.domain.license import License


@dataclass
class LicenseDTO:
    """DTO for license information."""

    key: str
    email: Optional[str]
    active: bool
    created_at: datetime
    activated_at: Optional[datetime]
    external_order_ref: Optional[str]

    @classmethod
    def from_domain(cls, license: License) -> "LicenseDTO":
        """Build a DTO from a License entity."""
        return cls(
            key=license.key,
            email=license.email,
            active=license.active,
            created_at=license.created_at,
            activated_at=license.activated_at,
            external_order_ref=license.external_order_ref,
        )


@dataclass
class GenerateLicensesResponseDTO:
    """DTO for bulk generation response."""

    keys: List[str]
    count: int


@dataclass
class ActivateLicenseResponseDTO:
    """DTO for activation response."""

    success: bool
    license: LicenseDTO


@dataclass
class VerifyLicenseResponseDTO:
    """DTO for verification response."""

    valid: bool
    active: Optional[bool] = None
    license: Optional[LicenseDTO] = None
