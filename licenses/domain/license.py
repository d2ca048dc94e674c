"""
License domain entity.

This is the core domain entity representing a license record.
It contains business logic and is independent of infrastructure.
"""
import re
import secrets
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

LICENSE_KEY_BYTES = 16
LICENSE_KEY_PATTERN = re.compile(r"^[0-9a-f]{32}$")


def generate_license_key() -> str:
    """
    Generate a license key: 32 lowercase hex characters (128 random bits).

    Downstream consumers parse this format; it must stay stable.

    Returns:
        Generated license key string
    """
    return secrets.token_hex(LICENSE_KEY_BYTES)


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


class LicenseState(Enum):
    """Lifecycle state of a license key."""

    UNISSUED = "unissued"
    INACTIVE = "inactive"
    ACTIVE = "active"

    def __str__(self) -> str:
        """Return state as string."""
        return self.value


@dataclass(frozen=True)
class LicensePatch:
    """
    The only mutable part of a license record.

    Key, email, creation time and order reference never change after
    creation, so updates are expressed with this type alone.
    """

    active: bool
    activated_at: Optional[datetime]


@dataclass(frozen=True)
class License:
    """
    License domain entity.

    A record is either pre-issued (inactive, email optional, produced by
    bulk generation) or issued (active, email set, produced by a confirmed
    payment). Transitions produce new instances.
    """

    key: str
    email: Optional[str]
    active: bool
    created_at: datetime
    activated_at: Optional[datetime] = None
    external_order_ref: Optional[str] = None

    def __post_init__(self):
        """Validate license entity."""
        if not self.key or not LICENSE_KEY_PATTERN.match(self.key):
            raise ValueError(f"Invalid license key format: {self.key!r}")
        if self.activated_at is not None and not self.active:
            raise ValueError("An inactive license cannot carry an activation time")

    @classmethod
    def issue(
        cls,
        email: str,
        external_order_ref: Optional[str] = None,
        key: Optional[str] = None,
    ) -> "License":
        """
        Create an issued license for a confirmed purchase.

        Args:
            email: Owning email (already validated)
            external_order_ref: Storefront order reference, if any
            key: Optional key (generated if not provided)

        Returns:
            Active License with no activation time
        """
        if not email:
            raise ValueError("Issued licenses require an email")
        return cls(
            key=key or generate_license_key(),
            email=email,
            active=True,
            created_at=utcnow(),
            activated_at=None,
            external_order_ref=external_order_ref or None,
        )

    @classmethod
    def pre_issue(cls, email: Optional[str] = None, key: Optional[str] = None) -> "License":
        """
        Create an inactive license for bulk generation.

        Args:
            email: Optional owning email shared by the batch
            key: Optional key (generated if not provided)

        Returns:
            Inactive License
        """
        return cls(
            key=key or generate_license_key(),
            email=email or None,
            active=False,
            created_at=utcnow(),
        )

    @property
    def state(self) -> LicenseState:
        """Current lifecycle state."""
        return LicenseState.ACTIVE if self.active else LicenseState.INACTIVE

    def activation_patch(self, now: Optional[datetime] = None) -> LicensePatch:
        """
        Patch that moves this license from inactive to active.

        Args:
            now: Activation time (defaults to utcnow)

        Returns:
            LicensePatch to apply through the store
        """
        if self.active:
            raise ValueError("License is already active")
        return LicensePatch(active=True, activated_at=now or utcnow())

    def apply(self, patch: LicensePatch) -> "License":
        """Return a copy of this license with the patch applied."""
        return replace(self, active=patch.active, activated_at=patch.activated_at)
