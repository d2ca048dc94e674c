"""
VerifyLicenseQuery.

Read-only query to check a license key.
"""

from dataclasses import dataclass


@dataclass
class VerifyLicenseQuery:
    """Query to verify a license key."""

    key: str
