"""
ActivateLicenseCommand.

Command to move a license from inactive to active.
"""

from dataclasses import dataclass


@dataclass
class ActivateLicenseCommand:
    """Command to activate a license key."""

    key: str
