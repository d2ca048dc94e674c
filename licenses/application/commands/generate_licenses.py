"""
GenerateLicensesCommand.

Command to pre-issue a batch of inactive licenses.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class GenerateLicensesCommand:
    """Command to generate inactive licenses."""

    count: int
    email: Optional[str] = None
