"""
GetLicenseBySessionQuery.

Query to look up the license bought in a checkout session.
"""
from dataclasses import dataclass


@dataclass(frozen=True)
class GetLicenseBySessionQuery:
    """Query by checkout session id."""

    session_id: str
