"""
License domain services.

Domain services contain business logic that doesn't naturally
fit within a single entity.
"""
import logging
from dataclasses import dataclass
from typing import List, Optional

from core.domain.exceptions import (
    DuplicateLicenseError,
    EmailMissingError,
    InvalidCountError,
    InvalidEmailError,
)
from core.domain.value_objects import Email
from licenses.domain.license import License
from licenses.ports.license_store import LicenseStore
from payments.domain.trigger import Trigger

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IssuanceResult:
    """Outcome of issuing a license for a trigger."""

    license: License
    created: bool


def normalize_email(raw: Optional[str], required: bool) -> Optional[str]:
    """
    Normalize an email address.

    Args:
        raw: Email as received
        required: Whether an empty email is an error

    Returns:
        Lower-cased email, or None when empty and not required

    Raises:
        EmailMissingError: If required and empty
        InvalidEmailError: If present but malformed
    """
    if not raw or not raw.strip():
        if required:
            raise EmailMissingError()
        return None
    try:
        return str(Email.normalize(raw))
    except ValueError as e:
        raise InvalidEmailError(str(e)) from e


class LicenseIssuer:
    """
    Domain service that creates and persists license records.

    A license counts as issued only once the store has accepted it.
    """

    def __init__(self, store: LicenseStore, max_batch_size: int = 1000):
        """Initialize issuer with a store and batch limit."""
        self.store = store
        self.max_batch_size = max_batch_size

    async def issue(self, trigger: Trigger) -> IssuanceResult:
        """
        Issue an active license for a confirmed purchase.

        Issuance is idempotent on the trigger's order reference: a second
        trigger for the same order returns the existing record.

        Args:
            trigger: Verified issuance trigger

        Returns:
            IssuanceResult with the license and whether it was created

        Raises:
            EmailMissingError: If the trigger has no email
            InvalidEmailError: If the email is malformed
            StoreError: If the record could not be persisted
        """
        email = normalize_email(trigger.email, required=True)
        order_ref = trigger.external_order_ref or None

        if order_ref:
            existing = await self.store.find_by_order_ref(order_ref)
            if existing:
                logger.info(
                    "License already issued for order %s, skipping issuance", order_ref
                )
                return IssuanceResult(license=existing, created=False)

        record = License.issue(email=email, external_order_ref=order_ref)
        try:
            await self.store.insert([record])
        except DuplicateLicenseError:
            if not order_ref:
                raise
            existing = await self.store.find_by_order_ref(order_ref)
            if not existing:
                raise
            logger.info("Concurrent issuance for order %s resolved to existing license", order_ref)
            return IssuanceResult(license=existing, created=False)

        return IssuanceResult(license=record, created=True)

    async def generate_batch(self, count: int, email: Optional[str] = None) -> List[License]:
        """
        Generate a batch of inactive licenses.

        Args:
            count: Number of licenses to generate
            email: Optional email shared by every record in the batch

        Returns:
            The persisted License records

        Raises:
            InvalidCountError: If count is not in 1..max_batch_size
            InvalidEmailError: If the email is malformed
            StoreError: If the batch could not be persisted
        """
        if isinstance(count, bool) or not isinstance(count, int):
            raise InvalidCountError("count must be an integer")
        if count <= 0 or count > self.max_batch_size:
            raise InvalidCountError(f"count must be between 1 and {self.max_batch_size}")

        owner = normalize_email(email, required=False)
        records = [License.pre_issue(email=owner) for _ in range(count)]
        await self.store.insert(records)
        return records
