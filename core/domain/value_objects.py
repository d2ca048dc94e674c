"""
Value objects for the domain.

Value objects are immutable objects that are defined by their attributes
rather than their identity. They have no identity and are compared by value.
"""
from abc import ABC
from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class ValueObject(ABC):
    """
    Base class for value objects.

    Value objects are immutable and compared by value.
    """

    def __eq__(self, other):
        """Compare value objects by their attributes."""
        if not isinstance(other, self.__class__):
            return False
        return self.__dict__ == other.__dict__

    def __hash__(self):
        """Make value objects hashable."""
        return hash(tuple(sorted(self.__dict__.items())))


@dataclass(frozen=True)
class Email(ValueObject):
    """Email value object with validation."""

    value: str

    def __post_init__(self):
        """Validate email format."""
        if not self.value or "@" not in self.value:
            raise ValueError(f"Invalid email address: {self.value}")
        local, _, domain = self.value.rpartition("@")
        if not local or not domain or " " in self.value:
            raise ValueError(f"Invalid email address: {self.value}")

    @classmethod
    def normalize(cls, raw: str) -> "Email":
        """Build an Email from user input, stripped and lower-cased."""
        return cls((raw or "").strip().lower())

    def __str__(self) -> str:
        """Return email as string."""
        return self.value


class EventKind(Enum):
    """Normalized kind of an inbound payment or order event."""

    CHECKOUT_COMPLETED = "checkout_completed"
    ORDER_CREATED = "order_created"
    IGNORED = "ignored"

    def __str__(self) -> str:
        """Return kind as string."""
        return self.value


class ReactivationPolicy(Enum):
    """What activating an already active license does."""

    NOOP = "noop"
    CONFLICT = "conflict"

    def __str__(self) -> str:
        """Return policy as string."""
        return self.value
