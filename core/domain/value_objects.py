"""
Value objects for the domain.

Value objects are immutable objects that are defined by their attributes
rather than their identity. They have no identity and are compared by value.
"""
from abc import ABC
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from core.domain.exceptions import InvalidInputError

DEVICE_ID_MIN_LENGTH = 5
DEVICE_ID_MAX_LENGTH = 255


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
class KeyString(ValueObject):
    """License key string, normalized to trimmed uppercase."""

    value: str

    def __post_init__(self):
        """Validate key string."""
        if not self.value or not self.value.strip():
            raise InvalidInputError("Key and device_id are required")

    @classmethod
    def normalize(cls, raw: Optional[str]) -> "KeyString":
        """
        Build a KeyString from raw client input.

        Args:
            raw: Key as typed by the user

        Returns:
            KeyString holding the trimmed, uppercased key
        """
        if not isinstance(raw, str):
            raise InvalidInputError("Key and device_id are required")
        return cls(raw.strip().upper())

    def __str__(self) -> str:
        """Return key as string."""
        return self.value


@dataclass(frozen=True)
class DeviceId(ValueObject):
    """Opaque device identifier supplied by a client."""

    value: str

    def __post_init__(self):
        """Validate device id length."""
        if not isinstance(self.value, str) or not self.value:
            raise InvalidInputError("Key and device_id are required")
        if not DEVICE_ID_MIN_LENGTH <= len(self.value) <= DEVICE_ID_MAX_LENGTH:
            raise InvalidInputError("Invalid device_id format")

    def __str__(self) -> str:
        """Return device id as string."""
        return self.value


@dataclass(frozen=True)
class ClientInfo(ValueObject):
    """Network origin of a request, recorded in the activity log."""

    ip_address: Optional[str] = None
    user_agent: Optional[str] = None


class KeyStatus(Enum):
    """Key status value object."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    EXPIRED = "expired"

    def __str__(self) -> str:
        """Return status as string."""
        return self.value


class LogAction(Enum):
    """Actions recorded in the activity log."""

    ACTIVATED = "activated"
    REACTIVATED = "reactivated"
    VERIFIED = "verified"
    VERIFICATION_FAILED = "verification_failed"
    ACTIVATION_EXPIRED = "activation_expired"
    AUTO_EXPIRED = "auto_expired"

    def __str__(self) -> str:
        """Return action as string."""
        return self.value
