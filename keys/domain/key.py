"""
Key domain entity.

This is the core domain entity representing an issued license key.
It contains business logic and is independent of infrastructure.
"""
from dataclasses import dataclass, replace
from datetime import datetime, timedelta, timezone
from typing import Optional

from core.domain.exceptions import InvalidInputError
from core.domain.value_objects import KeyStatus

DEFAULT_MAX_DEVICES = 10

# Upper bounds accepted from clients; device limits fit a 32-bit integer column.
MAX_DURATION_HOURS = 24 * 365 * 100
MAX_DEVICES_LIMIT = 2147483647


def utcnow() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def expiry_after(start: datetime, duration_hours: int) -> datetime:
    """Return ``start`` plus ``duration_hours``, rejecting out of range results."""
    try:
        return start + timedelta(hours=duration_hours)
    except OverflowError:
        raise InvalidInputError("duration_hours is too large") from None


def is_expired(key: "Key", now: Optional[datetime] = None) -> bool:
    """
    Decide whether a key is past its validity window.

    This is the single expiry predicate shared by activation, verification
    and the janitor. The stored status is ignored: a key past
    ``expires_at`` is expired whether or not the transition was persisted.

    Args:
        key: Key entity
        now: Reference time (defaults to current UTC time)

    Returns:
        True if the key is expired at ``now``
    """
    if key.expires_at is None:
        return False
    return (now or utcnow()) > key.expires_at


@dataclass(frozen=True)
class Key:
    """
    Key domain entity.

    Represents a license key that may be bound to up to ``max_devices``
    devices until ``expires_at``.
    """

    id: Optional[int]
    key_string: str
    duration_hours: int
    max_devices: int
    used_devices: int
    status: KeyStatus
    created_at: datetime
    expires_at: datetime

    def __post_init__(self):
        """Validate key entity."""
        if not self.key_string or len(self.key_string.strip()) == 0:
            raise ValueError("Key string cannot be empty")
        if self.duration_hours < 1:
            raise ValueError("Duration must be at least 1 hour")
        if self.max_devices < 1:
            raise ValueError("Max devices must be at least 1")
        if self.used_devices < 0:
            raise ValueError("Used devices cannot be negative")

    @classmethod
    def create(
        cls,
        key_string: str,
        duration_hours: int,
        max_devices: int = DEFAULT_MAX_DEVICES,
        status: KeyStatus = KeyStatus.ACTIVE,
        now: Optional[datetime] = None,
    ) -> "Key":
        """
        Create a new Key entity.

        Args:
            key_string: Generated key string
            duration_hours: Validity window in hours
            max_devices: Maximum number of distinct devices
            status: Initial status
            now: Creation time (defaults to current UTC time)

        Returns:
            Key entity instance (not yet persisted)
        """
        created_at = now or utcnow()
        return cls(
            id=None,
            key_string=key_string,
            duration_hours=duration_hours,
            max_devices=max_devices,
            used_devices=0,
            status=status,
            created_at=created_at,
            expires_at=expiry_after(created_at, duration_hours),
        )

    @property
    def is_active(self) -> bool:
        """Return True if the stored status is active."""
        return self.status == KeyStatus.ACTIVE

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        """Shortcut for the module level ``is_expired`` predicate."""
        return is_expired(self, now)

    def with_duration(self, duration_hours: int, now: Optional[datetime] = None) -> "Key":
        """
        Create a new Key instance with a new duration.

        ``expires_at`` is rebased on the time of the change, not on
        ``created_at``.
        """
        if duration_hours < 1:
            raise ValueError("Duration must be at least 1 hour")
        rebased = now or utcnow()
        return replace(
            self,
            duration_hours=duration_hours,
            expires_at=expiry_after(rebased, duration_hours),
        )
