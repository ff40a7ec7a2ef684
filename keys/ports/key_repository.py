"""
Key repository port (interface).

This defines the contract for key persistence operations.
Implementations are in the infrastructure layer.
"""
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Callable, List, Optional, Tuple

from keys.domain.key import Key


class KeyRepository(ABC):
    """
    Abstract repository for Key entities.

    This is a port in hexagonal architecture - it defines
    what operations are available, not how they're implemented.
    """

    @abstractmethod
    async def save(self, key: Key) -> Key:
        """
        Insert a new key.

        Raises:
            UniqueViolationError: If the key string is already taken
        """

    @abstractmethod
    async def find_by_id(self, key_id: int) -> Optional[Key]:
        """Find a key by its numeric id."""

    @abstractmethod
    async def find_by_key_string(self, key_string: str) -> Optional[Key]:
        """Find a key by its (already normalized) key string."""

    @abstractmethod
    async def list_with_activation_counts(self) -> List[Tuple[Key, int]]:
        """Return every key, newest first, with its live activation count."""

    @abstractmethod
    async def find_expired_active(self, now: datetime) -> List[Key]:
        """Find keys still marked active whose expires_at is before now."""

    @abstractmethod
    async def mark_expired(self, key_id: int) -> bool:
        """
        Transition a key to expired if it is currently active.

        Returns:
            True if a row changed, False if it was already not active
        """

    @abstractmethod
    async def update(self, key_id: int, mutate: Callable[[Key], Key]) -> Key:
        """
        Atomically load, change and store a key.

        ``mutate`` receives the current key with ``used_devices`` set to the
        live activation count and returns the new state.

        Raises:
            KeyNotFoundError: If no key has this id
        """

    @abstractmethod
    async def delete(self, key_id: int) -> bool:
        """
        Delete a key together with its activations and log entries.

        Returns:
            True if the key existed
        """

    @abstractmethod
    async def delete_expired(self, now: datetime) -> List[Key]:
        """Hard-delete every key whose expires_at is before now."""
