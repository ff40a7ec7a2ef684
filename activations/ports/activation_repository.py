"""
Activation repository port (interface).

This defines the contract for activation persistence operations.
Implementations are in the infrastructure layer.
"""
from abc import ABC, abstractmethod
from typing import Optional

from activations.domain.activation import Activation


class ActivationRepository(ABC):
    """
    Abstract repository for Activation entities.

    This is a port in hexagonal architecture - it defines
    what operations are available, not how they're implemented.
    """

    @abstractmethod
    async def count_by_key(self, key_id: int) -> int:
        """
        Count distinct devices activated on a key.

        Args:
            key_id: Key id

        Returns:
            Number of activation rows for the key
        """
        pass

    @abstractmethod
    async def find_by_key_and_device(
        self, key_id: int, device_id: str
    ) -> Optional[Activation]:
        """
        Find the activation of a device on a key.

        Args:
            key_id: Key id
            device_id: Device identifier

        Returns:
            Activation entity or None if the device never activated
        """
        pass

    @abstractmethod
    async def insert(
        self, key_id: int, device_id: str, ip_address: Optional[str]
    ) -> Activation:
        """
        Insert an activation and bump the key's device counter as one unit.

        The device limit is checked again under a lock on the key row, so
        concurrent inserts for the same key can never exceed ``max_devices``.

        Args:
            key_id: Key id
            device_id: Device identifier
            ip_address: Origin address of the request

        Returns:
            Created Activation entity

        Raises:
            UniqueViolationError: If the device is already activated on the key
            DeviceLimitReachedError: If the key has no free device slot
            KeyNotFoundError: If the key no longer exists
        """
        pass
