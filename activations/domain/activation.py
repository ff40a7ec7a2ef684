"""
Activation domain entity.

This is the core domain entity representing the binding of one device to one key.
It contains business logic and is independent of infrastructure.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from core.domain.value_objects import DeviceId


@dataclass(frozen=True)
class Activation:
    """
    Activation domain entity.

    Created once, on the first successful activation of a device
    against a key, and never updated afterwards.
    """

    id: int
    key_id: int
    device_id: DeviceId
    ip_address: Optional[str]
    created_at: datetime

    def __post_init__(self):
        """Validate activation entity."""
        if not self.key_id:
            raise ValueError("Key ID is required")
        if not self.device_id:
            raise ValueError("Device ID is required")
