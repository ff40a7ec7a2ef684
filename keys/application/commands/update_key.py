"""
UpdateKeyCommand.

Command to change the duration, status or device limit of a key.
"""
from dataclasses import dataclass
from typing import Optional


@dataclass
class UpdateKeyCommand:
    """Command to update a key. Fields left as None are not changed."""

    key_id: int
    duration_hours: Optional[int] = None
    status: Optional[str] = None
    max_devices: Optional[int] = None

    def has_changes(self) -> bool:
        """Return True if at least one field is set."""
        return any(
            value is not None
            for value in (self.duration_hours, self.status, self.max_devices)
        )
