"""
IssueKeyCommand.

Command to mint a new key.
"""
from dataclasses import dataclass

from core.domain.value_objects import KeyStatus
from keys.domain.key import DEFAULT_MAX_DEVICES

DEFAULT_DURATION_HOURS = 720


@dataclass
class IssueKeyCommand:
    """Command to issue a new key."""

    duration_hours: int = DEFAULT_DURATION_HOURS
    max_devices: int = DEFAULT_MAX_DEVICES
    status: str = KeyStatus.ACTIVE.value
