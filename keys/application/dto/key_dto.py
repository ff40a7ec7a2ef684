"""
Key DTOs for API responses.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from keys.domain.key import Key
from keys.domain.log_entry import LogEntry


@dataclass
class KeyDTO:
    """DTO for key information."""

    id: int
    key_string: str
    duration_hours: int
    max_devices: int
    used_devices: int
    created_at: datetime
    expires_at: datetime
    status: str

    @classmethod
    def from_entity(cls, key: Key) -> "KeyDTO":
        """Build the DTO from a Key entity."""
        return cls(
            id=key.id,
            key_string=key.key_string,
            duration_hours=key.duration_hours,
            max_devices=key.max_devices,
            used_devices=key.used_devices,
            created_at=key.created_at,
            expires_at=key.expires_at,
            status=key.status.value,
        )


@dataclass
class KeyListItemDTO(KeyDTO):
    """DTO for an entry of the admin key list."""

    activated_devices: int = 0


@dataclass
class IssueKeyResponseDTO:
    """DTO for issue key response."""

    success: bool
    key: str
    expires_at: datetime
    duration_hours: int
    max_devices: int


@dataclass
class UpdateKeyResponseDTO:
    """DTO for update key response."""

    success: bool
    key: KeyDTO


@dataclass
class LogEntryDTO:
    """DTO for an activity log entry."""

    id: int
    key_id: int
    action: str
    ip_address: Optional[str]
    user_agent: Optional[str]
    created_at: datetime

    @classmethod
    def from_entity(cls, entry: LogEntry) -> "LogEntryDTO":
        """Build the DTO from a LogEntry entity."""
        return cls(
            id=entry.id,
            key_id=entry.key_id,
            action=entry.action.value,
            ip_address=entry.ip_address,
            user_agent=entry.user_agent,
            created_at=entry.created_at,
        )


@dataclass
class CleanupResponseDTO:
    """DTO for cleanup response."""

    success: bool
    deleted_count: int
    deleted_keys: List[KeyDTO]
