"""
LogEntry domain entity.

An append-only record of a lifecycle event on a key.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from core.domain.value_objects import LogAction


@dataclass(frozen=True)
class LogEntry:
    """Activity log entry domain entity."""

    id: int
    key_id: int
    action: LogAction
    ip_address: Optional[str]
    user_agent: Optional[str]
    created_at: datetime
