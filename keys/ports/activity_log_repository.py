"""
Activity log repository port (interface).
"""
from abc import ABC, abstractmethod
from typing import List

from core.domain.value_objects import ClientInfo, LogAction
from keys.domain.log_entry import LogEntry


class ActivityLogRepository(ABC):
    """Abstract append-only store for key activity."""

    @abstractmethod
    async def append(self, key_id: int, action: LogAction, client: ClientInfo) -> None:
        """
        Append an entry to the activity log.

        Args:
            key_id: Key the event belongs to
            action: Event tag
            client: Origin of the request
        """

    @abstractmethod
    async def find_by_key(self, key_id: int) -> List[LogEntry]:
        """
        Find the log entries of a key, newest first.

        Args:
            key_id: Key id

        Returns:
            List of LogEntry entities
        """
