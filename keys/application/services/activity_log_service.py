"""
Activity log service.

Records key lifecycle events without ever failing the request that caused them.
"""
import logging

from core.domain.value_objects import ClientInfo, LogAction
from keys.ports.activity_log_repository import ActivityLogRepository

logger = logging.getLogger(__name__)


class ActivityLogService:
    """Append-only writer for the key activity log."""

    def __init__(self, repository: ActivityLogRepository):
        """Initialize service with its repository."""
        self.repository = repository

    async def record(self, key_id: int, action: LogAction, client: ClientInfo) -> None:
        """
        Record an activity log entry.

        Write failures are logged and dropped.

        Args:
            key_id: Key the event belongs to
            action: Event tag
            client: Origin of the request
        """
        try:
            await self.repository.append(key_id, action, client)
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.error(
                "Failed to record activity %s for key %s: %s",
                action.value,
                key_id,
                e,
                exc_info=True,
            )
