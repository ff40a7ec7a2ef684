"""
GetKeyLogsHandler.

Handles the activity log query.
"""
from typing import List

from keys.application.dto.key_dto import LogEntryDTO
from keys.application.queries.admin_queries import GetKeyLogsQuery
from keys.ports.activity_log_repository import ActivityLogRepository


class GetKeyLogsHandler:
    """Handler for GetKeyLogsQuery."""

    def __init__(self, activity_log_repository: ActivityLogRepository):
        self.activity_log_repository = activity_log_repository

    async def handle(self, query: GetKeyLogsQuery) -> List[LogEntryDTO]:
        """
        Return the log entries of a key, newest first.

        An unknown key id yields an empty list.
        """
        entries = await self.activity_log_repository.find_by_key(query.key_id)
        return [LogEntryDTO.from_entity(entry) for entry in entries]
