"""
Django implementation of ActivityLogRepository port.
"""
from typing import List

from asgiref.sync import sync_to_async
from django.db import transaction

from core.domain.value_objects import ClientInfo, LogAction
from keys.domain.log_entry import LogEntry
from keys.infrastructure.models import LogEntry as LogEntryModel
from keys.ports.activity_log_repository import ActivityLogRepository


class DjangoActivityLogRepository(ActivityLogRepository):
    """Django ORM implementation of ActivityLogRepository."""

    def _to_domain(self, model: LogEntryModel) -> LogEntry:
        """Convert Django model to domain entity."""
        return LogEntry(
            id=model.id,
            key_id=model.key_id,
            action=LogAction(model.action),
            ip_address=model.ip_address,
            user_agent=model.user_agent,
            created_at=model.created_at,
        )

    @sync_to_async
    def append(self, key_id: int, action: LogAction, client: ClientInfo) -> None:
        """
        Append an activity log entry.

        Args:
            key_id: Key id
            action: Event tag
            client: Request origin
        """
        with transaction.atomic():
            LogEntryModel.objects.create(  # pylint: disable=no-member
                key_id=key_id,
                action=action.value,
                ip_address=client.ip_address,
                user_agent=client.user_agent,
            )

    @sync_to_async
    def find_by_key(self, key_id: int) -> List[LogEntry]:
        """
        Find log entries for a key, newest first.

        Args:
            key_id: Key id

        Returns:
            List of LogEntry entities
        """
        models = LogEntryModel.objects.filter(key_id=key_id).order_by(  # pylint: disable=no-member
            "-created_at", "-id"
        )
        return [self._to_domain(model) for model in models]
