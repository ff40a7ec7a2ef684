"""
ListKeysHandler.

Handles the admin key listing query.
"""
from typing import List

from keys.application.dto.key_dto import KeyDTO, KeyListItemDTO
from keys.application.queries.admin_queries import ListKeysQuery
from keys.ports.key_repository import KeyRepository


class ListKeysHandler:
    """Handler for ListKeysQuery."""

    def __init__(self, key_repository: KeyRepository):
        self.key_repository = key_repository

    async def handle(self, query: ListKeysQuery) -> List[KeyListItemDTO]:
        """
        Handle list keys query.

        Args:
            query: ListKeysQuery

        Returns:
            Every key, newest first, with its live activation count
        """
        rows = await self.key_repository.list_with_activation_counts()
        return [
            KeyListItemDTO(
                **KeyDTO.from_entity(key).__dict__,
                activated_devices=activated,
            )
            for key, activated in rows
        ]
