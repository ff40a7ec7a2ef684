"""
DeleteKeyHandler and CleanupExpiredKeysHandler.

Handle the destructive admin commands.
"""
import logging

from core.domain.exceptions import KeyNotFoundError
from keys.application.commands.delete_key import (
    CleanupExpiredKeysCommand,
    DeleteKeyCommand,
)
from keys.application.dto.key_dto import CleanupResponseDTO, KeyDTO
from keys.domain.key import utcnow
from keys.ports.key_repository import KeyRepository

logger = logging.getLogger(__name__)


class DeleteKeyHandler:
    """Handler for DeleteKeyCommand."""

    def __init__(self, key_repository: KeyRepository):
        self.key_repository = key_repository

    async def handle(self, command: DeleteKeyCommand) -> None:
        """
        Delete a key together with its activations and log entries.

        Raises:
            KeyNotFoundError: If the key does not exist
        """
        if not await self.key_repository.delete(command.key_id):
            raise KeyNotFoundError(f"Key {command.key_id} not found")
        logger.info("Deleted key %s", command.key_id)


class CleanupExpiredKeysHandler:
    """Handler for CleanupExpiredKeysCommand."""

    def __init__(self, key_repository: KeyRepository):
        self.key_repository = key_repository

    async def handle(self, command: CleanupExpiredKeysCommand) -> CleanupResponseDTO:
        """
        Hard-delete every key past its expiry time, whatever its status.

        Args:
            command: CleanupExpiredKeysCommand

        Returns:
            CleanupResponseDTO listing the removed keys
        """
        deleted = await self.key_repository.delete_expired(utcnow())
        logger.info("Cleanup removed %s expired keys", len(deleted))
        return CleanupResponseDTO(
            success=True,
            deleted_count=len(deleted),
            deleted_keys=[KeyDTO.from_entity(key) for key in deleted],
        )
