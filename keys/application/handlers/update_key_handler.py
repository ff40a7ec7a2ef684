"""
UpdateKeyHandler.

Handles the admin update key command.
"""
import logging
from dataclasses import replace

from core.domain.exceptions import InvalidInputError
from core.domain.value_objects import KeyStatus
from keys.application.commands.update_key import UpdateKeyCommand
from keys.application.dto.key_dto import KeyDTO, UpdateKeyResponseDTO
from keys.domain.key import MAX_DEVICES_LIMIT, MAX_DURATION_HOURS, Key, utcnow
from keys.ports.key_repository import KeyRepository

logger = logging.getLogger(__name__)


class UpdateKeyHandler:
    """Handler for UpdateKeyCommand."""

    def __init__(self, key_repository: KeyRepository):
        self.key_repository = key_repository

    async def handle(self, command: UpdateKeyCommand) -> UpdateKeyResponseDTO:
        """
        Handle update key command.

        A new duration moves ``expires_at`` to the update time plus the
        new duration.

        Args:
            command: UpdateKeyCommand

        Returns:
            UpdateKeyResponseDTO with the stored key

        Raises:
            InvalidInputError: If no field is set or a value is invalid
            KeyNotFoundError: If the key does not exist
        """
        if not command.has_changes():
            raise InvalidInputError("No fields to update")

        status = self._parse_status(command.status)
        self._check_range("duration_hours", command.duration_hours, MAX_DURATION_HOURS)
        self._check_range("max_devices", command.max_devices, MAX_DEVICES_LIMIT)
        now = utcnow()

        def mutate(key: Key) -> Key:
            if command.duration_hours is not None:
                key = key.with_duration(command.duration_hours, now=now)
            if status is not None:
                key = replace(key, status=status)
            if command.max_devices is not None:
                if command.max_devices < key.used_devices:
                    raise InvalidInputError(
                        f"max_devices cannot be lower than the {key.used_devices} "
                        "devices already activated"
                    )
                key = replace(key, max_devices=command.max_devices)
            return key

        updated = await self.key_repository.update(command.key_id, mutate)
        logger.info("Updated key %s", updated.id)
        return UpdateKeyResponseDTO(success=True, key=KeyDTO.from_entity(updated))

    @staticmethod
    def _parse_status(value):
        if value is None:
            return None
        try:
            return KeyStatus(value)
        except ValueError:
            raise InvalidInputError(f"Invalid status: {value}") from None

    @staticmethod
    def _check_range(field: str, value, maximum: int) -> None:
        if value is None:
            return
        if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
            raise InvalidInputError(f"{field} must be a positive integer")
        if value > maximum:
            raise InvalidInputError(f"{field} must not exceed {maximum}")
