"""
IssueKeyHandler.

Handles the issue key command.
"""
import logging
from typing import Callable, Optional

from core.domain.exceptions import (
    GenerationExhaustedError,
    InvalidInputError,
    UniqueViolationError,
)
from core.domain.value_objects import KeyStatus
from core.metrics import key_generation_collisions_total, keys_issued_total
from keys.application.commands.issue_key import IssueKeyCommand
from keys.application.dto.key_dto import IssueKeyResponseDTO
from keys.domain.key import MAX_DEVICES_LIMIT, MAX_DURATION_HOURS, Key
from keys.domain.key_generator import KeyGenerator
from keys.ports.key_repository import KeyRepository

logger = logging.getLogger(__name__)

MIN_GENERATION_ATTEMPTS = 5


class IssueKeyHandler:
    """Handler for IssueKeyCommand."""

    def __init__(
        self,
        key_repository: KeyRepository,
        max_attempts: int = MIN_GENERATION_ATTEMPTS,
        generate: Optional[Callable[[], str]] = None,
    ):
        """
        Initialize handler.

        Args:
            key_repository: Key repository
            max_attempts: Generation attempts before giving up (at least 5)
            generate: Key string generator (defaults to KeyGenerator.generate)
        """
        self.key_repository = key_repository
        self.max_attempts = max(MIN_GENERATION_ATTEMPTS, max_attempts)
        self.generate = generate or KeyGenerator.generate

    async def handle(self, command: IssueKeyCommand) -> IssueKeyResponseDTO:
        """
        Handle issue key command.

        Args:
            command: IssueKeyCommand

        Returns:
            IssueKeyResponseDTO with the new key string

        Raises:
            InvalidInputError: If duration, device limit or status is invalid
            GenerationExhaustedError: If every generated key string collided
        """
        status = self._validate(command)

        for attempt in range(1, self.max_attempts + 1):
            key = Key.create(
                key_string=self.generate(),
                duration_hours=command.duration_hours,
                max_devices=command.max_devices,
                status=status,
            )
            try:
                saved = await self.key_repository.save(key)
            except UniqueViolationError:
                key_generation_collisions_total.inc()
                logger.warning(
                    "Generated key collided (attempt %s/%s)", attempt, self.max_attempts
                )
                continue

            keys_issued_total.inc()
            logger.info("Issued key %s", saved.id)
            return IssueKeyResponseDTO(
                success=True,
                key=saved.key_string,
                expires_at=saved.expires_at,
                duration_hours=saved.duration_hours,
                max_devices=saved.max_devices,
            )

        raise GenerationExhaustedError()

    @staticmethod
    def _validate(command: IssueKeyCommand) -> KeyStatus:
        """Check command fields and return the parsed status."""
        if not isinstance(command.duration_hours, int) or command.duration_hours <= 0:
            raise InvalidInputError("Valid duration_hours is required")
        if command.duration_hours > MAX_DURATION_HOURS:
            raise InvalidInputError(f"duration_hours must not exceed {MAX_DURATION_HOURS}")
        if not isinstance(command.max_devices, int) or command.max_devices <= 0:
            raise InvalidInputError("Valid max_devices is required")
        if command.max_devices > MAX_DEVICES_LIMIT:
            raise InvalidInputError(f"max_devices must not exceed {MAX_DEVICES_LIMIT}")
        try:
            return KeyStatus(command.status)
        except ValueError:
            raise InvalidInputError(f"Invalid status: {command.status}") from None
