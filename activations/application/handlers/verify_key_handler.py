"""
VerifyKeyHandler.

Handler for checking a key on a device.
"""

from activations.application.dto.activation_dto import VerifyKeyResponseDTO
from activations.application.queries.verify_key import VerifyKeyQuery
from activations.domain.services import ActivationEngine
from activations.ports.activation_repository import ActivationRepository
from core.metrics import verifications_total
from keys.application.services.activity_log_service import ActivityLogService
from keys.ports.activity_log_repository import ActivityLogRepository
from keys.ports.key_repository import KeyRepository


class VerifyKeyHandler:
    """Handler for VerifyKeyQuery."""

    def __init__(
        self,
        key_repository: KeyRepository,
        activation_repository: ActivationRepository,
        activity_log_repository: ActivityLogRepository,
    ):
        """Initialize handler with repositories."""
        self.engine = ActivationEngine(
            key_repository=key_repository,
            activation_repository=activation_repository,
            activity_log=ActivityLogService(activity_log_repository),
        )

    async def handle(self, query: VerifyKeyQuery) -> VerifyKeyResponseDTO:
        """
        Handle verify key query.

        Args:
            query: VerifyKeyQuery

        Returns:
            VerifyKeyResponseDTO; an unknown or invalid key yields valid=False

        Raises:
            InvalidInputError: If key or device id is missing or malformed
        """
        outcome = await self.engine.verify(query.key, query.device_id, query.client)
        verifications_total.labels(outcome="valid" if outcome.valid else "invalid").inc()

        key = outcome.key
        return VerifyKeyResponseDTO(
            valid=outcome.valid,
            expires_at=key.expires_at if key else None,
            status=key.status.value if key else None,
            devices_used=outcome.devices_used,
            max_devices=key.max_devices if key else None,
            message=outcome.message,
        )
