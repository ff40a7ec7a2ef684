"""
ActivateKeyHandler.

Handler for activating a key on a device.
"""

from activations.application.commands.activate_key import ActivateKeyCommand
from activations.application.dto.activation_dto import ActivateKeyResponseDTO
from activations.domain.services import ActivationEngine
from activations.ports.activation_repository import ActivationRepository
from core.domain.exceptions import DomainException
from core.metrics import activations_total
from keys.application.services.activity_log_service import ActivityLogService
from keys.ports.activity_log_repository import ActivityLogRepository
from keys.ports.key_repository import KeyRepository


class ActivateKeyHandler:
    """Handler for ActivateKeyCommand."""

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

    async def handle(self, command: ActivateKeyCommand) -> ActivateKeyResponseDTO:
        """
        Handle activate key command.

        Args:
            command: ActivateKeyCommand

        Returns:
            ActivateKeyResponseDTO with validity and device usage

        Raises:
            DomainException: If the key cannot be activated on the device
        """
        try:
            outcome = await self.engine.activate(command.key, command.device_id, command.client)
        except DomainException as e:
            activations_total.labels(outcome=e.code.lower()).inc()
            raise

        activations_total.labels(
            outcome="activated" if outcome.newly_activated else "reactivated"
        ).inc()

        return ActivateKeyResponseDTO(
            success=True,
            expires_at=outcome.key.expires_at,
            duration_hours=outcome.key.duration_hours,
            devices_used=outcome.devices_used,
            max_devices=outcome.key.max_devices,
            message=(
                "Key activated successfully"
                if outcome.newly_activated
                else "Device already activated"
            ),
        )
