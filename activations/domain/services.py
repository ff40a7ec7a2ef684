"""
Activation domain services.

The activation engine decides activate and verify outcomes for a
(key, device) pair. Device-state is derived per request, never stored:
unknown key, expired, inactive, not yet activated for the device,
activated for the device, or device limit reached.
"""
import logging
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Callable, Optional

from activations.ports.activation_repository import ActivationRepository
from core.domain.exceptions import (
    DeviceLimitReachedError,
    KeyExpiredError,
    KeyNotActiveError,
    KeyNotFoundError,
    UniqueViolationError,
)
from core.domain.value_objects import ClientInfo, DeviceId, KeyStatus, KeyString, LogAction
from keys.application.services.activity_log_service import ActivityLogService
from keys.domain.key import Key, is_expired, utcnow
from keys.ports.key_repository import KeyRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ActivationOutcome:
    """Result of a successful activate call."""

    key: Key
    devices_used: int
    newly_activated: bool


@dataclass(frozen=True)
class VerificationOutcome:
    """Result of a verify call; invalid keys are a result, not an error."""

    valid: bool
    key: Optional[Key]
    devices_used: Optional[int]
    message: str


class ActivationEngine:
    """Domain service running the key activation state machine."""

    def __init__(
        self,
        key_repository: KeyRepository,
        activation_repository: ActivationRepository,
        activity_log: ActivityLogService,
        clock: Callable[[], datetime] = utcnow,
    ):
        """Initialize engine with repositories and the activity log."""
        self.key_repository = key_repository
        self.activation_repository = activation_repository
        self.activity_log = activity_log
        self.clock = clock

    async def activate(
        self, raw_key: Optional[str], raw_device_id: Optional[str], client: ClientInfo
    ) -> ActivationOutcome:
        """
        Bind a device to a key.

        Activating an already bound device succeeds again without
        consuming another slot.

        Args:
            raw_key: Key string as sent by the client
            raw_device_id: Device identifier as sent by the client
            client: Request origin for the activity log

        Returns:
            ActivationOutcome with the key and its live device count

        Raises:
            InvalidInputError: If key or device id is missing or malformed
            KeyNotFoundError: If the key does not exist
            KeyExpiredError: If the key is past its expiry time
            KeyNotActiveError: If the key is disabled
            DeviceLimitReachedError: If every device slot is taken
        """
        key_string = KeyString.normalize(raw_key)
        device_id = DeviceId(raw_device_id)

        key = await self.key_repository.find_by_key_string(str(key_string))
        if key is None:
            raise KeyNotFoundError()

        # Expiry is checked before status: an expired key reports expired
        # even when it was also disabled.
        if is_expired(key, self.clock()):
            await self._persist_expiry(key)
            await self.activity_log.record(key.id, LogAction.ACTIVATION_EXPIRED, client)
            raise KeyExpiredError()

        if not key.is_active:
            raise KeyNotActiveError()

        existing = await self.activation_repository.find_by_key_and_device(
            key.id, str(device_id)
        )
        if existing:
            return await self._reactivated(key, client)

        count = await self.activation_repository.count_by_key(key.id)
        if count >= key.max_devices:
            raise DeviceLimitReachedError()

        try:
            await self.activation_repository.insert(key.id, str(device_id), client.ip_address)
        except UniqueViolationError:
            # Same device raced in from another request.
            return await self._reactivated(key, client)

        await self.activity_log.record(key.id, LogAction.ACTIVATED, client)

        devices_used = await self.activation_repository.count_by_key(key.id)
        logger.info(
            "Activated device on key %s (%s/%s)", key.id, devices_used, key.max_devices
        )
        return ActivationOutcome(
            key=replace(key, used_devices=devices_used),
            devices_used=devices_used,
            newly_activated=True,
        )

    async def verify(
        self, raw_key: Optional[str], raw_device_id: Optional[str], client: ClientInfo
    ) -> VerificationOutcome:
        """
        Decide whether a device currently holds a valid activation of a key.

        Never creates an activation.

        Args:
            raw_key: Key string as sent by the client
            raw_device_id: Device identifier as sent by the client
            client: Request origin for the activity log

        Returns:
            VerificationOutcome

        Raises:
            InvalidInputError: If key or device id is missing or malformed
        """
        key_string = KeyString.normalize(raw_key)
        device_id = DeviceId(raw_device_id)

        key = await self.key_repository.find_by_key_string(str(key_string))
        if key is None:
            return VerificationOutcome(
                valid=False, key=None, devices_used=None, message="Key not found"
            )

        activation = await self.activation_repository.find_by_key_and_device(
            key.id, str(device_id)
        )
        devices_used = await self.activation_repository.count_by_key(key.id)

        if is_expired(key, self.clock()):
            await self._persist_expiry(key)
            await self.activity_log.record(key.id, LogAction.AUTO_EXPIRED, client)
            return VerificationOutcome(
                valid=False,
                key=replace(key, status=KeyStatus.EXPIRED),
                devices_used=devices_used,
                message="Key has expired",
            )

        if not key.is_active:
            valid, message = False, "Key is not active"
        elif activation is None:
            valid, message = False, "Device is not activated for this key"
        else:
            valid, message = True, "Key is valid"

        await self.activity_log.record(
            key.id,
            LogAction.VERIFIED if valid else LogAction.VERIFICATION_FAILED,
            client,
        )
        return VerificationOutcome(
            valid=valid,
            key=key,
            devices_used=devices_used,
            message=message,
        )

    async def _reactivated(self, key: Key, client: ClientInfo) -> ActivationOutcome:
        """Build the idempotent outcome for a device that is already bound."""
        await self.activity_log.record(key.id, LogAction.REACTIVATED, client)
        devices_used = await self.activation_repository.count_by_key(key.id)
        return ActivationOutcome(
            key=replace(key, used_devices=devices_used),
            devices_used=devices_used,
            newly_activated=False,
        )

    async def _persist_expiry(self, key: Key) -> None:
        """Store the expired status; the decision stands even if the write fails."""
        try:
            await self.key_repository.mark_expired(key.id)
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.error("Error marking key %s as expired: %s", key.id, e, exc_info=True)
