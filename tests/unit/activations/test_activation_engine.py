"""
Unit tests for the ActivationEngine domain service.
"""
import asyncio
from dataclasses import replace
from datetime import timedelta

import pytest

from activations.domain.services import ActivationEngine
from core.domain.exceptions import (
    DeviceLimitReachedError,
    InvalidInputError,
    KeyExpiredError,
    KeyNotActiveError,
    KeyNotFoundError,
)
from core.domain.value_objects import ClientInfo, KeyStatus, LogAction
from keys.application.services.activity_log_service import ActivityLogService
from keys.infrastructure.models import Key as KeyModel
from keys.ports.activity_log_repository import ActivityLogRepository

CLIENT = ClientInfo(ip_address="203.0.113.7", user_agent="pytest-agent")


async def log_actions(activity_log_repository, key_id):
    """Return the logged actions of a key, oldest first."""
    entries = await activity_log_repository.find_by_key(key_id)
    return [entry.action for entry in reversed(entries)]


@pytest.mark.asyncio
@pytest.mark.django_db(transaction=True)
class TestActivate:
    """Tests for ActivationEngine.activate."""

    async def test_activate_new_device(
        self, activation_engine, activation_repository, activity_log_repository, amake_key
    ):
        """Test binding a first device to a key."""
        key = await amake_key(max_devices=3)

        outcome = await activation_engine.activate(key.key_string, "device-001", CLIENT)

        assert outcome.newly_activated is True
        assert outcome.devices_used == 1
        assert outcome.key.max_devices == 3
        assert await activation_repository.count_by_key(key.id) == 1
        assert await log_actions(activity_log_repository, key.id) == [LogAction.ACTIVATED]

    async def test_activate_is_idempotent(
        self,
        activation_engine,
        key_repository,
        activation_repository,
        activity_log_repository,
        amake_key,
    ):
        """Test that activating the same device twice uses one slot."""
        key = await amake_key(max_devices=3)

        await activation_engine.activate(key.key_string, "device-001", CLIENT)
        outcome = await activation_engine.activate(key.key_string, "device-001", CLIENT)

        assert outcome.newly_activated is False
        assert outcome.devices_used == 1
        assert await activation_repository.count_by_key(key.id) == 1
        stored = await key_repository.find_by_id(key.id)
        assert stored.used_devices == 1
        assert await log_actions(activity_log_repository, key.id) == [
            LogAction.ACTIVATED,
            LogAction.REACTIVATED,
        ]

    async def test_device_limit(self, activation_engine, key_repository, amake_key):
        """Test that the third device of a two-device key is rejected."""
        key = await amake_key(max_devices=2)

        first = await activation_engine.activate(key.key_string, "device-A-01", CLIENT)
        second = await activation_engine.activate(key.key_string, "device-B-01", CLIENT)
        with pytest.raises(DeviceLimitReachedError):
            await activation_engine.activate(key.key_string, "device-C-01", CLIENT)

        assert first.devices_used == 1
        assert second.devices_used == 2
        stored = await key_repository.find_by_id(key.id)
        assert stored.used_devices == 2

    async def test_bound_device_reactivates_when_full(self, activation_engine, amake_key):
        """Test that a bound device still succeeds once every slot is taken."""
        key = await amake_key(max_devices=1)

        await activation_engine.activate(key.key_string, "device-A-01", CLIENT)
        outcome = await activation_engine.activate(key.key_string, "device-A-01", CLIENT)

        assert outcome.newly_activated is False
        assert outcome.devices_used == 1

    async def test_key_is_normalized(self, activation_engine, amake_key):
        """Test that a lowercase key with whitespace finds the stored key."""
        key = await amake_key()

        outcome = await activation_engine.activate(
            f"  {key.key_string.lower()} ", "device-001", CLIENT
        )

        assert outcome.key.id == key.id

    async def test_unknown_key(self, activation_engine):
        """Test activating a key that does not exist."""
        with pytest.raises(KeyNotFoundError):
            await activation_engine.activate("ZZZZZ-ZZZZZ-ZZZZZ-ZZZZZ-ZZZZZ", "device-001", CLIENT)

    @pytest.mark.parametrize("device_id", [None, "", "abcd", "x" * 256])
    async def test_invalid_device_id(self, activation_engine, amake_key, device_id):
        """Test device id validation."""
        key = await amake_key()
        with pytest.raises(InvalidInputError):
            await activation_engine.activate(key.key_string, device_id, CLIENT)

    async def test_missing_key(self, activation_engine):
        """Test that a missing key is rejected before any lookup."""
        with pytest.raises(InvalidInputError, match="Key and device_id are required"):
            await activation_engine.activate(None, "device-001", CLIENT)

    async def test_expired_key(
        self,
        activation_engine,
        key_repository,
        activation_repository,
        activity_log_repository,
        amake_key,
    ):
        """Test that a key past expiry is rejected and persisted as expired."""
        key = await amake_key(expires_in=timedelta(seconds=-1))

        with pytest.raises(KeyExpiredError):
            await activation_engine.activate(key.key_string, "device-001", CLIENT)

        stored = await key_repository.find_by_id(key.id)
        assert stored.status == KeyStatus.EXPIRED
        assert await activation_repository.count_by_key(key.id) == 0
        assert await log_actions(activity_log_repository, key.id) == [
            LogAction.ACTIVATION_EXPIRED
        ]

    async def test_expiry_wins_over_inactive(self, activation_engine, key_repository, amake_key):
        """Test that an expired, disabled key reports expiry and keeps its status."""
        key = await amake_key(status="inactive", expires_in=timedelta(hours=-2))

        with pytest.raises(KeyExpiredError):
            await activation_engine.activate(key.key_string, "device-001", CLIENT)

        stored = await key_repository.find_by_id(key.id)
        assert stored.status == KeyStatus.INACTIVE

    async def test_inactive_key(self, activation_engine, amake_key):
        """Test activating a disabled key."""
        key = await amake_key(status="inactive")
        with pytest.raises(KeyNotActiveError):
            await activation_engine.activate(key.key_string, "device-001", CLIENT)

    async def test_concurrent_activations_respect_limit(
        self, activation_engine, key_repository, activation_repository, amake_key
    ):
        """
        Test that concurrent activations of distinct devices never exceed the limit.

        The repositories run on asgiref's thread-sensitive executor, so these
        coroutines interleave between awaits but share one database connection.
        This covers the recount inside ActivationRepository.insert after a stale
        pre-count; the cross-connection row lock of select_for_update is not
        exercised here.
        """
        key = await amake_key(max_devices=3)

        results = await asyncio.gather(
            *[
                activation_engine.activate(key.key_string, f"device-{i:03d}", CLIENT)
                for i in range(8)
            ],
            return_exceptions=True,
        )

        successes = [r for r in results if not isinstance(r, Exception)]
        failures = [r for r in results if isinstance(r, Exception)]
        assert len(successes) == 3
        assert all(isinstance(f, DeviceLimitReachedError) for f in failures)
        assert await activation_repository.count_by_key(key.id) == 3
        stored = await key_repository.find_by_id(key.id)
        assert stored.used_devices == 3

    async def test_concurrent_same_device(self, activation_engine, activation_repository, amake_key):
        """Test that concurrent activations of one device bind it once."""
        key = await amake_key(max_devices=5)

        results = await asyncio.gather(
            *[activation_engine.activate(key.key_string, "device-001", CLIENT) for _ in range(4)]
        )

        assert sum(1 for r in results if r.newly_activated) == 1
        assert all(r.devices_used == 1 for r in results)
        assert await activation_repository.count_by_key(key.id) == 1


@pytest.mark.asyncio
@pytest.mark.django_db(transaction=True)
class TestVerify:
    """Tests for ActivationEngine.verify."""

    async def test_unactivated_device_is_invalid(
        self, activation_engine, activation_repository, activity_log_repository, amake_key
    ):
        """Test that verify is false for a device that never activated."""
        key = await amake_key(duration_hours=1)

        outcome = await activation_engine.verify(key.key_string, "device-001", CLIENT)

        assert outcome.valid is False
        assert outcome.message == "Device is not activated for this key"
        assert outcome.devices_used == 0
        assert await activation_repository.count_by_key(key.id) == 0
        assert await log_actions(activity_log_repository, key.id) == [
            LogAction.VERIFICATION_FAILED
        ]

    async def test_activate_then_verify(
        self, activation_engine, activity_log_repository, amake_key
    ):
        """Test that a bound device verifies as valid."""
        key = await amake_key(duration_hours=1)

        await activation_engine.activate(key.key_string, "device-001", CLIENT)
        outcome = await activation_engine.verify(key.key_string, "device-001", CLIENT)

        assert outcome.valid is True
        assert outcome.message == "Key is valid"
        assert outcome.devices_used == 1
        assert outcome.key.status == KeyStatus.ACTIVE
        assert await log_actions(activity_log_repository, key.id) == [
            LogAction.ACTIVATED,
            LogAction.VERIFIED,
        ]

    async def test_unknown_key(self, activation_engine):
        """Test that an unknown key is a result, not an error."""
        outcome = await activation_engine.verify(
            "ZZZZZ-ZZZZZ-ZZZZZ-ZZZZZ-ZZZZZ", "device-001", CLIENT
        )

        assert outcome.valid is False
        assert outcome.key is None
        assert outcome.message == "Key not found"

    async def test_expired_key(
        self, activation_engine, key_repository, activity_log_repository, amake_key
    ):
        """Test that a bound device on an expired key is invalid before any sweep."""
        key = await amake_key()
        await activation_engine.activate(key.key_string, "device-001", CLIENT)

        await KeyModel.objects.filter(id=key.id).aupdate(
            expires_at=key.created_at - timedelta(hours=1)
        )

        outcome = await activation_engine.verify(key.key_string, "device-001", CLIENT)

        assert outcome.valid is False
        assert outcome.key.status == KeyStatus.EXPIRED
        assert outcome.message == "Key has expired"
        stored = await key_repository.find_by_id(key.id)
        assert stored.status == KeyStatus.EXPIRED
        assert await log_actions(activity_log_repository, key.id) == [
            LogAction.ACTIVATED,
            LogAction.AUTO_EXPIRED,
        ]

    async def test_inactive_key(self, activation_engine, key_repository, amake_key):
        """Test that a bound device on a disabled key is invalid."""
        key = await amake_key()
        await activation_engine.activate(key.key_string, "device-001", CLIENT)
        await key_repository.update(
            key.id, lambda current: replace(current, status=KeyStatus.INACTIVE)
        )

        outcome = await activation_engine.verify(key.key_string, "device-001", CLIENT)

        assert outcome.valid is False
        assert outcome.message == "Key is not active"
        assert outcome.key.status == KeyStatus.INACTIVE

    async def test_invalid_input_raises(self, activation_engine):
        """Test that malformed input is still an error."""
        with pytest.raises(InvalidInputError):
            await activation_engine.verify("", "device-001", CLIENT)


class FailingActivityLogRepository(ActivityLogRepository):
    """Activity log store that rejects every write."""

    async def append(self, key_id, action, client):
        raise RuntimeError("log store down")

    async def find_by_key(self, key_id):
        return []


@pytest.mark.asyncio
@pytest.mark.django_db(transaction=True)
async def test_activity_log_failure_does_not_fail_activation(
    key_repository, activation_repository, amake_key
):
    """Test that a failing activity log leaves the activation intact."""
    engine = ActivationEngine(
        key_repository=key_repository,
        activation_repository=activation_repository,
        activity_log=ActivityLogService(FailingActivityLogRepository()),
    )
    key = await amake_key()

    outcome = await engine.activate(key.key_string, "device-001", CLIENT)

    assert outcome.newly_activated is True
    assert await activation_repository.count_by_key(key.id) == 1
