"""
Pytest configuration and shared fixtures.
"""

from datetime import timedelta

import pytest
from django.contrib.auth.hashers import make_password
from django.utils import timezone

from activations.domain.services import ActivationEngine
from activations.infrastructure.repositories.django_activation_repository import (
    DjangoActivationRepository,
)
from keys.application.services.activity_log_service import ActivityLogService
from keys.domain.key_generator import KeyGenerator
from keys.infrastructure.models import Key as KeyModel
from keys.infrastructure.repositories.django_activity_log_repository import (
    DjangoActivityLogRepository,
)
from keys.infrastructure.repositories.django_key_repository import DjangoKeyRepository

ADMIN_SECRET = "s3cret-admin-pass"


@pytest.fixture
def key_repository():
    """Fixture for KeyRepository."""
    return DjangoKeyRepository()


@pytest.fixture
def activation_repository():
    """Fixture for ActivationRepository."""
    return DjangoActivationRepository()


@pytest.fixture
def activity_log_repository():
    """Fixture for ActivityLogRepository."""
    return DjangoActivityLogRepository()


@pytest.fixture
def activation_engine(key_repository, activation_repository, activity_log_repository):
    """Fixture for an ActivationEngine over the Django repositories."""
    return ActivationEngine(
        key_repository=key_repository,
        activation_repository=activation_repository,
        activity_log=ActivityLogService(activity_log_repository),
    )


def _key_fields(
    duration_hours=24,
    max_devices=10,
    status="active",
    expires_in=None,
    key_string=None,
):
    """
    Build the column values of a stored key.

    ``expires_in`` is a timedelta from now; a negative value gives a key
    already past its expiry time.
    """
    now = timezone.now()
    expires_at = now + (expires_in if expires_in is not None else timedelta(hours=duration_hours))
    return {
        "key_string": key_string or KeyGenerator.generate(),
        "duration_hours": duration_hours,
        "max_devices": max_devices,
        "created_at": now,
        "expires_at": expires_at,
        "status": status,
    }


@pytest.fixture
def make_key():
    """Factory fixture that stores a key row through the ORM (sync tests)."""

    def _make_key(**kwargs):
        return KeyModel.objects.create(**_key_fields(**kwargs))

    return _make_key


@pytest.fixture
def amake_key():
    """Factory fixture that stores a key row through the async ORM API."""

    async def _make_key(**kwargs):
        return await KeyModel.objects.acreate(**_key_fields(**kwargs))

    return _make_key


@pytest.fixture
def admin_secret(settings):
    """Configure the admin secret hash and return the plain secret."""
    settings.ADMIN_SECRET_HASH = make_password(ADMIN_SECRET)
    return ADMIN_SECRET


@pytest.fixture
def api_client():
    """Fixture for DRF API client."""
    from rest_framework.test import APIClient

    return APIClient()


@pytest.fixture
def admin_client(api_client, admin_secret):
    """API client that sends the admin secret header on every request."""
    api_client.credentials(HTTP_ADMIN_SECRET=admin_secret)
    return api_client
