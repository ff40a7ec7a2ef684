"""
Django implementation of KeyRepository port.

This adapter converts between domain entities and Django ORM models.
"""
from dataclasses import replace
from datetime import datetime
from typing import Callable, List, Optional, Tuple

from asgiref.sync import sync_to_async
from django.db import IntegrityError, transaction
from django.db.models import Count

from core.domain.exceptions import KeyNotFoundError, UniqueViolationError
from core.domain.value_objects import KeyStatus
from keys.domain.key import Key
from keys.infrastructure.models import Key as KeyModel
from keys.ports.key_repository import KeyRepository


class DjangoKeyRepository(KeyRepository):
    """
    Django ORM implementation of KeyRepository.

    This adapter:
    1. Converts Django models to domain entities
    2. Runs read-modify-write sequences inside one transaction
    3. Implements repository interface
    """

    def _to_domain(self, model: KeyModel) -> Key:
        """
        Convert Django model to domain entity.

        Args:
            model: Django Key model

        Returns:
            Key domain entity
        """
        return Key(
            id=model.id,
            key_string=model.key_string,
            duration_hours=model.duration_hours,
            max_devices=model.max_devices,
            used_devices=model.used_devices,
            status=KeyStatus(model.status),
            created_at=model.created_at,
            expires_at=model.expires_at,
        )

    @sync_to_async
    def save(self, key: Key) -> Key:
        """
        Insert a new key.

        Args:
            key: Key entity without id

        Returns:
            Saved key entity with its id
        """
        try:
            with transaction.atomic():
                # pylint: disable=no-member
                model = KeyModel.objects.create(
                    key_string=key.key_string,
                    duration_hours=key.duration_hours,
                    max_devices=key.max_devices,
                    used_devices=key.used_devices,
                    created_at=key.created_at,
                    expires_at=key.expires_at,
                    status=key.status.value,
                )
        except IntegrityError as e:
            raise UniqueViolationError(f"Key {key.key_string} already exists") from e
        return self._to_domain(model)

    @sync_to_async
    def find_by_id(self, key_id: int) -> Optional[Key]:
        """
        Find a key by ID.

        Args:
            key_id: Key id

        Returns:
            Key entity or None if not found
        """
        try:
            model = KeyModel.objects.get(id=key_id)  # pylint: disable=no-member
            return self._to_domain(model)
        except KeyModel.DoesNotExist:  # pylint: disable=no-member
            return None

    @sync_to_async
    def find_by_key_string(self, key_string: str) -> Optional[Key]:
        """
        Find a key by key string.

        Args:
            key_string: Normalized key string

        Returns:
            Key entity or None if not found
        """
        try:
            model = KeyModel.objects.get(key_string=key_string)  # pylint: disable=no-member
            return self._to_domain(model)
        except KeyModel.DoesNotExist:  # pylint: disable=no-member
            return None

    @sync_to_async
    def list_with_activation_counts(self) -> List[Tuple[Key, int]]:
        """Return all keys, newest first, with live activation counts."""
        models = (
            KeyModel.objects.annotate(  # pylint: disable=no-member
                activated_devices=Count("activations")
            )
            .order_by("-created_at", "-id")
        )
        return [(self._to_domain(model), model.activated_devices) for model in models]

    @sync_to_async
    def find_expired_active(self, now: datetime) -> List[Key]:
        """
        Find active keys whose expiry time has passed.

        Args:
            now: Reference time

        Returns:
            List of Key entities
        """
        models = KeyModel.objects.filter(  # pylint: disable=no-member
            status=KeyStatus.ACTIVE.value, expires_at__lt=now
        )
        return [self._to_domain(model) for model in models]

    @sync_to_async
    def mark_expired(self, key_id: int) -> bool:
        """
        Mark a key expired if it is still active.

        Args:
            key_id: Key id

        Returns:
            True if the status changed
        """
        updated = KeyModel.objects.filter(  # pylint: disable=no-member
            id=key_id, status=KeyStatus.ACTIVE.value
        ).update(status=KeyStatus.EXPIRED.value)
        return updated > 0

    @sync_to_async
    def update(self, key_id: int, mutate: Callable[[Key], Key]) -> Key:
        """
        Load, change and store a key in one transaction.

        Args:
            key_id: Key id
            mutate: Pure function producing the new key state

        Returns:
            Updated key entity
        """
        with transaction.atomic():
            try:
                # pylint: disable=no-member
                model = KeyModel.objects.select_for_update().get(id=key_id)
            except KeyModel.DoesNotExist:  # pylint: disable=no-member
                raise KeyNotFoundError(f"Key {key_id} not found") from None

            current = replace(self._to_domain(model), used_devices=model.activations.count())
            updated = mutate(current)

            model.duration_hours = updated.duration_hours
            model.expires_at = updated.expires_at
            model.max_devices = updated.max_devices
            model.used_devices = updated.used_devices
            model.status = updated.status.value
            model.save(
                update_fields=[
                    "duration_hours",
                    "expires_at",
                    "max_devices",
                    "used_devices",
                    "status",
                ]
            )
        return self._to_domain(model)

    @sync_to_async
    def delete(self, key_id: int) -> bool:
        """
        Delete a key; activations and log entries cascade.

        Args:
            key_id: Key id

        Returns:
            True if the key existed
        """
        with transaction.atomic():
            deleted, _ = KeyModel.objects.filter(id=key_id).delete()  # pylint: disable=no-member
        return deleted > 0

    @sync_to_async
    def delete_expired(self, now: datetime) -> List[Key]:
        """
        Hard-delete every key past its expiry time, whatever its status.

        Args:
            now: Reference time

        Returns:
            The deleted keys
        """
        with transaction.atomic():
            models = list(
                KeyModel.objects.select_for_update().filter(  # pylint: disable=no-member
                    expires_at__lt=now
                )
            )
            deleted = [self._to_domain(model) for model in models]
            if models:
                KeyModel.objects.filter(  # pylint: disable=no-member
                    id__in=[model.id for model in models]
                ).delete()
        return deleted
