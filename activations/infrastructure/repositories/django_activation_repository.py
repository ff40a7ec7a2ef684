"""
Django implementation of ActivationRepository port.

This adapter converts between domain entities and Django ORM models.
"""
from typing import Optional

from asgiref.sync import sync_to_async
from django.db import IntegrityError, transaction

from activations.domain.activation import Activation
from activations.infrastructure.models import Activation as ActivationModel
from activations.ports.activation_repository import ActivationRepository
from core.domain.exceptions import (
    DeviceLimitReachedError,
    KeyNotFoundError,
    UniqueViolationError,
)
from core.domain.value_objects import DeviceId
from keys.infrastructure.models import Key as KeyModel


class DjangoActivationRepository(ActivationRepository):
    """
    Django ORM implementation of ActivationRepository.

    This adapter:
    1. Converts Django models to domain entities
    2. Serializes inserts per key with a row lock on the key
    3. Implements repository interface
    """

    def _to_domain(self, model: ActivationModel) -> Activation:
        """
        Convert Django model to domain entity.

        Args:
            model: Django Activation model

        Returns:
            Activation domain entity
        """
        return Activation(
            id=model.id,
            key_id=model.key_id,
            device_id=DeviceId(model.device_id),
            ip_address=model.ip_address,
            created_at=model.created_at,
        )

    @sync_to_async
    def count_by_key(self, key_id: int) -> int:
        """
        Count activations for a key.

        Args:
            key_id: Key id

        Returns:
            Number of activated devices
        """
        return ActivationModel.objects.filter(key_id=key_id).count()  # pylint: disable=no-member

    @sync_to_async
    def find_by_key_and_device(self, key_id: int, device_id: str) -> Optional[Activation]:
        """
        Find an activation by key and device.

        Args:
            key_id: Key id
            device_id: Device identifier

        Returns:
            Activation entity or None if not found
        """
        try:
            # pylint: disable=no-member
            model = ActivationModel.objects.get(key_id=key_id, device_id=device_id)
            return self._to_domain(model)
        except ActivationModel.DoesNotExist:  # pylint: disable=no-member
            return None

    @sync_to_async
    def insert(self, key_id: int, device_id: str, ip_address: Optional[str]) -> Activation:
        """
        Insert an activation and mirror the new count on the key.

        Args:
            key_id: Key id
            device_id: Device identifier
            ip_address: Origin address

        Returns:
            Created Activation entity
        """
        try:
            with transaction.atomic():
                try:
                    # pylint: disable=no-member
                    key = KeyModel.objects.select_for_update().get(id=key_id)
                except KeyModel.DoesNotExist:  # pylint: disable=no-member
                    raise KeyNotFoundError() from None

                # pylint: disable=no-member
                count = ActivationModel.objects.filter(key_id=key_id).count()
                if count >= key.max_devices:
                    raise DeviceLimitReachedError()

                model = ActivationModel.objects.create(  # pylint: disable=no-member
                    key_id=key_id,
                    device_id=device_id,
                    ip_address=ip_address,
                )
                KeyModel.objects.filter(id=key_id).update(  # pylint: disable=no-member
                    used_devices=count + 1
                )
        except IntegrityError as e:
            raise UniqueViolationError(
                f"Device {device_id} already activated with key {key_id}"
            ) from e
        return self._to_domain(model)
