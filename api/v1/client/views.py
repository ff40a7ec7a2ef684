"""
Client API views.

These endpoints are used by installed software to:
- Activate a key on a device
- Verify a key for a device
"""

from asgiref.sync import async_to_sync
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from activations.application.commands.activate_key import ActivateKeyCommand
from activations.application.handlers.activate_key_handler import ActivateKeyHandler
from activations.application.handlers.verify_key_handler import VerifyKeyHandler
from activations.application.queries.verify_key import VerifyKeyQuery
from activations.infrastructure.repositories.django_activation_repository import (
    DjangoActivationRepository,
)
from api.v1.client.serializers import (
    ActivateKeyResponseSerializer,
    KeyDeviceRequestSerializer,
    VerifyKeyResponseSerializer,
)
from core.utils.client_info import get_client_info
from keys.infrastructure.repositories.django_activity_log_repository import (
    DjangoActivityLogRepository,
)
from keys.infrastructure.repositories.django_key_repository import DjangoKeyRepository

# Initialize repositories (in production, use DI container)
_key_repo = DjangoKeyRepository()
_activation_repo = DjangoActivationRepository()
_activity_log_repo = DjangoActivityLogRepository()


class ActivateKeyView(APIView):
    """View for activating a key on a device."""

    @extend_schema(
        operation_id="activate_key",
        summary="Activate Key",
        description=(
            "Bind a device to a key. Activating a device that is already bound "
            "succeeds again without using another device slot."
        ),
        tags=["Client API"],
        request=KeyDeviceRequestSerializer,
        responses={
            200: ActivateKeyResponseSerializer,
            400: {"description": "Invalid input, expired or inactive key, or device limit reached"},
            404: {"description": "Key not found"},
        },
    )
    def post(self, request: Request) -> Response:
        """Activate a key on a device."""
        return async_to_sync(self._handle_activate)(request)

    async def _handle_activate(self, request: Request) -> Response:
        """Async handler for activate key."""
        serializer = KeyDeviceRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        handler = ActivateKeyHandler(
            key_repository=_key_repo,
            activation_repository=_activation_repo,
            activity_log_repository=_activity_log_repo,
        )
        command = ActivateKeyCommand(
            key=serializer.validated_data["key"],
            device_id=serializer.validated_data["device_id"],
            client=get_client_info(request),
        )
        result = await handler.handle(command)

        return Response(ActivateKeyResponseSerializer(result).data, status=status.HTTP_200_OK)


class VerifyKeyView(APIView):
    """View for verifying a key for a device."""

    @extend_schema(
        operation_id="verify_key",
        summary="Verify Key",
        description=(
            "Check whether a device holds a valid activation of a key. "
            "An unknown, expired or inactive key is reported with valid=false."
        ),
        tags=["Client API"],
        request=KeyDeviceRequestSerializer,
        responses={
            200: VerifyKeyResponseSerializer,
            400: {"description": "Missing key or malformed device_id"},
        },
    )
    def post(self, request: Request) -> Response:
        """Verify a key for a device."""
        return async_to_sync(self._handle_verify)(request)

    async def _handle_verify(self, request: Request) -> Response:
        """Async handler for verify key."""
        serializer = KeyDeviceRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        handler = VerifyKeyHandler(
            key_repository=_key_repo,
            activation_repository=_activation_repo,
            activity_log_repository=_activity_log_repo,
        )
        query = VerifyKeyQuery(
            key=serializer.validated_data["key"],
            device_id=serializer.validated_data["device_id"],
            client=get_client_info(request),
        )
        result = await handler.handle(query)

        return Response(VerifyKeyResponseSerializer(result).data, status=status.HTTP_200_OK)
