"""
Admin API views.

These endpoints are used by the key administrator to:
- Issue keys
- List, update and delete keys
- Read the activity log of a key
- Remove expired keys

Every request is authenticated by AdminSecretAuthenticationMiddleware.
"""

from asgiref.sync import async_to_sync
from django.conf import settings
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from api.v1.admin.serializers import (
    AdminRequestSerializer,
    CleanupResponseSerializer,
    DeleteKeyResponseSerializer,
    IssueKeyRequestSerializer,
    IssueKeyResponseSerializer,
    KeyListItemSerializer,
    LogEntrySerializer,
    UpdateKeyRequestSerializer,
    UpdateKeyResponseSerializer,
)
from keys.application.commands.delete_key import CleanupExpiredKeysCommand, DeleteKeyCommand
from keys.application.commands.issue_key import IssueKeyCommand
from keys.application.commands.update_key import UpdateKeyCommand
from keys.application.handlers.delete_key_handler import (
    CleanupExpiredKeysHandler,
    DeleteKeyHandler,
)
from keys.application.handlers.get_key_logs_handler import GetKeyLogsHandler
from keys.application.handlers.issue_key_handler import IssueKeyHandler
from keys.application.handlers.list_keys_handler import ListKeysHandler
from keys.application.handlers.update_key_handler import UpdateKeyHandler
from keys.application.queries.admin_queries import GetKeyLogsQuery, ListKeysQuery
from keys.infrastructure.repositories.django_activity_log_repository import (
    DjangoActivityLogRepository,
)
from keys.infrastructure.repositories.django_key_repository import DjangoKeyRepository

# Initialize repositories (in production, use DI container)
_key_repo = DjangoKeyRepository()
_activity_log_repo = DjangoActivityLogRepository()

ADMIN_SECRET_PARAMETER = OpenApiParameter(
    name="Admin-Secret",
    type=str,
    location=OpenApiParameter.HEADER,
    required=False,
    description="Admin secret (may also be sent as admin_secret in the JSON body)",
)
KEY_ID_PARAMETER = OpenApiParameter(
    name="key_id",
    type=int,
    location=OpenApiParameter.PATH,
    description="Key id",
)
UNAUTHORIZED = {"description": "Unauthorized - Missing or invalid admin secret"}


class GenerateKeyView(APIView):
    """View for issuing a new key."""

    @extend_schema(
        operation_id="generate_key",
        summary="Generate Key",
        description="Mint a new key with a validity window and a device limit.",
        tags=["Admin API"],
        parameters=[ADMIN_SECRET_PARAMETER],
        request=IssueKeyRequestSerializer,
        responses={
            200: IssueKeyResponseSerializer,
            400: {"description": "Bad Request"},
            401: UNAUTHORIZED,
            409: {"description": "No unique key string could be generated"},
        },
    )
    def post(self, request: Request) -> Response:
        """Issue a new key."""
        return async_to_sync(self._handle_generate)(request)

    async def _handle_generate(self, request: Request) -> Response:
        """Async handler for generate key."""
        serializer = IssueKeyRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        handler = IssueKeyHandler(
            key_repository=_key_repo,
            max_attempts=settings.KEY_GENERATION_MAX_ATTEMPTS,
        )
        command = IssueKeyCommand(
            duration_hours=data.get("duration_hours", settings.KEY_DEFAULT_DURATION_HOURS),
            max_devices=data.get("max_devices", settings.KEY_DEFAULT_MAX_DEVICES),
            status=data.get("status", "active"),
        )
        result = await handler.handle(command)

        return Response(IssueKeyResponseSerializer(result).data, status=status.HTTP_200_OK)


class KeyListView(APIView):
    """View for listing keys."""

    @extend_schema(
        operation_id="list_keys",
        summary="List Keys",
        description="Every key, newest first, with its live activation count.",
        tags=["Admin API"],
        parameters=[ADMIN_SECRET_PARAMETER],
        responses={200: KeyListItemSerializer(many=True), 401: UNAUTHORIZED},
    )
    def get(self, request: Request) -> Response:
        """List keys."""
        return async_to_sync(self._handle_list)(request)

    async def _handle_list(self, request: Request) -> Response:
        """Async handler for list keys."""
        result = await ListKeysHandler(_key_repo).handle(ListKeysQuery())
        return Response(KeyListItemSerializer(result, many=True).data, status=status.HTTP_200_OK)


class KeyDetailView(APIView):
    """View for updating and deleting a key."""

    @extend_schema(
        operation_id="update_key",
        summary="Update Key",
        description=(
            "Change duration, status or device limit. A new duration moves "
            "expires_at to now plus the new duration."
        ),
        tags=["Admin API"],
        parameters=[ADMIN_SECRET_PARAMETER, KEY_ID_PARAMETER],
        request=UpdateKeyRequestSerializer,
        responses={
            200: UpdateKeyResponseSerializer,
            400: {"description": "Bad Request"},
            401: UNAUTHORIZED,
            404: {"description": "Key not found"},
        },
    )
    def put(self, request: Request, key_id: int) -> Response:
        """Update a key."""
        return async_to_sync(self._handle_update)(request, key_id)

    async def _handle_update(self, request: Request, key_id: int) -> Response:
        """Async handler for update key."""
        serializer = UpdateKeyRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        command = UpdateKeyCommand(
            key_id=key_id,
            duration_hours=data.get("duration_hours"),
            status=data.get("status"),
            max_devices=data.get("max_devices"),
        )
        result = await UpdateKeyHandler(_key_repo).handle(command)

        return Response(UpdateKeyResponseSerializer(result).data, status=status.HTTP_200_OK)

    @extend_schema(
        operation_id="delete_key",
        summary="Delete Key",
        description="Delete a key together with its activations and activity log.",
        tags=["Admin API"],
        parameters=[ADMIN_SECRET_PARAMETER, KEY_ID_PARAMETER],
        request=AdminRequestSerializer,
        responses={
            200: DeleteKeyResponseSerializer,
            401: UNAUTHORIZED,
            404: {"description": "Key not found"},
        },
    )
    def delete(self, request: Request, key_id: int) -> Response:
        """Delete a key."""
        return async_to_sync(self._handle_delete)(request, key_id)

    async def _handle_delete(self, request: Request, key_id: int) -> Response:
        """Async handler for delete key."""
        await DeleteKeyHandler(_key_repo).handle(DeleteKeyCommand(key_id=key_id))
        return Response(
            {"success": True, "message": "Key deleted successfully"},
            status=status.HTTP_200_OK,
        )


class KeyLogsView(APIView):
    """View for the activity log of a key."""

    @extend_schema(
        operation_id="get_key_logs",
        summary="Get Key Logs",
        description="Activity log entries of a key, newest first.",
        tags=["Admin API"],
        parameters=[ADMIN_SECRET_PARAMETER, KEY_ID_PARAMETER],
        responses={200: LogEntrySerializer(many=True), 401: UNAUTHORIZED},
    )
    def get(self, request: Request, key_id: int) -> Response:
        """Get the activity log of a key."""
        return async_to_sync(self._handle_logs)(request, key_id)

    async def _handle_logs(self, request: Request, key_id: int) -> Response:
        """Async handler for key logs."""
        result = await GetKeyLogsHandler(_activity_log_repo).handle(
            GetKeyLogsQuery(key_id=key_id)
        )
        return Response(LogEntrySerializer(result, many=True).data, status=status.HTTP_200_OK)


class CleanupView(APIView):
    """View for removing expired keys."""

    @extend_schema(
        operation_id="cleanup_expired_keys",
        summary="Cleanup Expired Keys",
        description="Hard-delete every key past its expiry time, whatever its status.",
        tags=["Admin API"],
        parameters=[ADMIN_SECRET_PARAMETER],
        request=AdminRequestSerializer,
        responses={200: CleanupResponseSerializer, 401: UNAUTHORIZED},
    )
    def post(self, request: Request) -> Response:
        """Remove expired keys."""
        return async_to_sync(self._handle_cleanup)(request)

    async def _handle_cleanup(self, request: Request) -> Response:
        """Async handler for cleanup."""
        result = await CleanupExpiredKeysHandler(_key_repo).handle(CleanupExpiredKeysCommand())
        return Response(CleanupResponseSerializer(result).data, status=status.HTTP_200_OK)
