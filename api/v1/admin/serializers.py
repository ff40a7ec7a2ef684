"""
Serializers for admin API endpoints.
"""

from rest_framework import serializers

from core.domain.value_objects import KeyStatus
from keys.domain.key import MAX_DEVICES_LIMIT, MAX_DURATION_HOURS

STATUS_CHOICES = [status.value for status in KeyStatus]


class AdminRequestSerializer(serializers.Serializer):
    """Base serializer for admin requests that may carry the secret in the body."""

    admin_secret = serializers.CharField(required=False, write_only=True)


class IssueKeyRequestSerializer(AdminRequestSerializer):
    """Serializer for generate key request."""

    duration_hours = serializers.IntegerField(
        required=False, min_value=1, max_value=MAX_DURATION_HOURS
    )
    max_devices = serializers.IntegerField(
        required=False, min_value=1, max_value=MAX_DEVICES_LIMIT
    )
    status = serializers.ChoiceField(choices=STATUS_CHOICES, required=False)


class IssueKeyResponseSerializer(serializers.Serializer):
    """Serializer for generate key response."""

    success = serializers.BooleanField()
    key = serializers.CharField()
    expires_at = serializers.DateTimeField()
    duration_hours = serializers.IntegerField()
    max_devices = serializers.IntegerField()


class UpdateKeyRequestSerializer(AdminRequestSerializer):
    """Serializer for update key request. At least one field is required."""

    duration_hours = serializers.IntegerField(
        required=False, min_value=1, max_value=MAX_DURATION_HOURS
    )
    status = serializers.ChoiceField(choices=STATUS_CHOICES, required=False)
    max_devices = serializers.IntegerField(
        required=False, min_value=1, max_value=MAX_DEVICES_LIMIT
    )


class KeySerializer(serializers.Serializer):
    """Serializer for KeyDTO."""

    id = serializers.IntegerField()
    key_string = serializers.CharField()
    duration_hours = serializers.IntegerField()
    max_devices = serializers.IntegerField()
    used_devices = serializers.IntegerField()
    created_at = serializers.DateTimeField()
    expires_at = serializers.DateTimeField()
    status = serializers.CharField()


class KeyListItemSerializer(KeySerializer):
    """Serializer for an entry of the key list."""

    activated_devices = serializers.IntegerField()


class UpdateKeyResponseSerializer(serializers.Serializer):
    """Serializer for update key response."""

    success = serializers.BooleanField()
    key = KeySerializer()


class DeleteKeyResponseSerializer(serializers.Serializer):
    """Serializer for delete key response."""

    success = serializers.BooleanField()
    message = serializers.CharField()


class LogEntrySerializer(serializers.Serializer):
    """Serializer for LogEntryDTO."""

    id = serializers.IntegerField()
    key_id = serializers.IntegerField()
    action = serializers.CharField()
    ip_address = serializers.CharField(allow_null=True)
    user_agent = serializers.CharField(allow_null=True)
    created_at = serializers.DateTimeField()


class CleanupResponseSerializer(serializers.Serializer):
    """Serializer for cleanup response."""

    success = serializers.BooleanField()
    deleted_count = serializers.IntegerField()
    deleted_keys = KeySerializer(many=True)
