"""
Serializers for client API endpoints.
"""

from rest_framework import serializers


class KeyDeviceRequestSerializer(serializers.Serializer):
    """Serializer for activate and verify requests."""

    # Presence and format are checked by the activation engine so that
    # both endpoints report the same messages.
    key = serializers.CharField(required=False, allow_blank=True, allow_null=True, default=None)
    device_id = serializers.CharField(
        required=False, allow_blank=True, allow_null=True, default=None, trim_whitespace=False
    )


class ActivateKeyResponseSerializer(serializers.Serializer):
    """Serializer for activate key response."""

    success = serializers.BooleanField()
    expires_at = serializers.DateTimeField()
    duration_hours = serializers.IntegerField()
    devices_used = serializers.IntegerField()
    max_devices = serializers.IntegerField()
    message = serializers.CharField()


class VerifyKeyResponseSerializer(serializers.Serializer):
    """Serializer for verify key response."""

    valid = serializers.BooleanField()
    expires_at = serializers.DateTimeField(allow_null=True)
    status = serializers.CharField(allow_null=True)
    devices_used = serializers.IntegerField(allow_null=True)
    max_devices = serializers.IntegerField(allow_null=True)
    message = serializers.CharField()
