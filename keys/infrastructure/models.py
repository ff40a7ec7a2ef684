"""
Key and LogEntry Django ORM models.

This is the infrastructure layer for keys.
Domain entities are in keys.domain.
"""
from django.db import models

from core.domain.value_objects import KeyStatus, LogAction


class Key(models.Model):
    """
    An issued license key.
    Devices bind to it through activations, up to max_devices.
    """

    STATUS_CHOICES = [(status.value, status.value.title()) for status in KeyStatus]

    key_string = models.CharField(max_length=255, unique=True)
    duration_hours = models.PositiveIntegerField()
    max_devices = models.PositiveIntegerField(default=10)
    used_devices = models.PositiveIntegerField(
        default=0, help_text="Mirror of the activation count, updated with each insert"
    )
    created_at = models.DateTimeField()
    expires_at = models.DateTimeField(db_index=True)
    status = models.CharField(
        max_length=20, choices=STATUS_CHOICES, default=KeyStatus.ACTIVE.value
    )

    class Meta:
        db_table = "keys"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status", "expires_at"], name="keys_status_expires_idx"),
        ]

    def __str__(self):
        return self.key_string


class LogEntry(models.Model):
    """
    Append-only audit trail of key lifecycle events.
    """

    ACTION_CHOICES = [(action.value, action.value.replace("_", " ").title()) for action in LogAction]

    key = models.ForeignKey(Key, on_delete=models.CASCADE, related_name="logs")
    action = models.CharField(max_length=50, choices=ACTION_CHOICES)
    ip_address = models.TextField(null=True, blank=True)
    user_agent = models.TextField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        db_table = "key_logs"
        ordering = ["-created_at", "-id"]

    def __str__(self):
        return f"{self.action} - key {self.key_id}"
