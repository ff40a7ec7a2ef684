"""
Activation Django ORM model.

This is the infrastructure layer model for activations.
Domain entities are in activations.domain.activation.
"""
from django.db import models


class Activation(models.Model):
    """
    Binds one device to one key.
    Consumes a device slot of the key.
    """

    key = models.ForeignKey(
        "keys.Key",
        on_delete=models.CASCADE,
        related_name="activations",
    )
    device_id = models.CharField(max_length=255, help_text="Opaque client device identifier")
    ip_address = models.TextField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "key_activations"
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["key", "device_id"], name="unique_key_device"
            ),
        ]

    def __str__(self):
        return f"{self.key_id} @ {self.device_id}"
