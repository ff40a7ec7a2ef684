import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Key",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True, primary_key=True, serialize=False, verbose_name="ID"
                    ),
                ),
                ("key_string", models.CharField(max_length=255, unique=True)),
                ("duration_hours", models.PositiveIntegerField()),
                ("max_devices", models.PositiveIntegerField(default=10)),
                (
                    "used_devices",
                    models.PositiveIntegerField(
                        default=0,
                        help_text="Mirror of the activation count, updated with each insert",
                    ),
                ),
                ("created_at", models.DateTimeField()),
                ("expires_at", models.DateTimeField(db_index=True)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("active", "Active"),
                            ("inactive", "Inactive"),
                            ("expired", "Expired"),
                        ],
                        default="active",
                        max_length=20,
                    ),
                ),
            ],
            options={
                "db_table": "keys",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(
                        fields=["status", "expires_at"], name="keys_status_expires_idx"
                    )
                ],
            },
        ),
        migrations.CreateModel(
            name="LogEntry",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True, primary_key=True, serialize=False, verbose_name="ID"
                    ),
                ),
                (
                    "action",
                    models.CharField(
                        choices=[
                            ("activated", "Activated"),
                            ("reactivated", "Reactivated"),
                            ("verified", "Verified"),
                            ("verification_failed", "Verification Failed"),
                            ("activation_expired", "Activation Expired"),
                            ("auto_expired", "Auto Expired"),
                        ],
                        max_length=50,
                    ),
                ),
                ("ip_address", models.TextField(blank=True, null=True)),
                ("user_agent", models.TextField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                (
                    "key",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="logs",
                        to="keys.key",
                    ),
                ),
            ],
            options={
                "db_table": "key_logs",
                "ordering": ["-created_at", "-id"],
            },
        ),
    ]
