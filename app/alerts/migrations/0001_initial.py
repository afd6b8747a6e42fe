import uuid

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="BusinessAlert",
            fields=[
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, help_text="Timestamp when this record was created")),
                ("updated_at", models.DateTimeField(auto_now=True, help_text="Timestamp when this record was last modified")),
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, help_text="Unique identifier (UUID4)", primary_key=True, serialize=False)),
                (
                    "type",
                    models.CharField(
                        choices=[
                            ("low_stock", "Low stock"),
                            ("critical_stock", "Critical stock"),
                            ("overdue_invoice", "Overdue invoice"),
                            ("payment_due", "Payment due"),
                        ],
                        help_text="Kind of alert",
                        max_length=30,
                    ),
                ),
                (
                    "severity",
                    models.CharField(
                        choices=[("low", "Low"), ("medium", "Medium"), ("high", "High"), ("critical", "Critical")],
                        default="medium",
                        help_text="How urgent the alert is",
                        max_length=10,
                    ),
                ),
                ("title", models.CharField(help_text="Short headline", max_length=255)),
                ("message", models.TextField(help_text="Full alert text")),
                (
                    "entity_type",
                    models.CharField(
                        blank=True,
                        choices=[("product", "Product"), ("invoice", "Invoice"), ("expense", "Expense"), ("fund", "Fund")],
                        default="",
                        help_text="Type of the record the alert refers to",
                        max_length=20,
                    ),
                ),
                ("entity_id", models.UUIDField(blank=True, help_text="ID of the record the alert refers to", null=True)),
                ("metadata", models.JSONField(blank=True, default=dict, help_text="Additional context captured by the scan")),
                ("is_read", models.BooleanField(default=False, help_text="Whether the user has seen the alert")),
                ("is_resolved", models.BooleanField(db_index=True, default=False, help_text="Whether the alert is closed")),
                ("resolved_at", models.DateTimeField(blank=True, help_text="When the alert was resolved", null=True)),
                (
                    "owner",
                    models.ForeignKey(
                        help_text="User account the alert is for",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="business_alerts",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "Business alert",
                "verbose_name_plural": "Business alerts",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["owner", "is_read"], name="alerts_owner_read_idx"),
                    models.Index(fields=["owner", "type", "is_resolved"], name="alerts_owner_type_open_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        condition=models.Q(("is_resolved", False)),
                        fields=("owner", "type", "entity_type", "entity_id"),
                        name="unique_open_alert_per_entity",
                    ),
                ],
            },
        ),
    ]
