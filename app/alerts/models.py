"""
BusinessAlert model.

An alert is "open" while is_resolved is False. At most one open alert may
exist per (owner, type, entity_type, entity_id); the partial unique
constraint below enforces it, and AlertService relies on it to stay correct
when two scans run at once.

Usage:
    from alerts.models import AlertType, BusinessAlert

    BusinessAlert.objects.filter(owner=user, is_resolved=False, type=AlertType.LOW_STOCK)
"""

from __future__ import annotations

from django.conf import settings
from django.db import models

from core.model_mixins import UUIDPrimaryKeyMixin
from core.models import BaseModel


class AlertType(models.TextChoices):
    LOW_STOCK = "low_stock", "Low stock"
    CRITICAL_STOCK = "critical_stock", "Critical stock"
    OVERDUE_INVOICE = "overdue_invoice", "Overdue invoice"
    PAYMENT_DUE = "payment_due", "Payment due"


class AlertSeverity(models.TextChoices):
    LOW = "low", "Low"
    MEDIUM = "medium", "Medium"
    HIGH = "high", "High"
    CRITICAL = "critical", "Critical"


class AlertEntityType(models.TextChoices):
    PRODUCT = "product", "Product"
    INVOICE = "invoice", "Invoice"
    EXPENSE = "expense", "Expense"
    FUND = "fund", "Fund"


STOCK_ALERT_TYPES = frozenset({AlertType.LOW_STOCK.value, AlertType.CRITICAL_STOCK.value})


class BusinessAlert(UUIDPrimaryKeyMixin, BaseModel):
    """
    Advisory notice for one business account.

    Fields:
        type / severity: What happened and how urgent it is
        title / message: Display text
        entity_type / entity_id: Record the alert is about (optional)
        metadata: Scan-specific context (stock levels, invoice amounts...)
        is_read: Seen by the user
        is_resolved / resolved_at: Closed, by the user or by a later scan
    """

    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="business_alerts",
        help_text="User account the alert is for",
    )
    type = models.CharField(
        max_length=30,
        choices=AlertType.choices,
        help_text="Kind of alert",
    )
    severity = models.CharField(
        max_length=10,
        choices=AlertSeverity.choices,
        default=AlertSeverity.MEDIUM,
        help_text="How urgent the alert is",
    )
    title = models.CharField(
        max_length=255,
        help_text="Short headline",
    )
    message = models.TextField(
        help_text="Full alert text",
    )
    entity_type = models.CharField(
        max_length=20,
        choices=AlertEntityType.choices,
        blank=True,
        default="",
        help_text="Type of the record the alert refers to",
    )
    entity_id = models.UUIDField(
        null=True,
        blank=True,
        help_text="ID of the record the alert refers to",
    )
    metadata = models.JSONField(
        default=dict,
        blank=True,
        help_text="Additional context captured by the scan",
    )

    # ==========================================================================
    # Inbox State
    # ==========================================================================

    is_read = models.BooleanField(
        default=False,
        help_text="Whether the user has seen the alert",
    )
    is_resolved = models.BooleanField(
        default=False,
        db_index=True,
        help_text="Whether the alert is closed",
    )
    resolved_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text="When the alert was resolved",
    )

    class Meta:
        ordering = ["-created_at"]
        verbose_name = "Business alert"
        verbose_name_plural = "Business alerts"
        indexes = [
            models.Index(fields=["owner", "is_read"], name="alerts_owner_read_idx"),
            models.Index(fields=["owner", "type", "is_resolved"], name="alerts_owner_type_open_idx"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["owner", "type", "entity_type", "entity_id"],
                condition=models.Q(is_resolved=False),
                name="unique_open_alert_per_entity",
            ),
        ]

    def __str__(self) -> str:
        return f"[{self.severity}] {self.title}"
