"""
Sales models: Product, Client and Invoice.

Invoice totals are derived on save from total_ht and tax_rate, so the
stored total_tax and total_ttc always agree with them.

Usage:
    from sales.models import Invoice, InvoiceStatus

    invoice = Invoice.objects.create(
        owner=user,
        client=client,
        number="F-2024-001",
        total_ht=Decimal("100.00"),
        tax_rate=Decimal("18.00"),
        due_date=date(2024, 5, 31),
    )
    invoice.total_ttc  # Decimal("118.00")
"""

from __future__ import annotations

import datetime
from decimal import ROUND_HALF_UP, Decimal

from django.conf import settings
from django.db import models
from django.utils import timezone

from core.model_mixins import UUIDPrimaryKeyMixin
from core.models import BaseModel

CENT = Decimal("0.01")

# Rates offered on invoices, in percent
TAX_RATES = (
    Decimal("0.00"),
    Decimal("3.00"),
    Decimal("5.00"),
    Decimal("10.00"),
    Decimal("15.00"),
    Decimal("18.00"),
    Decimal("21.00"),
)


def default_alert_threshold() -> int:
    return getattr(settings, "ALERT_DEFAULT_STOCK_THRESHOLD", 10)


class InvoiceStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    PARTIALLY_PAID = "partially_paid", "Partially paid"
    PAID = "paid", "Paid"
    CANCELLED = "cancelled", "Cancelled"


# Statuses that still expect money from the client
UNPAID_STATUSES = frozenset({InvoiceStatus.PENDING.value, InvoiceStatus.PARTIALLY_PAID.value})


# =============================================================================
# Product
# =============================================================================


class Product(UUIDPrimaryKeyMixin, BaseModel):
    """
    Sellable item with a stock counter.

    A product is "low" once stock <= alert_threshold.
    """

    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="products",
        help_text="User account that owns this product",
    )
    name = models.CharField(
        max_length=255,
        help_text="Product name",
    )
    description = models.TextField(
        blank=True,
        default="",
        help_text="Optional description",
    )
    price = models.DecimalField(
        max_digits=15,
        decimal_places=2,
        help_text="Unit price excluding tax",
    )
    stock = models.PositiveIntegerField(
        default=0,
        help_text="Units in stock",
    )
    alert_threshold = models.PositiveIntegerField(
        default=default_alert_threshold,
        help_text="Stock level at or below which a stock alert is raised",
    )
    category = models.CharField(
        max_length=100,
        blank=True,
        default="",
        help_text="Free-form product category",
    )

    class Meta:
        ordering = ["name"]
        verbose_name = "Product"
        verbose_name_plural = "Products"
        constraints = [
            models.CheckConstraint(
                condition=models.Q(price__gte=0),
                name="sales_product_price_non_negative",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.name} ({self.stock})"

    @property
    def is_low_stock(self) -> bool:
        return self.stock <= self.alert_threshold


# =============================================================================
# Client
# =============================================================================


class Client(UUIDPrimaryKeyMixin, BaseModel):
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="clients",
        help_text="User account that owns this client record",
    )
    name = models.CharField(
        max_length=255,
        help_text="Client name",
    )
    email = models.EmailField(
        blank=True,
        default="",
        help_text="Contact email",
    )
    phone = models.CharField(
        max_length=50,
        blank=True,
        default="",
        help_text="Contact phone number",
    )
    address = models.TextField(
        blank=True,
        default="",
        help_text="Postal address",
    )
    company = models.CharField(
        max_length=255,
        blank=True,
        default="",
        help_text="Company name, if any",
    )

    class Meta:
        ordering = ["name"]
        verbose_name = "Client"
        verbose_name_plural = "Clients"

    def __str__(self) -> str:
        return self.name


# =============================================================================
# Invoice
# =============================================================================


class Invoice(UUIDPrimaryKeyMixin, BaseModel):
    """
    Invoice issued to a client.

    Fields:
        number: Invoice number, unique per owner
        status: pending, partially_paid, paid or cancelled
        total_ht: Total excluding tax
        tax_rate: Tax rate in percent
        total_tax / total_ttc: Computed on save
        due_date: Payment deadline; unpaid invoices past it are overdue
    """

    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="invoices",
        help_text="User account that issued this invoice",
    )
    client = models.ForeignKey(
        "sales.Client",
        on_delete=models.PROTECT,
        related_name="invoices",
        help_text="Invoiced client",
    )
    number = models.CharField(
        max_length=50,
        help_text="Invoice number, unique per owner",
    )
    status = models.CharField(
        max_length=20,
        choices=InvoiceStatus.choices,
        default=InvoiceStatus.PENDING,
        db_index=True,
        help_text="Payment status",
    )

    # ==========================================================================
    # Amounts
    # ==========================================================================

    total_ht = models.DecimalField(
        max_digits=15,
        decimal_places=2,
        help_text="Total excluding tax",
    )
    tax_rate = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        default=Decimal("0.00"),
        help_text="Tax rate in percent",
    )
    total_tax = models.DecimalField(
        max_digits=15,
        decimal_places=2,
        editable=False,
        default=Decimal("0.00"),
        help_text="Tax amount (computed)",
    )
    total_ttc = models.DecimalField(
        max_digits=15,
        decimal_places=2,
        editable=False,
        default=Decimal("0.00"),
        help_text="Total including tax (computed)",
    )

    due_date = models.DateField(
        null=True,
        blank=True,
        db_index=True,
        help_text="Payment due date",
    )
    notes = models.TextField(
        blank=True,
        default="",
        help_text="Free-form notes",
    )

    class Meta:
        ordering = ["-created_at"]
        verbose_name = "Invoice"
        verbose_name_plural = "Invoices"
        constraints = [
            models.UniqueConstraint(
                fields=["owner", "number"],
                name="unique_invoice_number_per_owner",
            ),
            models.CheckConstraint(
                condition=models.Q(total_ht__gte=0),
                name="sales_invoice_total_non_negative",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.number} ({self.status})"

    def save(self, *args, **kwargs):
        self.compute_totals()
        update_fields = kwargs.get("update_fields")
        if update_fields is not None:
            kwargs["update_fields"] = set(update_fields) | {"total_tax", "total_ttc"}
        super().save(*args, **kwargs)

    def compute_totals(self) -> None:
        """Derive total_tax and total_ttc from total_ht and tax_rate."""
        total_ht = Decimal(self.total_ht or 0)
        rate = Decimal(self.tax_rate or 0)
        self.total_tax = (total_ht * rate / Decimal("100")).quantize(CENT, rounding=ROUND_HALF_UP)
        self.total_ttc = (total_ht + self.total_tax).quantize(CENT, rounding=ROUND_HALF_UP)

    @property
    def is_unpaid(self) -> bool:
        return self.status in UNPAID_STATUSES

    def days_past_due(self, today: datetime.date | None = None) -> int:
        """Whole days since due_date (0 when not yet due or no due date)."""
        if self.due_date is None:
            return 0
        today = today or timezone.localdate()
        return max((today - self.due_date).days, 0)

    def is_overdue(self, today: datetime.date | None = None) -> bool:
        today = today or timezone.localdate()
        return self.is_unpaid and self.due_date is not None and self.due_date < today
