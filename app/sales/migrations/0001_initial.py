import uuid
from decimal import Decimal

import django.db.models.deletion
import sales.models
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Client",
            fields=[
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, help_text="Timestamp when this record was created")),
                ("updated_at", models.DateTimeField(auto_now=True, help_text="Timestamp when this record was last modified")),
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, help_text="Unique identifier (UUID4)", primary_key=True, serialize=False)),
                ("name", models.CharField(help_text="Client name", max_length=255)),
                ("email", models.EmailField(blank=True, default="", help_text="Contact email", max_length=254)),
                ("phone", models.CharField(blank=True, default="", help_text="Contact phone number", max_length=50)),
                ("address", models.TextField(blank=True, default="", help_text="Postal address")),
                ("company", models.CharField(blank=True, default="", help_text="Company name, if any", max_length=255)),
                (
                    "owner",
                    models.ForeignKey(
                        help_text="User account that owns this client record",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="clients",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "Client",
                "verbose_name_plural": "Clients",
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="Product",
            fields=[
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, help_text="Timestamp when this record was created")),
                ("updated_at", models.DateTimeField(auto_now=True, help_text="Timestamp when this record was last modified")),
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, help_text="Unique identifier (UUID4)", primary_key=True, serialize=False)),
                ("name", models.CharField(help_text="Product name", max_length=255)),
                ("description", models.TextField(blank=True, default="", help_text="Optional description")),
                ("price", models.DecimalField(decimal_places=2, help_text="Unit price excluding tax", max_digits=15)),
                ("stock", models.PositiveIntegerField(default=0, help_text="Units in stock")),
                (
                    "alert_threshold",
                    models.PositiveIntegerField(
                        default=sales.models.default_alert_threshold,
                        help_text="Stock level at or below which a stock alert is raised",
                    ),
                ),
                ("category", models.CharField(blank=True, default="", help_text="Free-form product category", max_length=100)),
                (
                    "owner",
                    models.ForeignKey(
                        help_text="User account that owns this product",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="products",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "Product",
                "verbose_name_plural": "Products",
                "ordering": ["name"],
                "constraints": [
                    models.CheckConstraint(condition=models.Q(("price__gte", 0)), name="sales_product_price_non_negative"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Invoice",
            fields=[
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, help_text="Timestamp when this record was created")),
                ("updated_at", models.DateTimeField(auto_now=True, help_text="Timestamp when this record was last modified")),
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, help_text="Unique identifier (UUID4)", primary_key=True, serialize=False)),
                ("number", models.CharField(help_text="Invoice number, unique per owner", max_length=50)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("pending", "Pending"),
                            ("partially_paid", "Partially paid"),
                            ("paid", "Paid"),
                            ("cancelled", "Cancelled"),
                        ],
                        db_index=True,
                        default="pending",
                        help_text="Payment status",
                        max_length=20,
                    ),
                ),
                ("total_ht", models.DecimalField(decimal_places=2, help_text="Total excluding tax", max_digits=15)),
                ("tax_rate", models.DecimalField(decimal_places=2, default=Decimal("0.00"), help_text="Tax rate in percent", max_digits=5)),
                ("total_tax", models.DecimalField(decimal_places=2, default=Decimal("0.00"), editable=False, help_text="Tax amount (computed)", max_digits=15)),
                ("total_ttc", models.DecimalField(decimal_places=2, default=Decimal("0.00"), editable=False, help_text="Total including tax (computed)", max_digits=15)),
                ("due_date", models.DateField(blank=True, db_index=True, help_text="Payment due date", null=True)),
                ("notes", models.TextField(blank=True, default="", help_text="Free-form notes")),
                (
                    "client",
                    models.ForeignKey(
                        help_text="Invoiced client",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="invoices",
                        to="sales.client",
                    ),
                ),
                (
                    "owner",
                    models.ForeignKey(
                        help_text="User account that issued this invoice",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="invoices",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "Invoice",
                "verbose_name_plural": "Invoices",
                "ordering": ["-created_at"],
                "constraints": [
                    models.UniqueConstraint(fields=("owner", "number"), name="unique_invoice_number_per_owner"),
                    models.CheckConstraint(condition=models.Q(("total_ht__gte", 0)), name="sales_invoice_total_non_negative"),
                ],
            },
        ),
    ]
