import uuid

import django.db.models.deletion
import django.utils.timezone
import django_fsm
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="ExpenseCategory",
            fields=[
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, help_text="Timestamp when this record was created")),
                ("updated_at", models.DateTimeField(auto_now=True, help_text="Timestamp when this record was last modified")),
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, help_text="Unique identifier (UUID4)", primary_key=True, serialize=False)),
                ("name", models.CharField(help_text="Category name, unique per owner", max_length=100)),
                ("description", models.TextField(blank=True, default="", help_text="Optional description")),
                ("is_major", models.BooleanField(default=False, help_text="Whether this is a major expense category")),
                (
                    "owner",
                    models.ForeignKey(
                        help_text="User account that owns this category",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="expense_categories",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "Expense category",
                "verbose_name_plural": "Expense categories",
                "ordering": ["name"],
                "constraints": [
                    models.UniqueConstraint(fields=("owner", "name"), name="unique_expense_category_per_owner"),
                ],
            },
        ),
        migrations.CreateModel(
            name="ImprestFund",
            fields=[
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, help_text="Timestamp when this record was created")),
                ("updated_at", models.DateTimeField(auto_now=True, help_text="Timestamp when this record was last modified")),
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, help_text="Unique identifier (UUID4)", primary_key=True, serialize=False)),
                ("reference", models.CharField(editable=False, help_text="Unique fund reference (IMP-...)", max_length=40, unique=True)),
                ("account_holder", models.CharField(help_text="Name of the person holding the fund", max_length=150)),
                ("purpose", models.TextField(blank=True, default="", help_text="What the fund is used for")),
                ("initial_amount", models.DecimalField(decimal_places=2, editable=False, help_text="Opening amount (immutable once set)", max_digits=15)),
                ("current_balance", models.DecimalField(decimal_places=2, editable=False, help_text="Balance after the most recent transaction", max_digits=15)),
                (
                    "status",
                    models.CharField(
                        choices=[("active", "Active"), ("depleted", "Depleted"), ("closed", "Closed")],
                        db_index=True,
                        default="active",
                        help_text="Fund lifecycle status",
                        max_length=20,
                    ),
                ),
                ("closed_at", models.DateTimeField(blank=True, help_text="When the fund was closed", null=True)),
                (
                    "owner",
                    models.ForeignKey(
                        help_text="User account that owns this fund",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="imprest_funds",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "Imprest fund",
                "verbose_name_plural": "Imprest funds",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["owner", "status"], name="accounting__owner_i_5d0c1e_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(condition=models.Q(("current_balance__gte", 0)), name="imprest_fund_balance_non_negative"),
                    models.CheckConstraint(condition=models.Q(("initial_amount__gte", 0)), name="imprest_fund_initial_non_negative"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Expense",
            fields=[
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, help_text="Timestamp when this record was created")),
                ("updated_at", models.DateTimeField(auto_now=True, help_text="Timestamp when this record was last modified")),
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, help_text="Unique identifier (UUID4)", primary_key=True, serialize=False)),
                ("reference", models.CharField(editable=False, help_text="Unique expense reference (EXP-...)", max_length=40, unique=True)),
                ("description", models.CharField(help_text="What the money was spent on", max_length=255)),
                ("amount", models.DecimalField(decimal_places=2, help_text="Expense amount (always positive)", max_digits=15)),
                ("expense_date", models.DateField(db_index=True, default=django.utils.timezone.localdate, help_text="Date the expense was incurred")),
                (
                    "payment_method",
                    models.CharField(
                        choices=[("cash", "Cash"), ("bank_transfer", "Bank transfer"), ("check", "Check"), ("card", "Card")],
                        default="cash",
                        help_text="How the expense was paid",
                        max_length=20,
                    ),
                ),
                ("receipt_url", models.URLField(blank=True, default="", help_text="Link to the scanned receipt")),
                ("notes", models.TextField(blank=True, default="", help_text="Free-form notes")),
                (
                    "status",
                    django_fsm.FSMField(
                        choices=[("pending", "Pending"), ("approved", "Approved"), ("rejected", "Rejected")],
                        db_index=True,
                        default="pending",
                        help_text="Approval status (managed by FSM)",
                        max_length=50,
                        protected=True,
                    ),
                ),
                ("approved_at", models.DateTimeField(blank=True, help_text="When the expense was approved", null=True)),
                ("rejected_at", models.DateTimeField(blank=True, help_text="When the expense was rejected", null=True)),
                (
                    "approved_by",
                    models.ForeignKey(
                        blank=True,
                        help_text="User who approved the expense",
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="approved_expenses",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "category",
                    models.ForeignKey(
                        blank=True,
                        help_text="Expense category",
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="expenses",
                        to="accounting.expensecategory",
                    ),
                ),
                (
                    "fund",
                    models.ForeignKey(
                        blank=True,
                        help_text="Imprest fund charged when the expense is approved",
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="expenses",
                        to="accounting.imprestfund",
                    ),
                ),
                (
                    "owner",
                    models.ForeignKey(
                        help_text="User account that owns this expense",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="expenses",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "Expense",
                "verbose_name_plural": "Expenses",
                "ordering": ["-expense_date", "-created_at"],
                "indexes": [
                    models.Index(fields=["owner", "status"], name="accounting__owner_i_8e2f4a_idx"),
                    models.Index(fields=["owner", "expense_date"], name="accounting__owner_i_b71c3d_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(condition=models.Q(("amount__gt", 0)), name="expense_amount_positive"),
                ],
            },
        ),
        migrations.CreateModel(
            name="ImprestTransaction",
            fields=[
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, help_text="Timestamp when this record was created")),
                ("updated_at", models.DateTimeField(auto_now=True, help_text="Timestamp when this record was last modified")),
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, help_text="Unique identifier (UUID4)", primary_key=True, serialize=False)),
                ("reference", models.CharField(editable=False, help_text="Unique transaction reference (ITX-...)", max_length=40, unique=True)),
                ("sequence", models.PositiveIntegerField(editable=False, help_text="Position in the fund's history (1-based, gapless)")),
                (
                    "type",
                    models.CharField(
                        choices=[("deposit", "Deposit"), ("withdrawal", "Withdrawal"), ("expense", "Expense"), ("refund", "Refund")],
                        db_index=True,
                        help_text="Kind of transaction",
                        max_length=20,
                    ),
                ),
                ("amount", models.DecimalField(decimal_places=2, help_text="Transaction amount (always positive)", max_digits=15)),
                ("description", models.CharField(help_text="Human-readable description", max_length=255)),
                ("balance_after", models.DecimalField(decimal_places=2, help_text="Fund balance immediately after this transaction", max_digits=15)),
                ("notes", models.TextField(blank=True, default="", help_text="Free-form notes")),
                (
                    "expense",
                    models.ForeignKey(
                        blank=True,
                        help_text="Expense that produced this transaction, if any",
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="ledger_transactions",
                        to="accounting.expense",
                    ),
                ),
                (
                    "fund",
                    models.ForeignKey(
                        help_text="Fund this transaction posts against",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="transactions",
                        to="accounting.imprestfund",
                    ),
                ),
                (
                    "owner",
                    models.ForeignKey(
                        help_text="User account that owns the fund",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="imprest_transactions",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "Imprest transaction",
                "verbose_name_plural": "Imprest transactions",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["fund", "type"], name="accounting__fund_id_3a9e70_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(condition=models.Q(("amount__gt", 0)), name="imprest_transaction_amount_positive"),
                    models.CheckConstraint(condition=models.Q(("balance_after__gte", 0)), name="imprest_transaction_balance_non_negative"),
                    models.UniqueConstraint(fields=("fund", "sequence"), name="unique_imprest_transaction_sequence"),
                ],
            },
        ),
    ]
