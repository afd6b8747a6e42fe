"""
DRF serializers for the accounting app.

Output serializers are ModelSerializers; input serializers for operations
that go through a service are plain Serializers whose validated_data maps
onto the service signature.

Related files:
    - models/: ImprestFund, ImprestTransaction, ExpenseCategory, Expense
    - views.py: Accounting API viewsets
"""

from __future__ import annotations

from decimal import Decimal

from rest_framework import serializers

from accounting.models import Expense, ExpenseCategory, ImprestFund, ImprestTransaction
from accounting.state_machines.states import (
    MANUAL_TYPES,
    ExpenseStatus,
    PaymentMethod,
    TransactionType,
)

POSITIVE_AMOUNT = {"max_digits": 15, "decimal_places": 2, "min_value": Decimal("0.01")}


# =============================================================================
# Funds and Transactions
# =============================================================================


class ImprestFundSerializer(serializers.ModelSerializer):
    """Fund as returned by the API. Amounts and status are read-only."""

    spent_amount = serializers.DecimalField(max_digits=15, decimal_places=2, read_only=True)

    class Meta:
        model = ImprestFund
        fields = [
            "id",
            "reference",
            "account_holder",
            "purpose",
            "initial_amount",
            "current_balance",
            "spent_amount",
            "status",
            "closed_at",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class ImprestFundCreateSerializer(serializers.Serializer):
    """Input for FundService.create_fund."""

    account_holder = serializers.CharField(max_length=150)
    initial_amount = serializers.DecimalField(
        max_digits=15, decimal_places=2, min_value=Decimal("0")
    )
    purpose = serializers.CharField(required=False, allow_blank=True, default="")


class ImprestFundUpdateSerializer(serializers.Serializer):
    """Input for FundService.update_fund. Both fields optional."""

    account_holder = serializers.CharField(max_length=150, required=False)
    purpose = serializers.CharField(required=False, allow_blank=True)


class ImprestTransactionSerializer(serializers.ModelSerializer):
    fund_reference = serializers.CharField(source="fund.reference", read_only=True)
    expense_reference = serializers.CharField(
        source="expense.reference", read_only=True, default=None
    )

    class Meta:
        model = ImprestTransaction
        fields = [
            "id",
            "reference",
            "fund",
            "fund_reference",
            "sequence",
            "type",
            "amount",
            "description",
            "balance_after",
            "expense",
            "expense_reference",
            "notes",
            "created_at",
        ]
        read_only_fields = fields


class ManualTransactionSerializer(serializers.Serializer):
    """
    Input for a hand-entered deposit or withdrawal.

    Expense and refund rows are produced by the approval workflow only.
    """

    type = serializers.ChoiceField(
        choices=[choice for choice in TransactionType.choices if choice[0] in MANUAL_TYPES]
    )
    amount = serializers.DecimalField(**POSITIVE_AMOUNT)
    description = serializers.CharField(max_length=255)
    notes = serializers.CharField(required=False, allow_blank=True, default="")


class LedgerCheckSerializer(serializers.Serializer):
    fund_id = serializers.UUIDField()
    stored_balance = serializers.DecimalField(max_digits=15, decimal_places=2)
    replayed_balance = serializers.DecimalField(max_digits=15, decimal_places=2)
    transaction_count = serializers.IntegerField()
    mismatched_references = serializers.ListField(child=serializers.CharField())
    is_consistent = serializers.BooleanField()


# =============================================================================
# Categories and Expenses
# =============================================================================


class ExpenseCategorySerializer(serializers.ModelSerializer):
    class Meta:
        model = ExpenseCategory
        fields = ["id", "name", "description", "is_major", "created_at", "updated_at"]
        read_only_fields = ["id", "created_at", "updated_at"]

    def validate_name(self, value: str) -> str:
        owner = self.context["request"].user
        queryset = ExpenseCategory.objects.filter(owner=owner, name__iexact=value)
        if self.instance is not None:
            queryset = queryset.exclude(pk=self.instance.pk)
        if queryset.exists():
            raise serializers.ValidationError("A category with this name already exists.")
        return value


class ExpenseSerializer(serializers.ModelSerializer):
    """Expense as returned by the API."""

    category_name = serializers.CharField(source="category.name", read_only=True, default=None)
    fund_reference = serializers.CharField(source="fund.reference", read_only=True, default=None)
    approved_by_email = serializers.EmailField(
        source="approved_by.email", read_only=True, default=None
    )

    class Meta:
        model = Expense
        fields = [
            "id",
            "reference",
            "description",
            "amount",
            "expense_date",
            "payment_method",
            "category",
            "category_name",
            "fund",
            "fund_reference",
            "status",
            "approved_by",
            "approved_by_email",
            "approved_at",
            "rejected_at",
            "receipt_url",
            "notes",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class ExpenseWriteSerializer(serializers.Serializer):
    """
    Input for ExpenseService.create_expense / update_expense.

    fund_id and category_id are resolved by the service against the
    caller's own records.
    """

    description = serializers.CharField(max_length=255)
    amount = serializers.DecimalField(**POSITIVE_AMOUNT)
    expense_date = serializers.DateField(required=False)
    payment_method = serializers.ChoiceField(choices=PaymentMethod.choices, required=False)
    category_id = serializers.UUIDField(required=False, allow_null=True)
    fund_id = serializers.UUIDField(required=False, allow_null=True)
    receipt_url = serializers.URLField(required=False, allow_blank=True)
    notes = serializers.CharField(required=False, allow_blank=True)


class PeriodQuerySerializer(serializers.Serializer):
    """Optional inclusive date range taken from query parameters."""

    start_date = serializers.DateField(required=False)
    end_date = serializers.DateField(required=False)

    def validate(self, attrs):
        start, end = attrs.get("start_date"), attrs.get("end_date")
        if start and end and start > end:
            raise serializers.ValidationError("start_date must be on or before end_date.")
        return attrs


class ExpenseSummarySerializer(serializers.Serializer):
    by_status = serializers.DictField(child=serializers.DictField())
    count = serializers.IntegerField()
    total = serializers.DecimalField(max_digits=17, decimal_places=2)


class ExpenseFilterSerializer(PeriodQuerySerializer):
    """Query parameters accepted by the expense list."""

    status = serializers.ChoiceField(choices=ExpenseStatus.choices, required=False)
    fund = serializers.UUIDField(required=False)
    category = serializers.UUIDField(required=False)


class TransactionFilterSerializer(serializers.Serializer):
    """Query parameters accepted by the transaction list."""

    fund = serializers.UUIDField(required=False)
    type = serializers.ChoiceField(choices=TransactionType.choices, required=False)
