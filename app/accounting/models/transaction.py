"""
ImprestTransaction model: the append-only fund ledger.

Rows are inserted by TransactionRecorder and never updated. They disappear
only when their fund is deleted (database cascade).
"""

from __future__ import annotations

from django.conf import settings
from django.db import models

from accounting.state_machines.states import TransactionType
from core.exceptions import ConflictError
from core.model_mixins import UUIDPrimaryKeyMixin
from core.models import BaseModel


class ImprestTransaction(UUIDPrimaryKeyMixin, BaseModel):
    """
    One balance-affecting event against a fund.

    Fields:
        reference: Unique reference (ITX-...)
        fund: Fund the row belongs to
        sequence: 1-based position in the fund's history, assigned under the fund lock
        type: deposit, withdrawal, expense or refund
        amount: Positive magnitude
        balance_after: Fund balance right after this row was committed
        expense: Expense that caused the row (expense and refund rows only)
    """

    reference = models.CharField(
        max_length=40,
        unique=True,
        editable=False,
        help_text="Unique transaction reference (ITX-...)",
    )
    fund = models.ForeignKey(
        "accounting.ImprestFund",
        on_delete=models.CASCADE,
        related_name="transactions",
        help_text="Fund this transaction posts against",
    )
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="imprest_transactions",
        help_text="User account that owns the fund",
    )
    sequence = models.PositiveIntegerField(
        editable=False,
        help_text="Position in the fund's history (1-based, gapless)",
    )
    type = models.CharField(
        max_length=20,
        choices=TransactionType.choices,
        db_index=True,
        help_text="Kind of transaction",
    )
    amount = models.DecimalField(
        max_digits=15,
        decimal_places=2,
        help_text="Transaction amount (always positive)",
    )
    description = models.CharField(
        max_length=255,
        help_text="Human-readable description",
    )
    balance_after = models.DecimalField(
        max_digits=15,
        decimal_places=2,
        help_text="Fund balance immediately after this transaction",
    )
    expense = models.ForeignKey(
        "accounting.Expense",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="ledger_transactions",
        help_text="Expense that produced this transaction, if any",
    )
    notes = models.TextField(
        blank=True,
        default="",
        help_text="Free-form notes",
    )

    class Meta:
        ordering = ["-created_at"]
        verbose_name = "Imprest transaction"
        verbose_name_plural = "Imprest transactions"
        indexes = [
            models.Index(fields=["fund", "type"], name="accounting__fund_id_3a9e70_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(amount__gt=0),
                name="imprest_transaction_amount_positive",
            ),
            models.CheckConstraint(
                condition=models.Q(balance_after__gte=0),
                name="imprest_transaction_balance_non_negative",
            ),
            models.UniqueConstraint(
                fields=["fund", "sequence"],
                name="unique_imprest_transaction_sequence",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.reference} {self.type} {self.amount} → {self.balance_after}"

    def save(self, *args, **kwargs):
        """Insert only. Existing ledger rows cannot be rewritten."""
        if not self._state.adding:
            raise ConflictError(
                "Ledger transactions are append-only",
                error_code="TRANSACTION_IMMUTABLE",
                details={"transaction_id": str(self.pk)},
            )
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        """Single rows cannot be deleted; they go with their fund."""
        raise ConflictError(
            "Ledger transactions are removed only together with their fund",
            error_code="TRANSACTION_IMMUTABLE",
            details={"transaction_id": str(self.pk)},
        )
