"""
Expense model with the approval state machine.

Status is a protected django-fsm field: it changes only through the
approve() and reject() transitions, whose sources come from
accounting.state_machines.transitions.EXPENSE_TRANSITIONS. Ledger effects
are not performed here; ExpenseService wraps the transition and the fund
posting in one atomic block.

Usage:
    expense = Expense.objects.create(owner=user, description="Taxi", amount=Decimal("12.50"))
    expense.approve(approver=user)
    expense.save()
"""

from __future__ import annotations

from django.conf import settings
from django.db import models
from django.utils import timezone
from django_fsm import FSMField, transition

from accounting.state_machines.states import ExpenseEvent, ExpenseStatus, PaymentMethod
from accounting.state_machines.transitions import sources_for, target_for
from core.model_mixins import UUIDPrimaryKeyMixin
from core.models import BaseModel


class Expense(UUIDPrimaryKeyMixin, BaseModel):
    """
    A business expense, optionally charged to an imprest fund.

    Fields:
        reference: Unique reference (EXP-...)
        description, amount, expense_date, payment_method: What was spent
        category: Optional ExpenseCategory
        fund: Optional imprest fund debited on approval
        status: pending, approved or rejected (FSM managed)
        approved_by / approved_at: Set by the approve transition
        rejected_at: Set by the reject transition
    """

    reference = models.CharField(
        max_length=40,
        unique=True,
        editable=False,
        help_text="Unique expense reference (EXP-...)",
    )
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="expenses",
        help_text="User account that owns this expense",
    )
    description = models.CharField(
        max_length=255,
        help_text="What the money was spent on",
    )
    amount = models.DecimalField(
        max_digits=15,
        decimal_places=2,
        help_text="Expense amount (always positive)",
    )
    expense_date = models.DateField(
        default=timezone.localdate,
        db_index=True,
        help_text="Date the expense was incurred",
    )
    payment_method = models.CharField(
        max_length=20,
        choices=PaymentMethod.choices,
        default=PaymentMethod.CASH,
        help_text="How the expense was paid",
    )
    category = models.ForeignKey(
        "accounting.ExpenseCategory",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="expenses",
        help_text="Expense category",
    )
    fund = models.ForeignKey(
        "accounting.ImprestFund",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="expenses",
        help_text="Imprest fund charged when the expense is approved",
    )
    receipt_url = models.URLField(
        blank=True,
        default="",
        help_text="Link to the scanned receipt",
    )
    notes = models.TextField(
        blank=True,
        default="",
        help_text="Free-form notes",
    )

    # ==========================================================================
    # Approval State
    # ==========================================================================

    status = FSMField(
        default=ExpenseStatus.PENDING,
        choices=ExpenseStatus.choices,
        db_index=True,
        protected=True,
        help_text="Approval status (managed by FSM)",
    )
    approved_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="approved_expenses",
        help_text="User who approved the expense",
    )
    approved_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text="When the expense was approved",
    )
    rejected_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text="When the expense was rejected",
    )

    class Meta:
        ordering = ["-expense_date", "-created_at"]
        verbose_name = "Expense"
        verbose_name_plural = "Expenses"
        indexes = [
            models.Index(fields=["owner", "status"], name="accounting__owner_i_8e2f4a_idx"),
            models.Index(fields=["owner", "expense_date"], name="accounting__owner_i_b71c3d_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(amount__gt=0),
                name="expense_amount_positive",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.reference} {self.description} ({self.status})"

    # ==========================================================================
    # State Transitions
    # ==========================================================================

    @transition(
        field=status,
        source=sources_for(ExpenseEvent.APPROVE),
        target=target_for(ExpenseEvent.APPROVE),
    )
    def approve(self, approver=None) -> None:
        """Mark the expense approved and stamp the approver."""
        self.approved_by = approver
        self.approved_at = timezone.now()

    @transition(
        field=status,
        source=sources_for(ExpenseEvent.REJECT),
        target=target_for(ExpenseEvent.REJECT),
    )
    def reject(self) -> None:
        """Mark the expense rejected. Approval stamps are kept as history."""
        self.rejected_at = timezone.now()

    @property
    def is_pending(self) -> bool:
        return self.status == ExpenseStatus.PENDING
