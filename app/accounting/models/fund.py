"""
ImprestFund model: a pre-funded cash pool assigned to a holder.

The current_balance column is a cached projection of
initial_amount + the signed sum of the fund's transactions. It is written at
creation and afterwards only by TransactionRecorder, inside the same atomic
block that appends the ledger row.
"""

from __future__ import annotations

from decimal import Decimal

from django.conf import settings
from django.db import models

from accounting.state_machines.states import FundStatus
from core.model_mixins import UUIDPrimaryKeyMixin
from core.models import BaseModel


class ImprestFund(UUIDPrimaryKeyMixin, BaseModel):
    """
    Imprest (petty cash) fund.

    Fields:
        reference: Human-readable unique reference (IMP-...)
        owner: Business account the fund belongs to
        account_holder: Person who holds the cash
        purpose: What the fund is for
        initial_amount: Opening amount, fixed at creation
        current_balance: Balance after the latest transaction
        status: active, depleted or closed
        closed_at: When the fund was closed
    """

    reference = models.CharField(
        max_length=40,
        unique=True,
        editable=False,
        help_text="Unique fund reference (IMP-...)",
    )
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="imprest_funds",
        help_text="User account that owns this fund",
    )
    account_holder = models.CharField(
        max_length=150,
        help_text="Name of the person holding the fund",
    )
    purpose = models.TextField(
        blank=True,
        default="",
        help_text="What the fund is used for",
    )

    # ==========================================================================
    # Amounts
    # ==========================================================================

    initial_amount = models.DecimalField(
        max_digits=15,
        decimal_places=2,
        editable=False,
        help_text="Opening amount (immutable once set)",
    )
    current_balance = models.DecimalField(
        max_digits=15,
        decimal_places=2,
        editable=False,
        help_text="Balance after the most recent transaction",
    )

    # ==========================================================================
    # State
    # ==========================================================================

    status = models.CharField(
        max_length=20,
        choices=FundStatus.choices,
        default=FundStatus.ACTIVE,
        db_index=True,
        help_text="Fund lifecycle status",
    )
    closed_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text="When the fund was closed",
    )

    class Meta:
        ordering = ["-created_at"]
        verbose_name = "Imprest fund"
        verbose_name_plural = "Imprest funds"
        indexes = [
            models.Index(fields=["owner", "status"], name="accounting__owner_i_5d0c1e_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(current_balance__gte=0),
                name="imprest_fund_balance_non_negative",
            ),
            models.CheckConstraint(
                condition=models.Q(initial_amount__gte=0),
                name="imprest_fund_initial_non_negative",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.reference} ({self.account_holder}): {self.current_balance}"

    @property
    def is_closed(self) -> bool:
        return self.status == FundStatus.CLOSED

    @property
    def spent_amount(self) -> Decimal:
        """Net outflow since creation (negative if topped up beyond the opening amount)."""
        return (self.initial_amount or Decimal("0")) - (self.current_balance or Decimal("0"))
