"""
Status and type enums for accounting models.

These are Django TextChoices so they double as database choices and admin
filters.

State Machines Overview:

ImprestFund status:
    active ⇄ depleted (set by the recorder when the balance hits / leaves zero)
    active/depleted → closed (explicit, one way)

Expense status (django-fsm, see state_machines.transitions):
    pending → approved
    pending → rejected
    approved → rejected (reversal, refunds the fund)
"""

from django.db import models


class FundStatus(models.TextChoices):
    """
    Lifecycle of an imprest fund.

    ACTIVE and DEPLETED both accept transactions. DEPLETED only means the
    balance is exactly zero, so any debit will fail until a credit arrives.
    CLOSED is terminal and refuses every transaction.
    """

    ACTIVE = "active", "Active"
    DEPLETED = "depleted", "Depleted"
    CLOSED = "closed", "Closed"


class TransactionType(models.TextChoices):
    """
    Kinds of fund ledger rows.

    DEPOSIT and WITHDRAWAL are entered by hand. EXPENSE and REFUND are only
    written by the expense approval workflow.
    """

    DEPOSIT = "deposit", "Deposit"
    WITHDRAWAL = "withdrawal", "Withdrawal"
    EXPENSE = "expense", "Expense"
    REFUND = "refund", "Refund"


CREDIT_TYPES = frozenset({TransactionType.DEPOSIT.value, TransactionType.REFUND.value})
DEBIT_TYPES = frozenset({TransactionType.WITHDRAWAL.value, TransactionType.EXPENSE.value})
MANUAL_TYPES = frozenset({TransactionType.DEPOSIT.value, TransactionType.WITHDRAWAL.value})


class ExpenseStatus(models.TextChoices):
    """
    States of the expense approval workflow.

    Terminal state: REJECTED. No transition returns to PENDING.
    """

    PENDING = "pending", "Pending"
    APPROVED = "approved", "Approved"
    REJECTED = "rejected", "Rejected"


class ExpenseEvent(models.TextChoices):
    """Events a user can fire at an expense."""

    APPROVE = "approve", "Approve"
    REJECT = "reject", "Reject"


class LedgerEffect(models.TextChoices):
    """What a transition writes to the linked fund, if there is one."""

    NONE = "none", "No ledger effect"
    DEBIT = "debit", "Debit the fund (expense row)"
    REFUND = "refund", "Credit the fund back (refund row)"


class PaymentMethod(models.TextChoices):
    """How an expense was paid."""

    CASH = "cash", "Cash"
    BANK_TRANSFER = "bank_transfer", "Bank transfer"
    CHECK = "check", "Check"
    CARD = "card", "Card"
