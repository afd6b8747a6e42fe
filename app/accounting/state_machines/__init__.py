"""
State machine enums and the expense transition table.
"""

from accounting.state_machines.states import (
    CREDIT_TYPES,
    DEBIT_TYPES,
    MANUAL_TYPES,
    ExpenseEvent,
    ExpenseStatus,
    FundStatus,
    LedgerEffect,
    PaymentMethod,
    TransactionType,
)
from accounting.state_machines.transitions import (
    EXPENSE_TRANSITIONS,
    ExpenseTransition,
    resolve_expense_transition,
    sources_for,
    target_for,
)

__all__ = [
    "CREDIT_TYPES",
    "DEBIT_TYPES",
    "MANUAL_TYPES",
    "EXPENSE_TRANSITIONS",
    "ExpenseEvent",
    "ExpenseStatus",
    "ExpenseTransition",
    "FundStatus",
    "LedgerEffect",
    "PaymentMethod",
    "TransactionType",
    "resolve_expense_transition",
    "sources_for",
    "target_for",
]
