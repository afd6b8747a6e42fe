"""
Ledger store models.

Models:
    ImprestFund: cash pool with a cached current balance
    ImprestTransaction: append-only ledger rows with balance_after snapshots
    ExpenseCategory: user-defined expense grouping
    Expense: expense with the pending → approved/rejected workflow
"""

from accounting.models.category import ExpenseCategory
from accounting.models.expense import Expense
from accounting.models.fund import ImprestFund
from accounting.models.transaction import ImprestTransaction

__all__ = [
    "Expense",
    "ExpenseCategory",
    "ImprestFund",
    "ImprestTransaction",
]
