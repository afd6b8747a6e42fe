"""
Accounting services.

    FundService: fund creation, edits, closing and deletion
    ExpenseService: expense CRUD, approval workflow and summaries

Balance-changing writes go through accounting.ledger.services.TransactionRecorder.
"""

from accounting.services.expense_service import ExpenseService
from accounting.services.fund_service import FundService

__all__ = [
    "ExpenseService",
    "FundService",
]
