"""
Imprest fund ledger core.

Components:
    calculator: pure balance arithmetic (apply_transaction, replay)
    services: TransactionRecorder (locking, balance update, row insert)
    types: BalanceChange, RecordTransactionParams, LedgerCheck
    exceptions: LedgerError, FundNotFound, InsufficientFunds, FundClosed

Note:
    services imports models, so it is not re-exported here; import it
    directly once the app registry is ready:
        from accounting.ledger.services import TransactionRecorder
"""

from accounting.ledger.calculator import apply_transaction, replay, signed_amount
from accounting.ledger.exceptions import (
    FundClosed,
    FundNotFound,
    InsufficientFunds,
    LedgerError,
)
from accounting.ledger.types import (
    BalanceChange,
    LedgerCheck,
    RecordTransactionParams,
    to_amount,
)

__all__ = [
    "BalanceChange",
    "FundClosed",
    "FundNotFound",
    "InsufficientFunds",
    "LedgerCheck",
    "LedgerError",
    "RecordTransactionParams",
    "apply_transaction",
    "replay",
    "signed_amount",
    "to_amount",
]
