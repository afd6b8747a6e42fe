"""
Data types passed between the ledger layers.

Types:
    BalanceChange: Result of applying one transaction to a balance
    RecordTransactionParams: Validated input for TransactionRecorder.record
    LedgerCheck: Outcome of replaying a fund's history

Usage:
    from accounting.ledger.types import RecordTransactionParams

    params = RecordTransactionParams(
        fund_id=fund.id,
        transaction_type=TransactionType.DEPOSIT,
        amount=Decimal("250.00"),
        description="Monthly top-up",
        owner_id=user.id,
    )
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation

from accounting.state_machines.states import CREDIT_TYPES, TransactionType
from core.exceptions import ValidationError

CENT = Decimal("0.01")


def to_amount(value: Decimal | int | str, field_name: str = "amount") -> Decimal:
    """
    Coerce a value to a two-decimal Decimal.

    Floats are refused: they cannot represent most cent values exactly.

    Raises:
        ValidationError: If the value is not a finite number
    """
    if isinstance(value, float):
        raise ValidationError(
            f"{field_name} must be a Decimal, int or string, not float",
            details={field_name: repr(value)},
        )
    try:
        amount = Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError(
            f"{field_name} is not a valid number",
            details={field_name: str(value)},
        ) from None
    if not amount.is_finite():
        raise ValidationError(f"{field_name} must be finite", details={field_name: str(value)})
    return amount.quantize(CENT)


@dataclass(frozen=True)
class BalanceChange:
    """
    One step of the fund balance.

    Attributes:
        previous_balance: Balance before the transaction
        amount: Positive magnitude of the transaction
        transaction_type: deposit, withdrawal, expense or refund
        new_balance: Balance after the transaction (never negative)
    """

    previous_balance: Decimal
    amount: Decimal
    transaction_type: str
    new_balance: Decimal

    @property
    def is_credit(self) -> bool:
        return self.transaction_type in CREDIT_TYPES

    @property
    def signed_amount(self) -> Decimal:
        return self.amount if self.is_credit else -self.amount


@dataclass
class RecordTransactionParams:
    """
    Parameters for appending one transaction to a fund.

    Required Attributes:
        fund_id: Fund to post against
        transaction_type: One of TransactionType values
        amount: Positive magnitude, coerced to two decimals
        description: Human-readable description

    Optional Attributes:
        expense_id: Expense this row belongs to (approval and refund rows)
        owner_id: Restrict the fund lookup to this owner
        notes: Free text

    Raises:
        ValidationError: On construction, if any field is malformed
    """

    fund_id: uuid.UUID
    transaction_type: str
    amount: Decimal
    description: str

    expense_id: uuid.UUID | None = None
    owner_id: int | None = None
    notes: str = field(default="")

    def __post_init__(self) -> None:
        if self.transaction_type not in TransactionType.values:
            raise ValidationError(
                f"Unknown transaction type {self.transaction_type!r}",
                details={"transaction_type": str(self.transaction_type)},
            )
        self.amount = to_amount(self.amount)
        if self.amount <= 0:
            raise ValidationError(
                "Transaction amount must be positive",
                details={"amount": str(self.amount)},
            )
        if not self.description or not self.description.strip():
            raise ValidationError(
                "Transaction description is required",
                details={"description": "required"},
            )


@dataclass
class LedgerCheck:
    """
    Result of replaying a fund's transactions from its initial amount.

    Attributes:
        fund_id: Fund that was checked
        stored_balance: current_balance column value
        replayed_balance: initial_amount plus the signed sum of the history
        transaction_count: Rows replayed
        mismatched_references: Transactions whose balance_after disagrees
            with the replayed running balance
    """

    fund_id: uuid.UUID
    stored_balance: Decimal
    replayed_balance: Decimal
    transaction_count: int
    mismatched_references: list[str] = field(default_factory=list)

    @property
    def is_consistent(self) -> bool:
        return self.stored_balance == self.replayed_balance and not self.mismatched_references
