"""
Fund balance calculator.

Pure functions: no database access and no mutation. Both manual
transactions and expense approval go through apply_transaction, which is the
only place the non-negative balance rule is checked.

Rule:
    deposit, refund      → balance + amount
    withdrawal, expense  → balance - amount (InsufficientFunds if < 0)

Usage:
    from accounting.ledger.calculator import apply_transaction

    change = apply_transaction(Decimal("100.00"), TransactionType.EXPENSE, Decimal("30.00"))
    change.new_balance  # Decimal("70.00")
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from accounting.ledger.exceptions import InsufficientFunds
from accounting.ledger.types import BalanceChange, to_amount
from accounting.state_machines.states import CREDIT_TYPES, DEBIT_TYPES
from core.exceptions import ValidationError

if TYPE_CHECKING:
    import uuid
    from collections.abc import Iterable
    from decimal import Decimal


def signed_amount(transaction_type: str, amount: Decimal) -> Decimal:
    """
    Return ``amount`` with the sign the transaction type gives it.

    Raises:
        ValidationError: If the type is neither a credit nor a debit
    """
    if transaction_type in CREDIT_TYPES:
        return amount
    if transaction_type in DEBIT_TYPES:
        return -amount
    raise ValidationError(
        f"Unknown transaction type {transaction_type!r}",
        details={"transaction_type": str(transaction_type)},
    )


def apply_transaction(
    balance: Decimal,
    transaction_type: str,
    amount: Decimal,
    fund_id: uuid.UUID | None = None,
) -> BalanceChange:
    """
    Compute the balance after one transaction.

    Args:
        balance: Current balance, must be non-negative
        transaction_type: deposit, withdrawal, expense or refund
        amount: Positive magnitude
        fund_id: Only used to enrich the InsufficientFunds error

    Returns:
        BalanceChange describing the step

    Raises:
        ValidationError: Negative balance, non-positive amount or unknown type
        InsufficientFunds: A debit larger than the balance
    """
    balance = to_amount(balance, "balance")
    amount = to_amount(amount)

    if balance < 0:
        raise ValidationError(
            "Starting balance cannot be negative",
            details={"balance": str(balance)},
        )
    if amount <= 0:
        raise ValidationError(
            "Transaction amount must be positive",
            details={"amount": str(amount)},
        )

    new_balance = balance + signed_amount(transaction_type, amount)
    if new_balance < 0:
        raise InsufficientFunds(fund_id, required=amount, available=balance)

    return BalanceChange(
        previous_balance=balance,
        amount=amount,
        transaction_type=str(transaction_type),
        new_balance=new_balance,
    )


def replay(
    initial_balance: Decimal,
    entries: Iterable[tuple[str, Decimal]],
) -> list[BalanceChange]:
    """
    Apply a sequence of (type, amount) pairs starting from ``initial_balance``.

    Returns one BalanceChange per entry, so callers can compare each step
    with a stored balance_after snapshot.

    Raises:
        InsufficientFunds: If any step would overdraw
    """
    steps: list[BalanceChange] = []
    balance = initial_balance
    for transaction_type, amount in entries:
        step = apply_transaction(balance, transaction_type, amount)
        steps.append(step)
        balance = step.new_balance
    return steps
