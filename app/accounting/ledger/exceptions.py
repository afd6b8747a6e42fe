"""
Ledger exceptions for imprest fund operations.

Exception Hierarchy:
    LedgerError (base)
    ├── FundNotFound - Fund missing or outside the caller's scope (404)
    ├── InsufficientFunds - A debit would drive the balance below zero (409)
    └── FundClosed - Transaction attempted on a closed fund (409)

Usage:
    from accounting.ledger.exceptions import InsufficientFunds

    if balance < amount:
        raise InsufficientFunds(fund.id, required=amount, available=balance)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from core.exceptions import BaseApplicationError, ConflictError, NotFoundError

if TYPE_CHECKING:
    import uuid
    from decimal import Decimal
    from typing import Any


class LedgerError(BaseApplicationError):
    """
    Base exception for fund ledger operations.

    Subclasses also derive from the matching core category so the API layer
    picks the right HTTP status.
    """

    default_error_code: str = "LEDGER_ERROR"


class FundNotFound(LedgerError, NotFoundError):
    """
    Raised when a fund cannot be found for the caller.

    Example:
        raise FundNotFound(
            f"Fund {fund_id} not found",
            details={"fund_id": str(fund_id)},
        )
    """

    default_error_code: str = "FUND_NOT_FOUND"


class InsufficientFunds(LedgerError, ConflictError):
    """
    Raised when a debit exceeds the fund's current balance.

    Amounts are reported as strings in details so Decimal precision survives
    JSON rendering.

    Attributes:
        fund_id: Fund that would have been overdrawn (None for pure calculations)
        required: Debit amount that was attempted
        available: Balance at the time of the check
    """

    default_error_code: str = "INSUFFICIENT_FUNDS"

    def __init__(
        self,
        fund_id: uuid.UUID | None,
        required: Decimal,
        available: Decimal,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        self.fund_id = fund_id
        self.required = required
        self.available = available

        subject = f"Fund {fund_id}" if fund_id else "Fund"
        message = (
            f"{subject} has insufficient balance: "
            f"required {required}, available {available}"
        )

        full_details = {
            "fund_id": str(fund_id) if fund_id else None,
            "required": str(required),
            "available": str(available),
        }
        if details:
            full_details.update(details)

        super().__init__(message=message, error_code=error_code, details=full_details)


class FundClosed(LedgerError, ConflictError):
    """Raised when a transaction targets a closed fund."""

    default_error_code: str = "FUND_CLOSED"
