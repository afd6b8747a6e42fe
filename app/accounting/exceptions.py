"""
Accounting exceptions outside the ledger core.

Exception Hierarchy:
    NotFoundError
    ├── ExpenseNotFound
    └── CategoryNotFound
    ConflictError
    ├── InvalidTransition - Expense event not allowed from its current status
    ├── ExpenseLocked - Edit or delete refused for a non-pending expense
    └── FundInUse - Fund still referenced by expenses

Ledger-level errors (FundNotFound, InsufficientFunds, FundClosed) live in
accounting.ledger.exceptions.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from core.exceptions import ConflictError, NotFoundError

if TYPE_CHECKING:
    from typing import Any


class ExpenseNotFound(NotFoundError):
    default_error_code: str = "EXPENSE_NOT_FOUND"


class CategoryNotFound(NotFoundError):
    default_error_code: str = "CATEGORY_NOT_FOUND"


class InvalidTransition(ConflictError):
    """
    Raised when an approval event does not apply to the expense's status.

    Attributes:
        current_status: Status the expense was in
        event: Event that was attempted

    Example:
        raise InvalidTransition(current_status="rejected", event="approve")
    """

    default_error_code: str = "INVALID_TRANSITION"

    def __init__(
        self,
        current_status: str,
        event: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        self.current_status = current_status
        self.event = event

        full_details = {"current_status": current_status, "event": event}
        if details:
            full_details.update(details)

        super().__init__(
            message=f"Cannot {event} an expense that is {current_status}",
            error_code=error_code,
            details=full_details,
        )


class ExpenseLocked(ConflictError):
    """
    Raised when a change would desync an expense from the fund ledger.

    Amount and fund link are frozen once an expense leaves pending, and an
    approved expense must be rejected (refunded) before it can be deleted.
    """

    default_error_code: str = "EXPENSE_LOCKED"


class FundInUse(ConflictError):
    """Raised when deleting or closing a fund that expenses still reference."""

    default_error_code: str = "FUND_IN_USE"
