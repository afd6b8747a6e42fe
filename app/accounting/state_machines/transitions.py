"""
Expense approval transition table.

Single source of truth for which event is legal from which status, where
it leads, and what it does to the linked fund. The Expense model builds its
django-fsm transition sources from this table and ExpenseService reads the
ledger effect from it.

Table:
    (pending,  approve) → approved, debit
    (pending,  reject)  → rejected, none
    (approved, reject)  → rejected, refund

Usage:
    from accounting.state_machines.transitions import resolve_expense_transition

    step = resolve_expense_transition(expense.status, ExpenseEvent.APPROVE)
    if step.ledger_effect == LedgerEffect.DEBIT and expense.fund_id:
        ...
"""

from __future__ import annotations

from dataclasses import dataclass

from accounting.exceptions import InvalidTransition
from accounting.state_machines.states import ExpenseEvent, ExpenseStatus, LedgerEffect


@dataclass(frozen=True)
class ExpenseTransition:
    """Outcome of firing an event: the target status and the ledger effect."""

    target: str
    ledger_effect: str


EXPENSE_TRANSITIONS: dict[tuple[str, str], ExpenseTransition] = {
    (ExpenseStatus.PENDING.value, ExpenseEvent.APPROVE.value): ExpenseTransition(
        target=ExpenseStatus.APPROVED.value,
        ledger_effect=LedgerEffect.DEBIT.value,
    ),
    (ExpenseStatus.PENDING.value, ExpenseEvent.REJECT.value): ExpenseTransition(
        target=ExpenseStatus.REJECTED.value,
        ledger_effect=LedgerEffect.NONE.value,
    ),
    (ExpenseStatus.APPROVED.value, ExpenseEvent.REJECT.value): ExpenseTransition(
        target=ExpenseStatus.REJECTED.value,
        ledger_effect=LedgerEffect.REFUND.value,
    ),
}


def sources_for(event: str) -> list[str]:
    """Statuses from which ``event`` may fire."""
    return [source for source, name in EXPENSE_TRANSITIONS if name == str(event)]


def target_for(event: str) -> str:
    """Status ``event`` leads to. Every event has exactly one target."""
    targets = {
        step.target for (_, name), step in EXPENSE_TRANSITIONS.items() if name == str(event)
    }
    if len(targets) != 1:
        raise LookupError(f"Event {event!r} must have exactly one target, found {targets}")
    return str(targets.pop())


def resolve_expense_transition(current_status: str, event: str) -> ExpenseTransition:
    """
    Look up the transition for ``event`` fired from ``current_status``.

    Raises:
        InvalidTransition: If the table has no such edge
    """
    try:
        return EXPENSE_TRANSITIONS[(str(current_status), str(event))]
    except KeyError:
        raise InvalidTransition(current_status=str(current_status), event=str(event)) from None
