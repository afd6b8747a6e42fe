"""
Expense service: CRUD rules and the approval workflow.

The approval workflow is driven by the transition table in
accounting.state_machines.transitions. Each approve/reject call:

    1. Locks the expense row (a second concurrent approve waits, then fails)
    2. Resolves (status, event) in the table, raising InvalidTransition if absent
    3. Applies the ledger effect through TransactionRecorder (fund row locked)
    4. Fires the django-fsm transition and saves

All four steps share one atomic block, so InsufficientFunds leaves the
expense pending and the ledger untouched.

Usage:
    from accounting.services import ExpenseService

    expense = ExpenseService.approve(expense_id, approver=request.user, owner=request.user)
    expense = ExpenseService.reject(expense_id, owner=request.user)
"""

from __future__ import annotations

import datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db.models import Count, Sum
from django_fsm import TransitionNotAllowed

from accounting.exceptions import CategoryNotFound, ExpenseLocked, ExpenseNotFound, InvalidTransition
from accounting.ledger.exceptions import FundClosed, FundNotFound
from accounting.ledger.services import TransactionRecorder
from accounting.ledger.types import RecordTransactionParams, to_amount
from accounting.models import Expense, ExpenseCategory, ImprestFund
from accounting.state_machines.states import (
    ExpenseEvent,
    ExpenseStatus,
    LedgerEffect,
    TransactionType,
)
from accounting.state_machines.transitions import resolve_expense_transition
from core.exceptions import ValidationError
from core.helpers import generate_reference
from core.services import BaseService

if TYPE_CHECKING:
    import uuid
    from typing import Any

    from django.db.models import QuerySet

    from authentication.models import User


EXPENSE_REFERENCE_PREFIX = "EXP"

# Fields that, once the expense has left pending, would desync it from the ledger
LEDGER_BOUND_FIELDS = frozenset({"amount", "fund_id"})

EDITABLE_FIELDS = frozenset(
    {
        "description",
        "amount",
        "expense_date",
        "payment_method",
        "category_id",
        "fund_id",
        "receipt_url",
        "notes",
    }
)


class ExpenseService(BaseService):
    """
    Service for expenses and their approval.

    All operations are owner-scoped. Expense rows are always locked before
    fund rows, so the two lock orders never cross.
    """

    # ==========================================================================
    # Lookups
    # ==========================================================================

    @classmethod
    def get_expense(cls, expense_id: uuid.UUID, owner: User, lock: bool = False) -> Expense:
        """
        Args:
            lock: Take a row lock (caller must be inside an atomic block)

        Raises:
            ExpenseNotFound: If the expense does not exist for this owner
        """
        queryset = Expense.objects.select_for_update() if lock else Expense.objects.all()
        try:
            return queryset.get(id=expense_id, owner=owner)
        except (Expense.DoesNotExist, DjangoValidationError):
            raise ExpenseNotFound(
                f"Expense {expense_id} not found",
                details={"expense_id": str(expense_id)},
            ) from None

    @classmethod
    def _resolve_fund(cls, fund_id: uuid.UUID | None, owner: User) -> ImprestFund | None:
        if fund_id is None:
            return None
        try:
            fund = ImprestFund.objects.get(id=fund_id, owner=owner)
        except (ImprestFund.DoesNotExist, DjangoValidationError):
            raise FundNotFound(
                f"Fund {fund_id} not found",
                details={"fund_id": str(fund_id)},
            ) from None
        if fund.is_closed:
            raise FundClosed(
                f"Fund {fund.reference} is closed",
                details={"fund_id": str(fund.id)},
            )
        return fund

    @classmethod
    def _resolve_category(
        cls, category_id: uuid.UUID | None, owner: User
    ) -> ExpenseCategory | None:
        if category_id is None:
            return None
        try:
            return ExpenseCategory.objects.get(id=category_id, owner=owner)
        except (ExpenseCategory.DoesNotExist, DjangoValidationError):
            raise CategoryNotFound(
                f"Category {category_id} not found",
                details={"category_id": str(category_id)},
            ) from None

    # ==========================================================================
    # CRUD
    # ==========================================================================

    @classmethod
    def create_expense(
        cls,
        owner: User,
        description: str,
        amount: Decimal | int | str,
        expense_date: datetime.date | None = None,
        payment_method: str | None = None,
        category_id: uuid.UUID | None = None,
        fund_id: uuid.UUID | None = None,
        receipt_url: str = "",
        notes: str = "",
    ) -> Expense:
        """
        Record a new pending expense.

        Linking a fund does not touch its balance; that happens on approval.

        Raises:
            ValidationError: Empty description or non-positive amount
            FundNotFound / CategoryNotFound: Unknown links
            FundClosed: Linking a closed fund
        """
        amount = cls._validate_amount(amount)
        if not description or not description.strip():
            raise ValidationError(
                "Description is required",
                details={"description": "required"},
            )

        fields: dict[str, Any] = {
            "reference": generate_reference(EXPENSE_REFERENCE_PREFIX),
            "owner": owner,
            "description": description.strip(),
            "amount": amount,
            "fund": cls._resolve_fund(fund_id, owner),
            "category": cls._resolve_category(category_id, owner),
            "receipt_url": receipt_url or "",
            "notes": notes or "",
        }
        if expense_date is not None:
            fields["expense_date"] = expense_date
        if payment_method:
            fields["payment_method"] = payment_method

        expense = Expense.objects.create(**fields)
        cls.get_logger().info(
            "Created expense %s for %s",
            expense.reference,
            amount,
            extra={"expense_id": str(expense.id), "fund_id": str(fund_id) if fund_id else None},
        )
        return expense

    @classmethod
    def update_expense(cls, expense_id: uuid.UUID, owner: User, **changes: Any) -> Expense:
        """
        Edit an expense.

        Amount and fund link may only change while the expense is pending;
        descriptive fields can change at any time.

        Raises:
            ExpenseLocked: Changing amount or fund on an approved/rejected expense
            ValidationError: Unknown field or invalid value
        """
        unknown = set(changes) - EDITABLE_FIELDS
        if unknown:
            raise ValidationError(
                "These fields cannot be edited",
                details={"fields": sorted(unknown)},
            )

        with cls.atomic():
            expense = cls.get_expense(expense_id, owner, lock=True)

            if "amount" in changes:
                changes["amount"] = cls._validate_amount(changes["amount"])

            touched = {
                name
                for name in LEDGER_BOUND_FIELDS & set(changes)
                if changes[name] != getattr(expense, name)
            }
            if touched and not expense.is_pending:
                raise ExpenseLocked(
                    f"Cannot change {', '.join(sorted(touched))} of a {expense.status} expense",
                    details={"status": expense.status, "fields": sorted(touched)},
                )

            if "fund_id" in changes:
                fund_id = changes.pop("fund_id")
                if fund_id != expense.fund_id:
                    expense.fund = cls._resolve_fund(fund_id, owner)
            if "category_id" in changes:
                expense.category = cls._resolve_category(changes.pop("category_id"), owner)
            if "description" in changes and not (changes["description"] or "").strip():
                raise ValidationError(
                    "Description is required",
                    details={"description": "required"},
                )

            for name, value in changes.items():
                setattr(expense, name, value)
            expense.save()

        return expense

    @classmethod
    def delete_expense(cls, expense_id: uuid.UUID, owner: User) -> None:
        """
        Delete a pending or rejected expense.

        Ledger rows that referenced it stay, with their expense link cleared.

        Raises:
            ExpenseLocked: If the expense is approved (reject it first)
        """
        with cls.atomic():
            expense = cls.get_expense(expense_id, owner, lock=True)
            if expense.status == ExpenseStatus.APPROVED:
                raise ExpenseLocked(
                    "Approved expenses must be rejected before they can be deleted",
                    details={"status": expense.status},
                )
            reference = expense.reference
            expense.delete()

        cls.get_logger().info("Deleted expense %s", reference, extra={"expense_id": str(expense_id)})

    # ==========================================================================
    # Approval Workflow
    # ==========================================================================

    @classmethod
    def approve(cls, expense_id: uuid.UUID, approver: User, owner: User) -> Expense:
        """
        Approve a pending expense, debiting its fund if it has one.

        Raises:
            ExpenseNotFound: Unknown expense for this owner
            InvalidTransition: Expense is not pending
            InsufficientFunds: Fund balance below the expense amount
            FundClosed: Linked fund is closed
        """
        with cls.atomic():
            expense = cls.get_expense(expense_id, owner, lock=True)
            step = resolve_expense_transition(expense.status, ExpenseEvent.APPROVE)

            if step.ledger_effect == LedgerEffect.DEBIT and expense.fund_id:
                cls._post_to_fund(
                    expense,
                    TransactionType.EXPENSE,
                    f"Expense approved: {expense.description}",
                )

            cls._fire(expense, ExpenseEvent.APPROVE, approver)
            expense.save()

        cls.get_logger().info(
            "Approved expense %s",
            expense.reference,
            extra={
                "expense_id": str(expense.id),
                "approver_id": approver.pk,
                "fund_id": str(expense.fund_id) if expense.fund_id else None,
            },
        )
        return expense

    @classmethod
    def reject(cls, expense_id: uuid.UUID, owner: User) -> Expense:
        """
        Reject an expense. Reversing an approval refunds the fund, even a
        closed one, so an approved expense never gets stuck on it.

        Raises:
            ExpenseNotFound: Unknown expense for this owner
            InvalidTransition: Expense is already rejected
        """
        with cls.atomic():
            expense = cls.get_expense(expense_id, owner, lock=True)
            previous_status = expense.status
            step = resolve_expense_transition(previous_status, ExpenseEvent.REJECT)

            if step.ledger_effect == LedgerEffect.REFUND and expense.fund_id:
                cls._post_to_fund(
                    expense,
                    TransactionType.REFUND,
                    f"Refund for rejected expense: {expense.description}",
                    allow_closed=True,
                )

            cls._fire(expense, ExpenseEvent.REJECT)
            expense.save()

        cls.get_logger().info(
            "Rejected expense %s (was %s)",
            expense.reference,
            previous_status,
            extra={"expense_id": str(expense.id), "previous_status": previous_status},
        )
        return expense

    @classmethod
    def _post_to_fund(
        cls,
        expense: Expense,
        transaction_type: str,
        description: str,
        allow_closed: bool = False,
    ) -> None:
        fund = TransactionRecorder.lock_fund(expense.fund_id, expense.owner_id)
        TransactionRecorder.record_locked(
            fund,
            RecordTransactionParams(
                fund_id=fund.id,
                transaction_type=transaction_type,
                amount=expense.amount,
                description=description[:255],
                expense_id=expense.id,
                owner_id=expense.owner_id,
            ),
            allow_closed=allow_closed,
        )

    @staticmethod
    def _fire(expense: Expense, event: str, *args: Any) -> None:
        """Run the django-fsm transition method named after ``event``."""
        try:
            getattr(expense, str(event))(*args)
        except TransitionNotAllowed:
            raise InvalidTransition(current_status=expense.status, event=str(event)) from None

    # ==========================================================================
    # Queries
    # ==========================================================================

    @classmethod
    def list_expenses(
        cls,
        owner: User,
        status: str | None = None,
        fund_id: uuid.UUID | None = None,
        category_id: uuid.UUID | None = None,
        start_date: datetime.date | None = None,
        end_date: datetime.date | None = None,
    ) -> QuerySet[Expense]:
        """Owner's expenses, optionally filtered by status, links and period (inclusive)."""
        queryset = Expense.objects.filter(owner=owner).select_related("category", "fund")
        if status:
            queryset = queryset.filter(status=status)
        if fund_id:
            queryset = queryset.filter(fund_id=fund_id)
        if category_id:
            queryset = queryset.filter(category_id=category_id)
        if start_date:
            queryset = queryset.filter(expense_date__gte=start_date)
        if end_date:
            queryset = queryset.filter(expense_date__lte=end_date)
        return queryset

    @classmethod
    def summary(
        cls,
        owner: User,
        start_date: datetime.date | None = None,
        end_date: datetime.date | None = None,
    ) -> dict[str, Any]:
        """
        Count and total per status over a period.

        Returns:
            {"by_status": {"pending": {"count": 2, "total": "40.00"}, ...},
             "count": 5, "total": "130.00"}
        """
        queryset = cls.list_expenses(owner, start_date=start_date, end_date=end_date)
        rows = queryset.order_by().values("status").annotate(count=Count("id"), total=Sum("amount"))

        by_status = {
            choice: {"count": 0, "total": str(Decimal("0.00"))} for choice in ExpenseStatus.values
        }
        overall_count = 0
        overall_total = Decimal("0.00")
        for row in rows:
            # SQLite sums decimals without their scale
            total = to_amount(row["total"] or Decimal("0"))
            by_status[row["status"]] = {"count": row["count"], "total": str(total)}
            overall_count += row["count"]
            overall_total += total

        return {"by_status": by_status, "count": overall_count, "total": str(overall_total)}

    @staticmethod
    def _validate_amount(amount: Decimal | int | str) -> Decimal:
        value = to_amount(amount)
        if value <= 0:
            raise ValidationError(
                "Expense amount must be positive",
                details={"amount": str(value)},
            )
        return value
