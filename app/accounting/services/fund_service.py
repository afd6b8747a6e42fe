"""
Imprest fund lifecycle service.

Handles creation, edits of descriptive fields, closing and deletion. Balance
changes are not made here; they go through TransactionRecorder.

Usage:
    from accounting.services import FundService

    fund = FundService.create_fund(
        owner=user,
        account_holder="Front desk",
        initial_amount=Decimal("1000.00"),
        purpose="Postage and small supplies",
    )
    FundService.close_fund(fund.id, owner=user)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from django.core.exceptions import ValidationError as DjangoValidationError
from django.utils import timezone

from accounting.exceptions import FundInUse
from accounting.ledger.exceptions import FundClosed, FundNotFound
from accounting.ledger.services import TransactionRecorder
from accounting.ledger.types import to_amount
from accounting.models import Expense, ImprestFund
from accounting.state_machines.states import ExpenseStatus, FundStatus
from core.exceptions import ValidationError
from core.helpers import generate_reference
from core.services import BaseService

if TYPE_CHECKING:
    import uuid
    from decimal import Decimal

    from authentication.models import User


FUND_REFERENCE_PREFIX = "IMP"


class FundService(BaseService):
    """
    Service for imprest fund lifecycle operations.

    All lookups are owner-scoped: a fund belonging to someone else raises
    FundNotFound exactly like a missing one.
    """

    @classmethod
    def create_fund(
        cls,
        owner: User,
        account_holder: str,
        initial_amount: Decimal | int | str,
        purpose: str = "",
    ) -> ImprestFund:
        """
        Open a new fund with current_balance = initial_amount.

        A zero opening amount is allowed; the fund then starts depleted.

        Raises:
            ValidationError: Empty holder or negative amount
        """
        amount = to_amount(initial_amount, "initial_amount")
        if amount < 0:
            raise ValidationError(
                "Initial amount cannot be negative",
                details={"initial_amount": str(amount)},
            )
        if not account_holder or not account_holder.strip():
            raise ValidationError(
                "Account holder is required",
                details={"account_holder": "required"},
            )

        fund = ImprestFund.objects.create(
            reference=generate_reference(FUND_REFERENCE_PREFIX),
            owner=owner,
            account_holder=account_holder.strip(),
            purpose=purpose or "",
            initial_amount=amount,
            current_balance=amount,
            status=FundStatus.ACTIVE if amount > 0 else FundStatus.DEPLETED,
        )

        cls.get_logger().info(
            "Created fund %s with %s",
            fund.reference,
            amount,
            extra={"fund_id": str(fund.id), "owner_id": owner.pk},
        )
        return fund

    @classmethod
    def get_fund(cls, fund_id: uuid.UUID, owner: User) -> ImprestFund:
        """
        Raises:
            FundNotFound: If the fund does not exist for this owner
        """
        try:
            return ImprestFund.objects.get(id=fund_id, owner=owner)
        except (ImprestFund.DoesNotExist, DjangoValidationError):
            raise FundNotFound(
                f"Fund {fund_id} not found",
                details={"fund_id": str(fund_id)},
            ) from None

    @classmethod
    def update_fund(
        cls,
        fund_id: uuid.UUID,
        owner: User,
        account_holder: str | None = None,
        purpose: str | None = None,
    ) -> ImprestFund:
        """
        Edit the descriptive fields of a fund.

        Amounts and status cannot be edited here.
        """
        with cls.atomic():
            fund = TransactionRecorder.lock_fund(fund_id, owner.pk)
            if account_holder is not None:
                if not account_holder.strip():
                    raise ValidationError(
                        "Account holder is required",
                        details={"account_holder": "required"},
                    )
                fund.account_holder = account_holder.strip()
            if purpose is not None:
                fund.purpose = purpose
            fund.save(update_fields=["account_holder", "purpose", "updated_at"])
        return fund

    @classmethod
    def close_fund(cls, fund_id: uuid.UUID, owner: User) -> ImprestFund:
        """
        Close a fund for good. Closed funds refuse all further transactions
        except the refund of an approved expense that is later rejected.

        Raises:
            FundClosed: If the fund is already closed
            FundInUse: If pending expenses are still charged to the fund
        """
        with cls.atomic():
            fund = TransactionRecorder.lock_fund(fund_id, owner.pk)
            if fund.is_closed:
                raise FundClosed(
                    f"Fund {fund.reference} is already closed",
                    details={"fund_id": str(fund.id)},
                )

            pending = Expense.objects.filter(fund=fund, status=ExpenseStatus.PENDING).count()
            if pending:
                raise FundInUse(
                    f"Fund {fund.reference} still has {pending} pending expense(s)",
                    details={"fund_id": str(fund.id), "pending_expenses": pending},
                )

            fund.status = FundStatus.CLOSED
            fund.closed_at = timezone.now()
            fund.save(update_fields=["status", "closed_at", "updated_at"])

        cls.get_logger().info(
            "Closed fund %s at balance %s",
            fund.reference,
            fund.current_balance,
            extra={"fund_id": str(fund.id)},
        )
        return fund

    @classmethod
    def delete_fund(cls, fund_id: uuid.UUID, owner: User) -> None:
        """
        Delete a fund together with its ledger.

        Transactions go with the fund through the foreign-key cascade, in
        the same atomic block. Deletion is refused while any expense still
        points at the fund.

        Raises:
            FundNotFound: If the fund does not exist for this owner
            FundInUse: If expenses reference the fund
        """
        with cls.atomic():
            fund = TransactionRecorder.lock_fund(fund_id, owner.pk)

            linked = Expense.objects.filter(fund=fund).count()
            if linked:
                raise FundInUse(
                    f"Fund {fund.reference} is referenced by {linked} expense(s)",
                    details={"fund_id": str(fund.id), "expense_count": linked},
                )

            reference = fund.reference
            transaction_count = fund.transactions.count()
            fund.delete()

        cls.get_logger().info(
            "Deleted fund %s and %d transaction(s)",
            reference,
            transaction_count,
            extra={"fund_id": str(fund_id)},
        )
