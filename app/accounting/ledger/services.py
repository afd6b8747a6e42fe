"""
Transaction recorder: the only writer of fund balances.

Every balance change goes through TransactionRecorder so that the fund
update and the ledger row insert share one atomic block and one row lock.

Usage:
    from accounting.ledger.services import TransactionRecorder
    from accounting.ledger.types import RecordTransactionParams

    txn = TransactionRecorder.record(RecordTransactionParams(
        fund_id=fund.id,
        transaction_type=TransactionType.WITHDRAWAL,
        amount=Decimal("40.00"),
        description="Cash for courier",
        owner_id=request.user.id,
    ))
    txn.balance_after  # fund balance right after this row

    # Callers already holding the fund lock (expense approval)
    with transaction.atomic():
        fund = TransactionRecorder.lock_fund(expense.fund_id)
        TransactionRecorder.record_locked(fund, params)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db.models import Max

from accounting.ledger.calculator import apply_transaction, replay
from accounting.ledger.exceptions import FundClosed, FundNotFound
from accounting.ledger.types import LedgerCheck
from accounting.models import ImprestFund, ImprestTransaction
from accounting.state_machines.states import FundStatus
from core.helpers import generate_reference
from core.services import BaseService

if TYPE_CHECKING:
    import uuid

    from accounting.ledger.types import BalanceChange, RecordTransactionParams


TRANSACTION_REFERENCE_PREFIX = "ITX"


class TransactionRecorder(BaseService):
    """
    Appends ledger rows and keeps the fund balance in step.

    Key features:
    - Fund row locked with SELECT ... FOR UPDATE before the balance is read
    - Calculator runs before any write, so InsufficientFunds leaves no trace
    - Balance update and row insert commit or roll back together
    """

    @classmethod
    def lock_fund(cls, fund_id: uuid.UUID, owner_id: int | None = None) -> ImprestFund:
        """
        Fetch a fund with a row lock. Must run inside an atomic block.

        Args:
            fund_id: Fund to lock
            owner_id: When given, funds of other owners are treated as missing

        Raises:
            FundNotFound: If the fund does not exist for this owner
        """
        queryset = ImprestFund.objects.select_for_update()
        if owner_id is not None:
            queryset = queryset.filter(owner_id=owner_id)
        try:
            return queryset.get(id=fund_id)
        except (ImprestFund.DoesNotExist, DjangoValidationError):
            raise FundNotFound(
                f"Fund {fund_id} not found",
                details={"fund_id": str(fund_id)},
            ) from None

    @classmethod
    def record(cls, params: RecordTransactionParams) -> ImprestTransaction:
        """
        Lock the fund, post one transaction and return the new ledger row.

        Raises:
            FundNotFound: If the fund does not exist for params.owner_id
            FundClosed: If the fund is closed
            InsufficientFunds: If a debit exceeds the balance
        """
        with cls.atomic():
            fund = cls.lock_fund(params.fund_id, params.owner_id)
            return cls.record_locked(fund, params)

    @classmethod
    def record_locked(
        cls,
        fund: ImprestFund,
        params: RecordTransactionParams,
        allow_closed: bool = False,
    ) -> ImprestTransaction:
        """
        Post a transaction against a fund the caller has already locked.

        The caller owns the atomic block; any exception raised here must be
        allowed to propagate so the block rolls back.

        Args:
            fund: Fund row locked by the caller
            params: Transaction to post
            allow_closed: Post even if the fund is closed. Only the refund
                reversing an approved expense uses this; the fund stays closed.
        """
        if fund.is_closed and not allow_closed:
            raise FundClosed(
                f"Fund {fund.reference} is closed",
                details={"fund_id": str(fund.id), "reference": fund.reference},
            )

        change = apply_transaction(
            fund.current_balance,
            params.transaction_type,
            params.amount,
            fund_id=fund.id,
        )

        fund.current_balance = change.new_balance
        fund.status = cls._status_after(fund.status, change)
        fund.save(update_fields=["current_balance", "status", "updated_at"])

        last_sequence = fund.transactions.aggregate(last=Max("sequence"))["last"] or 0
        txn = ImprestTransaction.objects.create(
            reference=generate_reference(TRANSACTION_REFERENCE_PREFIX),
            fund=fund,
            owner_id=fund.owner_id,
            sequence=last_sequence + 1,
            type=change.transaction_type,
            amount=change.amount,
            description=params.description,
            balance_after=change.new_balance,
            expense_id=params.expense_id,
            notes=params.notes,
        )

        cls.get_logger().info(
            "Recorded %s of %s on fund %s",
            change.transaction_type,
            change.amount,
            fund.reference,
            extra={
                "fund_id": str(fund.id),
                "transaction_id": str(txn.id),
                "transaction_type": change.transaction_type,
                "amount": str(change.amount),
                "balance_after": str(change.new_balance),
            },
        )
        return txn

    @staticmethod
    def _status_after(current: str, change: BalanceChange) -> str:
        """Flip between active and depleted as the balance hits or leaves zero."""
        if current == FundStatus.CLOSED:
            return current
        if change.new_balance == 0:
            return FundStatus.DEPLETED
        return FundStatus.ACTIVE

    @classmethod
    def verify_fund_history(cls, fund: ImprestFund) -> LedgerCheck:
        """
        Replay a fund's ledger and compare it with the stored snapshots.

        Walks the rows in sequence order from initial_amount. Each row's
        balance_after must match the running balance, and the final balance
        must match current_balance.

        Returns:
            LedgerCheck (is_consistent is False on any mismatch)
        """
        rows = list(fund.transactions.order_by("sequence"))
        steps = replay(fund.initial_amount, [(row.type, row.amount) for row in rows])

        mismatched = [
            row.reference
            for row, step in zip(rows, steps)
            if row.balance_after != step.new_balance
        ]
        replayed_balance = steps[-1].new_balance if steps else fund.initial_amount

        check = LedgerCheck(
            fund_id=fund.id,
            stored_balance=fund.current_balance,
            replayed_balance=replayed_balance,
            transaction_count=len(rows),
            mismatched_references=mismatched,
        )
        if not check.is_consistent:
            cls.get_logger().error(
                "Fund %s ledger does not replay to its stored balance",
                fund.reference,
                extra={
                    "fund_id": str(fund.id),
                    "stored_balance": str(check.stored_balance),
                    "replayed_balance": str(check.replayed_balance),
                    "mismatched": mismatched,
                },
            )
        return check
