"""
Tests for the pure fund balance calculator.
"""

from decimal import Decimal

import pytest

from accounting.ledger.calculator import apply_transaction, replay, signed_amount
from accounting.ledger.exceptions import InsufficientFunds
from accounting.ledger.types import to_amount
from accounting.state_machines.states import TransactionType
from core.exceptions import ValidationError


class TestSignedAmount:
    """Tests for signed_amount()."""

    @pytest.mark.parametrize("txn_type", [TransactionType.DEPOSIT, TransactionType.REFUND])
    def test_credits_are_positive(self, txn_type):
        assert signed_amount(txn_type, Decimal("5.00")) == Decimal("5.00")

    @pytest.mark.parametrize("txn_type", [TransactionType.WITHDRAWAL, TransactionType.EXPENSE])
    def test_debits_are_negative(self, txn_type):
        assert signed_amount(txn_type, Decimal("5.00")) == Decimal("-5.00")

    def test_unknown_type_raises(self):
        with pytest.raises(ValidationError):
            signed_amount("transfer", Decimal("5.00"))


class TestApplyTransaction:
    """Tests for apply_transaction()."""

    def test_deposit_adds_to_balance(self):
        """Should credit a deposit."""
        change = apply_transaction(Decimal("100.00"), TransactionType.DEPOSIT, Decimal("50.00"))

        assert change.previous_balance == Decimal("100.00")
        assert change.new_balance == Decimal("150.00")
        assert change.is_credit is True
        assert change.signed_amount == Decimal("50.00")

    def test_expense_subtracts_from_balance(self):
        """Should debit an expense."""
        change = apply_transaction(Decimal("100.00"), TransactionType.EXPENSE, Decimal("30.00"))

        assert change.new_balance == Decimal("70.00")
        assert change.is_credit is False
        assert change.signed_amount == Decimal("-30.00")

    def test_debit_to_exactly_zero_is_allowed(self):
        """Should allow draining the fund to zero."""
        change = apply_transaction(Decimal("40.00"), TransactionType.WITHDRAWAL, Decimal("40.00"))

        assert change.new_balance == Decimal("0.00")

    def test_overdraw_raises_insufficient_funds(self):
        """Should refuse a debit larger than the balance and report both amounts."""
        with pytest.raises(InsufficientFunds) as exc_info:
            apply_transaction(Decimal("10.00"), TransactionType.EXPENSE, Decimal("10.01"))

        assert exc_info.value.required == Decimal("10.01")
        assert exc_info.value.available == Decimal("10.00")
        assert exc_info.value.details["required"] == "10.01"
        assert exc_info.value.error_code == "INSUFFICIENT_FUNDS"

    def test_refund_on_empty_balance_succeeds(self):
        change = apply_transaction(Decimal("0"), TransactionType.REFUND, Decimal("5.00"))

        assert change.new_balance == Decimal("5.00")

    @pytest.mark.parametrize("amount", [Decimal("0"), Decimal("-1.00")])
    def test_non_positive_amount_raises(self, amount):
        """Should refuse zero and negative magnitudes."""
        with pytest.raises(ValidationError):
            apply_transaction(Decimal("100.00"), TransactionType.DEPOSIT, amount)

    def test_negative_starting_balance_raises(self):
        with pytest.raises(ValidationError):
            apply_transaction(Decimal("-1.00"), TransactionType.DEPOSIT, Decimal("5.00"))

    def test_amounts_are_quantized_to_cents(self):
        """Should round inputs to two decimals before computing."""
        change = apply_transaction("100", TransactionType.EXPENSE, "0.1")

        assert change.amount == Decimal("0.10")
        assert change.new_balance == Decimal("99.90")


class TestToAmount:
    """Tests for to_amount()."""

    def test_float_is_refused(self):
        """Should refuse floats outright."""
        with pytest.raises(ValidationError):
            to_amount(0.1)

    @pytest.mark.parametrize("value", ["abc", "NaN", "Infinity", None])
    def test_invalid_values_raise(self, value):
        with pytest.raises(ValidationError):
            to_amount(value)

    def test_int_and_string_are_accepted(self):
        assert to_amount(12) == Decimal("12.00")
        assert to_amount("3.456") == Decimal("3.46")


class TestReplay:
    """Tests for replay()."""

    def test_replays_history_step_by_step(self):
        """Should return one step per entry with running balances."""
        steps = replay(
            Decimal("1000.00"),
            [
                (TransactionType.EXPENSE, Decimal("300.00")),
                (TransactionType.WITHDRAWAL, Decimal("200.00")),
                (TransactionType.DEPOSIT, Decimal("50.00")),
                (TransactionType.REFUND, Decimal("300.00")),
            ],
        )

        assert [step.new_balance for step in steps] == [
            Decimal("700.00"),
            Decimal("500.00"),
            Decimal("550.00"),
            Decimal("850.00"),
        ]

    def test_empty_history_returns_no_steps(self):
        assert replay(Decimal("10.00"), []) == []

    def test_overdrawing_history_raises(self):
        with pytest.raises(InsufficientFunds):
            replay(Decimal("10.00"), [(TransactionType.EXPENSE, Decimal("20.00"))])
