"""
Factory Boy factories for accounting test data.

Funds built here bypass FundService, so current_balance simply mirrors
initial_amount and the ledger starts empty. Use the services when a test
needs ledger rows.

Usage:
    from accounting.tests.factories import ExpenseFactory, ImprestFundFactory

    fund = ImprestFundFactory(owner=user, initial_amount=Decimal("500.00"))
    expense = ExpenseFactory(owner=user, fund=fund, amount=Decimal("20.00"))
"""

from decimal import Decimal

import factory

from accounting.models import Expense, ExpenseCategory, ImprestFund
from accounting.state_machines.states import FundStatus, PaymentMethod
from authentication.tests.factories import UserFactory


class ImprestFundFactory(factory.django.DjangoModelFactory):
    """
    Factory for ImprestFund.

    Default creates an active fund holding 1000.00.
    """

    class Meta:
        model = ImprestFund

    reference = factory.Sequence(lambda n: f"IMP-TEST-{n:06d}")
    owner = factory.SubFactory(UserFactory)
    account_holder = factory.Faker("name")
    purpose = "Petty cash"
    initial_amount = Decimal("1000.00")
    current_balance = factory.LazyAttribute(lambda obj: obj.initial_amount)
    status = factory.LazyAttribute(
        lambda obj: FundStatus.ACTIVE if obj.current_balance > 0 else FundStatus.DEPLETED
    )


class ExpenseCategoryFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = ExpenseCategory

    owner = factory.SubFactory(UserFactory)
    name = factory.Sequence(lambda n: f"Category {n}")
    is_major = False


class ExpenseFactory(factory.django.DjangoModelFactory):
    """
    Factory for Expense.

    Always created pending; drive it through ExpenseService to change status.

    Example:
        expense = ExpenseFactory(owner=user, fund=fund, amount=Decimal("30.00"))
    """

    class Meta:
        model = Expense

    reference = factory.Sequence(lambda n: f"EXP-TEST-{n:06d}")
    owner = factory.SubFactory(UserFactory)
    description = factory.Sequence(lambda n: f"Expense {n}")
    amount = Decimal("25.00")
    payment_method = PaymentMethod.CASH
    fund = None
    category = None
