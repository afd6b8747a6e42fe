"""
Fixtures for accounting tests.

Usage:
    def test_approve(owner, fund, pending_expense):
        ExpenseService.approve(pending_expense.id, approver=owner, owner=owner)
"""

from decimal import Decimal

import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from accounting.services import FundService
from accounting.tests.factories import ExpenseCategoryFactory, ExpenseFactory
from authentication.tests.factories import UserFactory


# =============================================================================
# Users and Clients
# =============================================================================


@pytest.fixture
def owner(db):
    """Business account that owns the records under test."""
    return UserFactory(email="owner@example.com")


@pytest.fixture
def other_owner(db):
    """A second, unrelated business account."""
    return UserFactory(email="intruder@example.com")


def _client_for(user) -> APIClient:
    client = APIClient()
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {refresh.access_token}")
    return client


@pytest.fixture
def api_client(owner):
    """API client authenticated as ``owner``."""
    return _client_for(owner)


@pytest.fixture
def other_client(other_owner):
    """API client authenticated as ``other_owner``."""
    return _client_for(other_owner)


@pytest.fixture
def anonymous_client():
    return APIClient()


# =============================================================================
# Funds, Categories and Expenses
# =============================================================================


@pytest.fixture
def fund(owner):
    """Fund opened through the service with 1000.00."""
    return FundService.create_fund(
        owner=owner,
        account_holder="Front desk",
        initial_amount=Decimal("1000.00"),
        purpose="Postage and supplies",
    )


@pytest.fixture
def small_fund(owner):
    """Fund opened with 100.00, for overdraw scenarios."""
    return FundService.create_fund(
        owner=owner,
        account_holder="Courier",
        initial_amount=Decimal("100.00"),
    )


@pytest.fixture
def category(owner):
    return ExpenseCategoryFactory(owner=owner, name="Office supplies")


@pytest.fixture
def pending_expense(owner, fund):
    """Pending 300.00 expense charged to ``fund``."""
    return ExpenseFactory(
        owner=owner,
        fund=fund,
        description="Printer toner",
        amount=Decimal("300.00"),
    )


@pytest.fixture
def unlinked_expense(owner):
    """Pending expense with no fund."""
    return ExpenseFactory(owner=owner, description="Parking", amount=Decimal("12.50"))
