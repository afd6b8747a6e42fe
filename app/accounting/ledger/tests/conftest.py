"""
Pytest fixtures for fund ledger tests.

Sections:
    - Owner Fixtures
    - Fund Fixtures: funds opened through FundService, so the ledger starts clean
"""

from decimal import Decimal

import pytest

from accounting.services import FundService
from authentication.tests.factories import UserFactory


# ==========================================================================
# Owner Fixtures
# ==========================================================================


@pytest.fixture
def owner(db):
    return UserFactory()


# ==========================================================================
# Fund Fixtures
# ==========================================================================


@pytest.fixture
def fund(owner):
    """Active fund holding 100.00."""
    return FundService.create_fund(
        owner=owner,
        account_holder="Reception",
        initial_amount=Decimal("100.00"),
    )


@pytest.fixture
def empty_fund(owner):
    """Fund opened at zero, so it starts depleted."""
    return FundService.create_fund(
        owner=owner,
        account_holder="Reserve",
        initial_amount=Decimal("0"),
    )
