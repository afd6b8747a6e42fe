"""
Fixtures for sales tests.

Usage:
    def test_create_invoice(api_client, sales_client):
        api_client.post("/api/v1/sales/invoices/", {...}, format="json")
"""

import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from authentication.tests.factories import UserFactory
from sales.tests.factories import ClientFactory, ProductFactory


@pytest.fixture
def owner(db):
    return UserFactory(email="shop@example.com")


@pytest.fixture
def other_owner(db):
    return UserFactory(email="competitor@example.com")


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
    return _client_for(other_owner)


@pytest.fixture
def sales_client(owner):
    """A customer record of ``owner`` (named to avoid clashing with API clients)."""
    return ClientFactory(owner=owner, name="Acme SARL")


@pytest.fixture
def product(owner):
    return ProductFactory(owner=owner, name="Stapler", stock=40, alert_threshold=10)
