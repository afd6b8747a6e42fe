"""
Fixtures for alert tests.

Usage:
    def test_scan(owner, sales_client):
        InvoiceFactory(owner=owner, client=sales_client, due_date=...)
"""

import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from authentication.tests.factories import UserFactory
from sales.tests.factories import ClientFactory


@pytest.fixture
def owner(db):
    return UserFactory(email="shop@example.com")


@pytest.fixture
def other_owner(db):
    return UserFactory(email="neighbour@example.com")


def _client_for(user) -> APIClient:
    client = APIClient()
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {refresh.access_token}")
    return client


@pytest.fixture
def api_client(owner):
    return _client_for(owner)


@pytest.fixture
def other_client(other_owner):
    return _client_for(other_owner)


@pytest.fixture
def sales_client(owner):
    return ClientFactory(owner=owner, name="Acme SARL")
