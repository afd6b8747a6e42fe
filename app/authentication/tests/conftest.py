"""
Fixtures for authentication tests.

Usage:
    def test_example(user, api_client):
        response = api_client.post("/api/v1/auth/token/", {...})
"""

import pytest
from rest_framework.test import APIClient

from authentication.models import User
from authentication.tests.factories import UserFactory


@pytest.fixture
def user(db):
    """Create an active user with the default test password."""
    return UserFactory(email="owner@example.com")


@pytest.fixture
def inactive_user(db):
    return UserFactory(email="gone@example.com", is_active=False)


@pytest.fixture
def superuser(db):
    """Create a superuser with admin privileges."""
    return User.objects.create_superuser(email="admin@example.com", password="AdminPass123!")


@pytest.fixture
def api_client():
    """Unauthenticated API client."""
    return APIClient()
