"""
Tests for authentication app.

- test_managers.py: UserManager create_user / create_superuser
- test_views.py: JWT token obtain and refresh endpoints

Usage:
    pytest authentication/tests/
"""
