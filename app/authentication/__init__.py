"""
Authentication application.

Provides the email-based User model every business record is owned by, and
the JWT token endpoints (simplejwt) the API clients log in with.

Usage:
    from authentication.models import User

    user = User.objects.create_user(email="owner@example.com", password="...")
"""
