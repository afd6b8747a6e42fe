"""
Django app configuration for accounting.
"""

from django.apps import AppConfig


class AccountingConfig(AppConfig):
    """Imprest funds, their ledger, and expense approval."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "accounting"
    verbose_name = "Accounting"
