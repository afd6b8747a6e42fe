"""
Django app configuration for alerts.
"""

from django.apps import AppConfig


class AlertsConfig(AppConfig):
    """Stock and overdue-invoice alerts, their inbox and scheduled scans."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "alerts"
    verbose_name = "Business alerts"
