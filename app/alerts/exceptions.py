"""
Alert exceptions.
"""

from core.exceptions import NotFoundError


class AlertNotFound(NotFoundError):
    default_error_code: str = "ALERT_NOT_FOUND"
