"""
Base service layer.

Services hold the business rules. Views deal with HTTP, models with storage,
and services sit between them. Expected failures are raised as
core.exceptions.BaseApplicationError subclasses; the view layer renders them.

Usage:
    from core.services import BaseService

    class FundService(BaseService):
        @classmethod
        def close_fund(cls, fund_id, owner):
            with cls.atomic():
                fund = cls._lock_fund(fund_id, owner)
                fund.status = FundStatus.CLOSED
                fund.save(update_fields=["status", "updated_at"])

            cls.get_logger().info("Closed fund %s", fund.reference)
            return fund
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING

from django.db import transaction

if TYPE_CHECKING:
    from collections.abc import Generator


class BaseService:
    """
    Base class for stateless service classes.

    Provides a per-service logger and an explicit transaction boundary.
    Subclasses expose @classmethod or @staticmethod operations only.
    """

    @classmethod
    def get_logger(cls) -> logging.Logger:
        """
        Logger named after the concrete service class.

        Example:
            ExpenseService.get_logger()  # "accounting.services.ExpenseService"
        """
        return logging.getLogger(f"{cls.__module__}.{cls.__name__}")

    @classmethod
    @contextmanager
    def atomic(cls) -> Generator[None, None, None]:
        """
        Run the enclosed block in a database transaction.

        Nested use creates a savepoint. Any exception rolls the block back
        and propagates unchanged.
        """
        with transaction.atomic():
            yield
