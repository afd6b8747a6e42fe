"""
ExpenseCategory model.
"""

from django.conf import settings
from django.db import models

from core.model_mixins import UUIDPrimaryKeyMixin
from core.models import BaseModel


class ExpenseCategory(UUIDPrimaryKeyMixin, BaseModel):
    """
    User-defined grouping for expenses (rent, fuel, office supplies...).

    is_major flags categories that reports should list on their own line.
    """

    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="expense_categories",
        help_text="User account that owns this category",
    )
    name = models.CharField(
        max_length=100,
        help_text="Category name, unique per owner",
    )
    description = models.TextField(
        blank=True,
        default="",
        help_text="Optional description",
    )
    is_major = models.BooleanField(
        default=False,
        help_text="Whether this is a major expense category",
    )

    class Meta:
        ordering = ["name"]
        verbose_name = "Expense category"
        verbose_name_plural = "Expense categories"
        constraints = [
            models.UniqueConstraint(
                fields=["owner", "name"],
                name="unique_expense_category_per_owner",
            ),
        ]

    def __str__(self) -> str:
        return self.name
