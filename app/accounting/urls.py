"""
URL configuration for the accounting API.

Routes (under /api/v1/accounting/):
    funds/          - Imprest funds, their ledger and lifecycle actions
    transactions/   - Read-only ledger across all funds
    categories/     - Expense categories
    expenses/       - Expenses and the approval workflow
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from accounting.views import (
    ExpenseCategoryViewSet,
    ExpenseViewSet,
    ImprestFundViewSet,
    ImprestTransactionViewSet,
)

app_name = "accounting"

router = DefaultRouter()
router.register(r"funds", ImprestFundViewSet, basename="fund")
router.register(r"transactions", ImprestTransactionViewSet, basename="transaction")
router.register(r"categories", ExpenseCategoryViewSet, basename="category")
router.register(r"expenses", ExpenseViewSet, basename="expense")

urlpatterns = [
    path("", include(router.urls)),
]
