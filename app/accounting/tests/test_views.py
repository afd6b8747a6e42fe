"""
Tests for the accounting API.

Covers status codes, error bodies, owner isolation and the approval
endpoints end to end.
"""

from decimal import Decimal

import pytest
from rest_framework import status

from accounting.models import Expense, ImprestFund, ImprestTransaction
from accounting.services import ExpenseService
from accounting.state_machines.states import ExpenseStatus, FundStatus
from accounting.tests.factories import ExpenseCategoryFactory, ExpenseFactory

BASE = "/api/v1/accounting"


# =============================================================================
# Authentication
# =============================================================================


class TestAuthentication:
    @pytest.mark.parametrize(
        "url", [f"{BASE}/funds/", f"{BASE}/expenses/", f"{BASE}/categories/", f"{BASE}/transactions/"]
    )
    def test_anonymous_requests_are_rejected(self, anonymous_client, db, url):
        response = anonymous_client.get(url)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


class TestAllowedMethods:
    @pytest.mark.parametrize(
        ("path", "fixture"),
        [("funds", "fund"), ("categories", "category"), ("expenses", "pending_expense")],
    )
    def test_put_is_not_allowed(self, api_client, request, path, fixture):
        """Should only accept partial updates through PATCH."""
        obj = request.getfixturevalue(fixture)

        response = api_client.put(f"{BASE}/{path}/{obj.id}/", {}, format="json")

        assert response.status_code == status.HTTP_405_METHOD_NOT_ALLOWED

    def test_options_is_allowed(self, api_client, fund):
        response = api_client.options(f"{BASE}/funds/{fund.id}/")

        assert response.status_code == status.HTTP_200_OK


# =============================================================================
# Funds
# =============================================================================


class TestFundEndpoints:
    """Tests for /funds/."""

    def test_create_fund(self, api_client, owner):
        """Should open a fund and return it with its balance."""
        response = api_client.post(
            f"{BASE}/funds/",
            {"account_holder": "Front desk", "initial_amount": "100000.00", "purpose": "Stamps"},
            format="json",
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data["current_balance"] == "100000.00"
        assert response.data["status"] == FundStatus.ACTIVE
        assert ImprestFund.objects.get(id=response.data["id"]).owner == owner

    def test_create_rejects_negative_amount(self, api_client):
        response = api_client.post(
            f"{BASE}/funds/",
            {"account_holder": "X", "initial_amount": "-1.00"},
            format="json",
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_balance_cannot_be_patched(self, api_client, fund):
        """Should ignore attempts to write the balance directly."""
        response = api_client.patch(
            f"{BASE}/funds/{fund.id}/",
            {"current_balance": "5.00", "purpose": "Updated"},
            format="json",
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data["current_balance"] == "1000.00"
        assert response.data["purpose"] == "Updated"

    def test_list_only_shows_own_funds(self, api_client, other_client, fund):
        assert api_client.get(f"{BASE}/funds/").data["count"] == 1
        assert other_client.get(f"{BASE}/funds/").data["count"] == 0

    def test_foreign_fund_is_not_found(self, other_client, fund):
        response = other_client.get(f"{BASE}/funds/{fund.id}/")

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_delete_fund_without_expenses(self, api_client, fund):
        response = api_client.delete(f"{BASE}/funds/{fund.id}/")

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert not ImprestFund.objects.filter(id=fund.id).exists()

    def test_delete_fund_with_expenses_conflicts(self, api_client, pending_expense):
        response = api_client.delete(f"{BASE}/funds/{pending_expense.fund_id}/")

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data["error_code"] == "FUND_IN_USE"

    def test_delete_foreign_fund_is_not_found(self, other_client, fund):
        response = other_client.delete(f"{BASE}/funds/{fund.id}/")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert ImprestFund.objects.filter(id=fund.id).exists()

    def test_close_fund(self, api_client, fund):
        response = api_client.post(f"{BASE}/funds/{fund.id}/close/")

        assert response.status_code == status.HTTP_200_OK
        assert response.data["status"] == FundStatus.CLOSED


class TestFundTransactionEndpoints:
    """Tests for /funds/{id}/transactions/ and /funds/{id}/verify/."""

    def test_record_withdrawal(self, api_client, fund):
        response = api_client.post(
            f"{BASE}/funds/{fund.id}/transactions/",
            {"type": "withdrawal", "amount": "250.00", "description": "Courier"},
            format="json",
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data["balance_after"] == "750.00"
        assert response.data["sequence"] == 1
        assert ImprestFund.objects.get(id=fund.id).current_balance == Decimal("750.00")

    def test_overdraw_returns_conflict(self, api_client, fund):
        """Should answer 409 with the required and available amounts."""
        response = api_client.post(
            f"{BASE}/funds/{fund.id}/transactions/",
            {"type": "withdrawal", "amount": "1000.01", "description": "Too much"},
            format="json",
        )

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data["error_code"] == "INSUFFICIENT_FUNDS"
        assert response.data["details"]["available"] == "1000.00"
        assert response.data["details"]["required"] == "1000.01"

    @pytest.mark.parametrize("txn_type", ["expense", "refund", "transfer"])
    def test_only_manual_types_accepted(self, api_client, fund, txn_type):
        response = api_client.post(
            f"{BASE}/funds/{fund.id}/transactions/",
            {"type": txn_type, "amount": "1.00", "description": "Manual"},
            format="json",
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_closed_fund_refuses_deposit(self, api_client, fund):
        api_client.post(f"{BASE}/funds/{fund.id}/close/")

        response = api_client.post(
            f"{BASE}/funds/{fund.id}/transactions/",
            {"type": "deposit", "amount": "1.00", "description": "Late"},
            format="json",
        )

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data["error_code"] == "FUND_CLOSED"

    def test_history_is_oldest_first(self, api_client, fund):
        for amount in ("10.00", "20.00", "30.00"):
            api_client.post(
                f"{BASE}/funds/{fund.id}/transactions/",
                {"type": "withdrawal", "amount": amount, "description": "Out"},
                format="json",
            )

        response = api_client.get(f"{BASE}/funds/{fund.id}/transactions/")

        assert response.status_code == status.HTTP_200_OK
        assert [row["sequence"] for row in response.data["results"]] == [1, 2, 3]
        assert response.data["results"][-1]["balance_after"] == "940.00"

    def test_verify_reports_consistent_ledger(self, api_client, fund):
        api_client.post(
            f"{BASE}/funds/{fund.id}/transactions/",
            {"type": "deposit", "amount": "5.00", "description": "In"},
            format="json",
        )

        response = api_client.get(f"{BASE}/funds/{fund.id}/verify/")

        assert response.status_code == status.HTTP_200_OK
        assert response.data["is_consistent"] is True
        assert response.data["transaction_count"] == 1

    def test_transaction_list_filters_by_fund(self, api_client, owner, fund, small_fund):
        api_client.post(
            f"{BASE}/funds/{fund.id}/transactions/",
            {"type": "deposit", "amount": "5.00", "description": "In"},
            format="json",
        )
        api_client.post(
            f"{BASE}/funds/{small_fund.id}/transactions/",
            {"type": "deposit", "amount": "5.00", "description": "In"},
            format="json",
        )

        response = api_client.get(f"{BASE}/transactions/", {"fund": str(small_fund.id)})

        assert response.data["count"] == 1
        assert response.data["results"][0]["fund"] == small_fund.id

    def test_transactions_are_read_only(self, api_client, fund):
        response = api_client.post(
            f"{BASE}/transactions/",
            {"fund": str(fund.id), "type": "deposit", "amount": "1.00"},
            format="json",
        )

        assert response.status_code == status.HTTP_405_METHOD_NOT_ALLOWED


# =============================================================================
# Categories
# =============================================================================


class TestCategoryEndpoints:
    def test_create_category(self, api_client, owner):
        response = api_client.post(
            f"{BASE}/categories/", {"name": "Fuel", "is_major": True}, format="json"
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data["is_major"] is True

    def test_duplicate_name_is_rejected(self, api_client, category):
        response = api_client.post(
            f"{BASE}/categories/", {"name": category.name.upper()}, format="json"
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_same_name_allowed_for_other_owner(self, other_client, category):
        response = other_client.post(f"{BASE}/categories/", {"name": category.name}, format="json")

        assert response.status_code == status.HTTP_201_CREATED

    def test_category_in_use_cannot_be_deleted(self, api_client, owner, category):
        ExpenseFactory(owner=owner, category=category)

        response = api_client.delete(f"{BASE}/categories/{category.id}/")

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data["error_code"] == "CATEGORY_IN_USE"


# =============================================================================
# Expenses
# =============================================================================


class TestExpenseEndpoints:
    """Tests for /expenses/ CRUD and filters."""

    def test_create_expense_linked_to_fund(self, api_client, fund, category):
        response = api_client.post(
            f"{BASE}/expenses/",
            {
                "description": "Toner",
                "amount": "300.00",
                "fund_id": str(fund.id),
                "category_id": str(category.id),
                "expense_date": "2024-03-01",
            },
            format="json",
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data["status"] == ExpenseStatus.PENDING
        assert response.data["fund_reference"] == fund.reference
        assert response.data["category_name"] == category.name

    def test_create_rejects_zero_amount(self, api_client):
        response = api_client.post(
            f"{BASE}/expenses/", {"description": "Nothing", "amount": "0.00"}, format="json"
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_create_with_foreign_fund_is_not_found(self, other_client, fund):
        response = other_client.post(
            f"{BASE}/expenses/",
            {"description": "Sneaky", "amount": "1.00", "fund_id": str(fund.id)},
            format="json",
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data["error_code"] == "FUND_NOT_FOUND"

    def test_filter_by_status(self, api_client, owner, pending_expense, unlinked_expense):
        ExpenseService.approve(unlinked_expense.id, approver=owner, owner=owner)

        response = api_client.get(f"{BASE}/expenses/", {"status": "approved"})

        assert response.data["count"] == 1
        assert response.data["results"][0]["id"] == str(unlinked_expense.id)

    def test_invalid_period_is_rejected(self, api_client):
        response = api_client.get(
            f"{BASE}/expenses/", {"start_date": "2024-05-01", "end_date": "2024-04-01"}
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_patch_amount_of_approved_expense_conflicts(self, api_client, owner, pending_expense):
        ExpenseService.approve(pending_expense.id, approver=owner, owner=owner)

        response = api_client.patch(
            f"{BASE}/expenses/{pending_expense.id}/", {"amount": "1.00"}, format="json"
        )

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data["error_code"] == "EXPENSE_LOCKED"

    def test_patch_notes_of_pending_expense(self, api_client, pending_expense):
        response = api_client.patch(
            f"{BASE}/expenses/{pending_expense.id}/", {"notes": "Receipt attached"}, format="json"
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data["notes"] == "Receipt attached"

    def test_delete_pending_expense(self, api_client, unlinked_expense):
        response = api_client.delete(f"{BASE}/expenses/{unlinked_expense.id}/")

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert not Expense.objects.filter(id=unlinked_expense.id).exists()

    def test_summary(self, api_client, owner):
        ExpenseFactory(owner=owner, amount=Decimal("10.00"))
        ExpenseFactory(owner=owner, amount=Decimal("15.50"))

        response = api_client.get(f"{BASE}/expenses/summary/")

        assert response.status_code == status.HTTP_200_OK
        assert response.data["count"] == 2
        assert response.data["by_status"]["pending"]["total"] == "25.50"


class TestApprovalEndpoints:
    """Tests for /expenses/{id}/approve/ and /reject/."""

    def test_approve_debits_fund(self, api_client, owner, pending_expense):
        response = api_client.post(f"{BASE}/expenses/{pending_expense.id}/approve/")

        assert response.status_code == status.HTTP_200_OK
        assert response.data["status"] == ExpenseStatus.APPROVED
        assert response.data["approved_by_email"] == owner.email
        assert ImprestFund.objects.get(id=pending_expense.fund_id).current_balance == Decimal(
            "700.00"
        )

    def test_second_approve_conflicts(self, api_client, pending_expense):
        """Should reject a double approval instead of debiting twice."""
        api_client.post(f"{BASE}/expenses/{pending_expense.id}/approve/")

        response = api_client.post(f"{BASE}/expenses/{pending_expense.id}/approve/")

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data["error_code"] == "INVALID_TRANSITION"
        assert ImprestTransaction.objects.filter(fund_id=pending_expense.fund_id).count() == 1

    def test_approve_overdraw_conflicts(self, api_client, owner, small_fund):
        expense = ExpenseFactory(owner=owner, fund=small_fund, amount=Decimal("500.00"))

        response = api_client.post(f"{BASE}/expenses/{expense.id}/approve/")

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data["error_code"] == "INSUFFICIENT_FUNDS"
        assert Expense.objects.get(id=expense.id).status == ExpenseStatus.PENDING

    def test_reject_approved_refunds(self, api_client, pending_expense):
        api_client.post(f"{BASE}/expenses/{pending_expense.id}/approve/")

        response = api_client.post(f"{BASE}/expenses/{pending_expense.id}/reject/")

        assert response.status_code == status.HTTP_200_OK
        assert response.data["status"] == ExpenseStatus.REJECTED
        assert ImprestFund.objects.get(id=pending_expense.fund_id).current_balance == Decimal(
            "1000.00"
        )

    def test_other_owner_cannot_approve(self, other_client, pending_expense):
        response = other_client.post(f"{BASE}/expenses/{pending_expense.id}/approve/")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data["error_code"] == "EXPENSE_NOT_FOUND"

    def test_unknown_expense_is_not_found(self, api_client, db):
        response = api_client.post(f"{BASE}/expenses/00000000-0000-0000-0000-000000000000/approve/")

        assert response.status_code == status.HTTP_404_NOT_FOUND
