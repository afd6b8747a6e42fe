"""
ViewSets for the accounting API.

URL Structure:
    /api/v1/accounting/funds/                         GET, POST
    /api/v1/accounting/funds/{id}/                    GET, PATCH, DELETE
    /api/v1/accounting/funds/{id}/close/              POST
    /api/v1/accounting/funds/{id}/transactions/       GET, POST (deposit / withdrawal)
    /api/v1/accounting/funds/{id}/verify/             GET
    /api/v1/accounting/transactions/                  GET (?fund=&type=)
    /api/v1/accounting/transactions/{id}/             GET
    /api/v1/accounting/categories/                    GET, POST
    /api/v1/accounting/categories/{id}/               GET, PATCH, DELETE
    /api/v1/accounting/expenses/                      GET (?status=&fund=&category=&start_date=&end_date=), POST
    /api/v1/accounting/expenses/{id}/                 GET, PATCH, DELETE
    /api/v1/accounting/expenses/{id}/approve/         POST
    /api/v1/accounting/expenses/{id}/reject/          POST
    /api/v1/accounting/expenses/summary/              GET (?start_date=&end_date=)

Design Decisions:
    - Every queryset is limited to request.user's records (OwnerScopedMixin)
    - Writes go through FundService / ExpenseService / TransactionRecorder
    - Service exceptions are rendered by ApplicationErrorMixin (404 / 409 / 400)
"""

from __future__ import annotations

from django.db.models import ProtectedError
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import (
    OpenApiParameter,
    OpenApiResponse,
    extend_schema,
    extend_schema_view,
)
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from accounting.ledger.services import TransactionRecorder
from accounting.ledger.types import RecordTransactionParams
from accounting.models import Expense, ExpenseCategory, ImprestFund, ImprestTransaction
from accounting.serializers import (
    ExpenseCategorySerializer,
    ExpenseFilterSerializer,
    ExpenseSerializer,
    ExpenseSummarySerializer,
    ExpenseWriteSerializer,
    ImprestFundCreateSerializer,
    ImprestFundSerializer,
    ImprestFundUpdateSerializer,
    ImprestTransactionSerializer,
    LedgerCheckSerializer,
    ManualTransactionSerializer,
    PeriodQuerySerializer,
    TransactionFilterSerializer,
)
from accounting.services import ExpenseService, FundService
from core.exceptions import ConflictError
from core.viewset_mixins import ApplicationErrorMixin, OwnerScopedMixin

# Partial updates only; PUT is not offered
ALLOWED_METHODS = ["get", "post", "patch", "delete", "head", "options"]


# =============================================================================
# Funds
# =============================================================================


@extend_schema_view(
    list=extend_schema(operation_id="list_funds", summary="List imprest funds", tags=["Accounting - Funds"]),
    create=extend_schema(
        operation_id="create_fund",
        summary="Open an imprest fund",
        request=ImprestFundCreateSerializer,
        responses={201: ImprestFundSerializer},
        tags=["Accounting - Funds"],
    ),
    retrieve=extend_schema(operation_id="get_fund", summary="Get fund", tags=["Accounting - Funds"]),
    partial_update=extend_schema(
        operation_id="update_fund",
        summary="Edit fund holder or purpose",
        request=ImprestFundUpdateSerializer,
        responses={200: ImprestFundSerializer},
        tags=["Accounting - Funds"],
    ),
    destroy=extend_schema(
        operation_id="delete_fund",
        summary="Delete fund and its ledger",
        responses={204: None, 409: OpenApiResponse(description="Expenses still reference the fund")},
        tags=["Accounting - Funds"],
    ),
)
class ImprestFundViewSet(ApplicationErrorMixin, OwnerScopedMixin, viewsets.ModelViewSet):
    """
    Imprest funds of the current user.

    The balance is never written directly: use the transactions action or
    approve expenses charged to the fund.
    """

    queryset = ImprestFund.objects.all()
    serializer_class = ImprestFundSerializer
    permission_classes = [IsAuthenticated]
    http_method_names = ALLOWED_METHODS

    def create(self, request):
        serializer = ImprestFundCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        fund = FundService.create_fund(owner=request.user, **serializer.validated_data)
        return Response(ImprestFundSerializer(fund).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request, pk=None):
        serializer = ImprestFundUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        fund = FundService.update_fund(pk, owner=request.user, **serializer.validated_data)
        return Response(ImprestFundSerializer(fund).data)

    def destroy(self, request, pk=None):
        FundService.delete_fund(pk, owner=request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(
        operation_id="close_fund",
        summary="Close fund",
        request=None,
        responses={200: ImprestFundSerializer},
        tags=["Accounting - Funds"],
    )
    @action(detail=True, methods=["post"])
    def close(self, request, pk=None):
        fund = FundService.close_fund(pk, owner=request.user)
        return Response(ImprestFundSerializer(fund).data)

    @extend_schema(
        methods=["GET"],
        operation_id="list_fund_transactions",
        summary="Fund ledger (oldest first)",
        responses={200: ImprestTransactionSerializer(many=True)},
        tags=["Accounting - Funds"],
    )
    @extend_schema(
        methods=["POST"],
        operation_id="record_fund_transaction",
        summary="Record a deposit or withdrawal",
        request=ManualTransactionSerializer,
        responses={
            201: ImprestTransactionSerializer,
            409: OpenApiResponse(description="Insufficient funds or fund closed"),
        },
        tags=["Accounting - Funds"],
    )
    @action(detail=True, methods=["get", "post"])
    def transactions(self, request, pk=None):
        fund = self.get_object()

        if request.method == "GET":
            queryset = fund.transactions.select_related("expense").order_by("sequence")
            page = self.paginate_queryset(queryset)
            if page is not None:
                return self.get_paginated_response(
                    ImprestTransactionSerializer(page, many=True).data
                )
            return Response(ImprestTransactionSerializer(queryset, many=True).data)

        serializer = ManualTransactionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        txn = TransactionRecorder.record(
            RecordTransactionParams(
                fund_id=fund.id,
                transaction_type=data["type"],
                amount=data["amount"],
                description=data["description"],
                notes=data.get("notes", ""),
                owner_id=request.user.pk,
            )
        )
        return Response(ImprestTransactionSerializer(txn).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        operation_id="verify_fund",
        summary="Replay the ledger and compare with the stored balance",
        responses={200: LedgerCheckSerializer},
        tags=["Accounting - Funds"],
    )
    @action(detail=True, methods=["get"])
    def verify(self, request, pk=None):
        check = TransactionRecorder.verify_fund_history(self.get_object())
        return Response(
            LedgerCheckSerializer(
                {
                    "fund_id": check.fund_id,
                    "stored_balance": check.stored_balance,
                    "replayed_balance": check.replayed_balance,
                    "transaction_count": check.transaction_count,
                    "mismatched_references": check.mismatched_references,
                    "is_consistent": check.is_consistent,
                }
            ).data
        )


@extend_schema_view(
    list=extend_schema(
        operation_id="list_transactions",
        summary="List ledger transactions",
        parameters=[
            OpenApiParameter("fund", OpenApiTypes.UUID, description="Filter by fund"),
            OpenApiParameter("type", OpenApiTypes.STR, description="Filter by transaction type"),
        ],
        tags=["Accounting - Transactions"],
    ),
    retrieve=extend_schema(
        operation_id="get_transaction", summary="Get transaction", tags=["Accounting - Transactions"]
    ),
)
class ImprestTransactionViewSet(ApplicationErrorMixin, OwnerScopedMixin, viewsets.ReadOnlyModelViewSet):
    """Read-only view over the append-only ledger."""

    queryset = ImprestTransaction.objects.select_related("fund", "expense")
    serializer_class = ImprestTransactionSerializer
    permission_classes = [IsAuthenticated]

    def get_queryset(self):
        queryset = super().get_queryset()
        if self.action != "list":
            return queryset

        filters = TransactionFilterSerializer(data=self.request.query_params)
        filters.is_valid(raise_exception=True)
        if "fund" in filters.validated_data:
            queryset = queryset.filter(fund_id=filters.validated_data["fund"])
        if "type" in filters.validated_data:
            queryset = queryset.filter(type=filters.validated_data["type"])
        return queryset


# =============================================================================
# Categories
# =============================================================================


@extend_schema_view(
    list=extend_schema(operation_id="list_categories", summary="List categories", tags=["Accounting - Categories"]),
    create=extend_schema(operation_id="create_category", summary="Create category", tags=["Accounting - Categories"]),
    retrieve=extend_schema(operation_id="get_category", summary="Get category", tags=["Accounting - Categories"]),
    partial_update=extend_schema(
        operation_id="update_category", summary="Update category", tags=["Accounting - Categories"]
    ),
    destroy=extend_schema(operation_id="delete_category", summary="Delete category", tags=["Accounting - Categories"]),
)
class ExpenseCategoryViewSet(ApplicationErrorMixin, OwnerScopedMixin, viewsets.ModelViewSet):
    queryset = ExpenseCategory.objects.all()
    serializer_class = ExpenseCategorySerializer
    permission_classes = [IsAuthenticated]
    http_method_names = ALLOWED_METHODS

    def perform_destroy(self, instance):
        try:
            instance.delete()
        except ProtectedError:
            raise ConflictError(
                f"Category {instance.name} is used by expenses",
                error_code="CATEGORY_IN_USE",
                details={"category_id": str(instance.id)},
            ) from None


# =============================================================================
# Expenses
# =============================================================================


@extend_schema_view(
    list=extend_schema(
        operation_id="list_expenses",
        summary="List expenses",
        parameters=[
            OpenApiParameter("status", OpenApiTypes.STR, description="pending, approved or rejected"),
            OpenApiParameter("fund", OpenApiTypes.UUID, description="Filter by fund"),
            OpenApiParameter("category", OpenApiTypes.UUID, description="Filter by category"),
            OpenApiParameter("start_date", OpenApiTypes.DATE, description="Expense date from (inclusive)"),
            OpenApiParameter("end_date", OpenApiTypes.DATE, description="Expense date to (inclusive)"),
        ],
        tags=["Accounting - Expenses"],
    ),
    create=extend_schema(
        operation_id="create_expense",
        summary="Record an expense (pending)",
        request=ExpenseWriteSerializer,
        responses={201: ExpenseSerializer},
        tags=["Accounting - Expenses"],
    ),
    retrieve=extend_schema(operation_id="get_expense", summary="Get expense", tags=["Accounting - Expenses"]),
    partial_update=extend_schema(
        operation_id="update_expense",
        summary="Edit expense",
        request=ExpenseWriteSerializer,
        responses={200: ExpenseSerializer, 409: OpenApiResponse(description="Amount or fund locked")},
        tags=["Accounting - Expenses"],
    ),
    destroy=extend_schema(
        operation_id="delete_expense",
        summary="Delete a pending or rejected expense",
        tags=["Accounting - Expenses"],
    ),
)
class ExpenseViewSet(ApplicationErrorMixin, OwnerScopedMixin, viewsets.ModelViewSet):
    """
    Expenses of the current user and their approval workflow.

    approve:
        pending → approved. Debits the linked fund, or fails with 409
        INSUFFICIENT_FUNDS and leaves everything unchanged.

    reject:
        pending → rejected, or approved → rejected with a refund to the fund.
    """

    queryset = Expense.objects.select_related("category", "fund", "approved_by")
    serializer_class = ExpenseSerializer
    permission_classes = [IsAuthenticated]
    http_method_names = ALLOWED_METHODS

    def get_queryset(self):
        if self.action != "list":
            return super().get_queryset()

        filters = ExpenseFilterSerializer(data=self.request.query_params)
        filters.is_valid(raise_exception=True)
        params = filters.validated_data
        return ExpenseService.list_expenses(
            owner=self.request.user,
            status=params.get("status"),
            fund_id=params.get("fund"),
            category_id=params.get("category"),
            start_date=params.get("start_date"),
            end_date=params.get("end_date"),
        ).select_related("approved_by")

    def create(self, request):
        serializer = ExpenseWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        expense = ExpenseService.create_expense(owner=request.user, **serializer.validated_data)
        return Response(ExpenseSerializer(expense).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request, pk=None):
        serializer = ExpenseWriteSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        expense = ExpenseService.update_expense(pk, owner=request.user, **serializer.validated_data)
        return Response(ExpenseSerializer(expense).data)

    def destroy(self, request, pk=None):
        ExpenseService.delete_expense(pk, owner=request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(
        operation_id="approve_expense",
        summary="Approve expense",
        request=None,
        responses={
            200: ExpenseSerializer,
            409: OpenApiResponse(description="Invalid transition, insufficient funds or fund closed"),
        },
        tags=["Accounting - Expenses"],
    )
    @action(detail=True, methods=["post"])
    def approve(self, request, pk=None):
        expense = ExpenseService.approve(pk, approver=request.user, owner=request.user)
        return Response(ExpenseSerializer(expense).data)

    @extend_schema(
        operation_id="reject_expense",
        summary="Reject expense",
        request=None,
        responses={200: ExpenseSerializer, 409: OpenApiResponse(description="Invalid transition")},
        tags=["Accounting - Expenses"],
    )
    @action(detail=True, methods=["post"])
    def reject(self, request, pk=None):
        expense = ExpenseService.reject(pk, owner=request.user)
        return Response(ExpenseSerializer(expense).data)

    @extend_schema(
        operation_id="expense_summary",
        summary="Totals per status over a period",
        parameters=[
            OpenApiParameter("start_date", OpenApiTypes.DATE),
            OpenApiParameter("end_date", OpenApiTypes.DATE),
        ],
        responses={200: ExpenseSummarySerializer},
        tags=["Accounting - Expenses"],
    )
    @action(detail=False, methods=["get"])
    def summary(self, request):
        period = PeriodQuerySerializer(data=request.query_params)
        period.is_valid(raise_exception=True)
        return Response(ExpenseService.summary(request.user, **period.validated_data))
