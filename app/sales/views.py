"""
ViewSets for the sales API.

URL Structure:
    /api/v1/sales/products/        GET (?category=, ?low_stock=), POST
    /api/v1/sales/products/{id}/   GET, PATCH, PUT, DELETE
    /api/v1/sales/clients/         GET, POST
    /api/v1/sales/clients/{id}/    GET, PATCH, PUT, DELETE
    /api/v1/sales/invoices/        GET (?status=, ?client=, ?due_before=, ?due_after=), POST
    /api/v1/sales/invoices/{id}/   GET, PATCH, PUT, DELETE

Product writes rerun the owner's stock scan and invoice writes rerun the
overdue scan, so the alert inbox follows the data without waiting for the
hourly beat task.
"""

from __future__ import annotations

from django.db.models import ProtectedError
from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import extend_schema, extend_schema_view
from rest_framework import viewsets
from rest_framework.permissions import IsAuthenticated

from alerts.services import AlertService
from core.exceptions import ConflictError
from core.viewset_mixins import ApplicationErrorMixin, OwnerScopedMixin
from sales.filters import InvoiceFilter, ProductFilter
from sales.models import Client, Invoice, Product
from sales.serializers import ClientSerializer, InvoiceSerializer, ProductSerializer


@extend_schema_view(
    list=extend_schema(operation_id="list_products", summary="List products", tags=["Sales - Products"]),
    create=extend_schema(operation_id="create_product", summary="Create product", tags=["Sales - Products"]),
    retrieve=extend_schema(operation_id="get_product", summary="Get product", tags=["Sales - Products"]),
    update=extend_schema(operation_id="replace_product", summary="Replace product", tags=["Sales - Products"]),
    partial_update=extend_schema(operation_id="update_product", summary="Update product", tags=["Sales - Products"]),
    destroy=extend_schema(operation_id="delete_product", summary="Delete product", tags=["Sales - Products"]),
)
class ProductViewSet(ApplicationErrorMixin, OwnerScopedMixin, viewsets.ModelViewSet):
    queryset = Product.objects.all()
    serializer_class = ProductSerializer
    permission_classes = [IsAuthenticated]
    filter_backends = [DjangoFilterBackend]
    filterset_class = ProductFilter

    def perform_create(self, serializer):
        super().perform_create(serializer)
        AlertService.generate_stock_alerts(self.request.user)

    def perform_update(self, serializer):
        super().perform_update(serializer)
        AlertService.generate_stock_alerts(self.request.user)

    def perform_destroy(self, instance):
        super().perform_destroy(instance)
        AlertService.generate_stock_alerts(self.request.user)


@extend_schema_view(
    list=extend_schema(operation_id="list_clients", summary="List clients", tags=["Sales - Clients"]),
    create=extend_schema(operation_id="create_client", summary="Create client", tags=["Sales - Clients"]),
    retrieve=extend_schema(operation_id="get_client", summary="Get client", tags=["Sales - Clients"]),
    update=extend_schema(operation_id="replace_client", summary="Replace client", tags=["Sales - Clients"]),
    partial_update=extend_schema(operation_id="update_client", summary="Update client", tags=["Sales - Clients"]),
    destroy=extend_schema(operation_id="delete_client", summary="Delete client", tags=["Sales - Clients"]),
)
class ClientViewSet(ApplicationErrorMixin, OwnerScopedMixin, viewsets.ModelViewSet):
    queryset = Client.objects.all()
    serializer_class = ClientSerializer
    permission_classes = [IsAuthenticated]

    def perform_destroy(self, instance):
        try:
            instance.delete()
        except ProtectedError:
            raise ConflictError(
                f"Client {instance.name} still has invoices",
                error_code="CLIENT_IN_USE",
                details={"client_id": str(instance.id)},
            ) from None


@extend_schema_view(
    list=extend_schema(operation_id="list_invoices", summary="List invoices", tags=["Sales - Invoices"]),
    create=extend_schema(operation_id="create_invoice", summary="Create invoice", tags=["Sales - Invoices"]),
    retrieve=extend_schema(operation_id="get_invoice", summary="Get invoice", tags=["Sales - Invoices"]),
    update=extend_schema(operation_id="replace_invoice", summary="Replace invoice", tags=["Sales - Invoices"]),
    partial_update=extend_schema(operation_id="update_invoice", summary="Update invoice", tags=["Sales - Invoices"]),
    destroy=extend_schema(operation_id="delete_invoice", summary="Delete invoice", tags=["Sales - Invoices"]),
)
class InvoiceViewSet(ApplicationErrorMixin, OwnerScopedMixin, viewsets.ModelViewSet):
    queryset = Invoice.objects.select_related("client")
    serializer_class = InvoiceSerializer
    permission_classes = [IsAuthenticated]
    filter_backends = [DjangoFilterBackend]
    filterset_class = InvoiceFilter

    def perform_create(self, serializer):
        super().perform_create(serializer)
        AlertService.generate_overdue_invoice_alerts(self.request.user)

    def perform_update(self, serializer):
        super().perform_update(serializer)
        AlertService.generate_overdue_invoice_alerts(self.request.user)

    def perform_destroy(self, instance):
        super().perform_destroy(instance)
        AlertService.generate_overdue_invoice_alerts(self.request.user)
