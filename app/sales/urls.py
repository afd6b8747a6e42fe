"""
URL configuration for the sales API.

Routes (under /api/v1/sales/):
    products/   - Products and stock levels
    clients/    - Client directory
    invoices/   - Invoices with computed totals
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from sales.views import ClientViewSet, InvoiceViewSet, ProductViewSet

app_name = "sales"

router = DefaultRouter()
router.register(r"products", ProductViewSet, basename="product")
router.register(r"clients", ClientViewSet, basename="client")
router.register(r"invoices", InvoiceViewSet, basename="invoice")

urlpatterns = [
    path("", include(router.urls)),
]
