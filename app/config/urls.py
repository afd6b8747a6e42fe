"""
Root URL configuration for bizledger.

URL Structure:
    /admin/                        - Django admin interface
    /health/                       - Health check endpoint (load balancers, Docker)
    /api/schema/                   - OpenAPI schema (YAML)
    /api/docs/                     - ReDoc API documentation
    /api/v1/auth/                  - JWT token obtain / refresh
    /api/v1/accounting/            - Imprest funds, ledger, expenses, approvals
        funds/                     - Fund CRUD, close, transactions, verify
        transactions/              - Read-only ledger
        categories/                - Expense categories
        expenses/                  - Expense CRUD, approve, reject, summary
    /api/v1/sales/                 - Products, clients, invoices
    /api/v1/alerts/                - Alert inbox and on-demand scans
"""

from django.contrib import admin
from django.urls import include, path
from drf_spectacular.views import SpectacularAPIView, SpectacularRedocView

from core.views import health_check

# =============================================================================
# API v1 Routes
# =============================================================================
api_v1_patterns = [
    path("auth/", include("authentication.urls")),
    path("accounting/", include("accounting.urls")),
    path("sales/", include("sales.urls")),
    path("alerts/", include("alerts.urls")),
]

urlpatterns = [
    # Documentation
    path("api/schema/", SpectacularAPIView.as_view(), name="schema"),
    path("api/docs/", SpectacularRedocView.as_view(url_name="schema"), name="redoc"),
    # Admin
    path("admin/", admin.site.urls),
    # Health check (Docker, Kubernetes, load balancers)
    path("health/", health_check, name="health_check"),
    # API v1
    path("api/v1/", include(api_v1_patterns)),
]

# =============================================================================
# Admin Site Customization
# =============================================================================
admin.site.site_header = "Bizledger Admin"
admin.site.site_title = "Bizledger"
admin.site.index_title = "Funds, expenses, sales and alerts"
