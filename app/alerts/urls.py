"""
URL configuration for the alerts API (under /api/v1/alerts/).
"""

from django.urls import include, path
from rest_framework.routers import SimpleRouter

from alerts.views import BusinessAlertViewSet

app_name = "alerts"

# SimpleRouter: an API root view would shadow the list at the empty prefix
router = SimpleRouter()
router.register(r"", BusinessAlertViewSet, basename="alert")

urlpatterns = [
    path("", include(router.urls)),
]
