"""
ViewSet for the alert inbox.

URL Structure:
    /api/v1/alerts/                    GET (?unread=&resolved=&type=&severity=), POST
    /api/v1/alerts/{id}/               GET, DELETE
    /api/v1/alerts/unread-count/       GET
    /api/v1/alerts/{id}/read/          POST
    /api/v1/alerts/{id}/resolve/       POST
    /api/v1/alerts/read-all/           POST
    /api/v1/alerts/generate/           POST (run both scans now)
    /api/v1/alerts/generate/stock/     POST
    /api/v1/alerts/generate/overdue/   POST
    /api/v1/alerts/cleanup/            DELETE (?days=)
"""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema, extend_schema_view
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from alerts.filters import BusinessAlertFilter
from alerts.models import BusinessAlert
from alerts.serializers import (
    AlertCreateSerializer,
    BusinessAlertSerializer,
    CleanupQuerySerializer,
    CleanupResultSerializer,
    GenerateAlertsSerializer,
    MarkAllReadSerializer,
    ScanResultSerializer,
    UnreadCountSerializer,
)
from alerts.services import AlertService
from core.viewset_mixins import ApplicationErrorMixin, OwnerScopedMixin


@extend_schema_view(
    list=extend_schema(operation_id="list_alerts", summary="List alerts", tags=["Alerts"]),
    create=extend_schema(
        operation_id="create_alert",
        summary="Open an alert by hand",
        description="Returns the open alert of the same type for the same record, if one exists (200).",
        request=AlertCreateSerializer,
        responses={200: BusinessAlertSerializer, 201: BusinessAlertSerializer},
        tags=["Alerts"],
    ),
    retrieve=extend_schema(operation_id="get_alert", summary="Get alert", tags=["Alerts"]),
    destroy=extend_schema(operation_id="delete_alert", summary="Delete alert", tags=["Alerts"]),
)
class BusinessAlertViewSet(
    ApplicationErrorMixin,
    OwnerScopedMixin,
    mixins.DestroyModelMixin,
    viewsets.ReadOnlyModelViewSet,
):
    """
    Alert inbox of the current user.

    Most alerts come from the scans; users can also open one by hand, then
    read, resolve or delete them.
    """

    queryset = BusinessAlert.objects.all()
    serializer_class = BusinessAlertSerializer
    permission_classes = [IsAuthenticated]
    filter_backends = [DjangoFilterBackend]
    filterset_class = BusinessAlertFilter

    def create(self, request):
        serializer = AlertCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        alert, created = AlertService.create_alert(request.user, **serializer.validated_data)
        return Response(
            BusinessAlertSerializer(alert).data,
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
        )

    def destroy(self, request, pk=None):
        AlertService.delete_alert(pk, owner=request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(
        operation_id="alerts_unread_count",
        summary="Count of unread open alerts",
        responses={200: UnreadCountSerializer},
        tags=["Alerts"],
    )
    @action(detail=False, methods=["get"], url_path="unread-count")
    def unread_count(self, request):
        return Response({"unread_count": AlertService.unread_count(request.user)})

    @extend_schema(
        operation_id="mark_alert_read",
        summary="Mark alert read",
        request=None,
        responses={200: BusinessAlertSerializer},
        tags=["Alerts"],
    )
    @action(detail=True, methods=["post"])
    def read(self, request, pk=None):
        alert = AlertService.mark_read(pk, owner=request.user)
        return Response(BusinessAlertSerializer(alert).data)

    @extend_schema(
        operation_id="resolve_alert",
        summary="Resolve alert",
        request=None,
        responses={200: BusinessAlertSerializer},
        tags=["Alerts"],
    )
    @action(detail=True, methods=["post"])
    def resolve(self, request, pk=None):
        alert = AlertService.mark_resolved(pk, owner=request.user)
        return Response(BusinessAlertSerializer(alert).data)

    @extend_schema(
        operation_id="mark_all_alerts_read",
        summary="Mark every alert read",
        request=None,
        responses={200: MarkAllReadSerializer},
        tags=["Alerts"],
    )
    @action(detail=False, methods=["post"], url_path="read-all")
    def read_all(self, request):
        return Response({"marked_read": AlertService.mark_all_read(request.user)})

    @extend_schema(
        operation_id="generate_alerts",
        summary="Run the stock and overdue-invoice scans now",
        request=None,
        responses={200: GenerateAlertsSerializer},
        tags=["Alerts"],
    )
    @action(detail=False, methods=["post"])
    def generate(self, request):
        results = AlertService.generate_all(request.user)
        return Response(GenerateAlertsSerializer(results).data)

    @extend_schema(
        operation_id="generate_stock_alerts",
        summary="Run the stock scan now",
        request=None,
        responses={200: ScanResultSerializer},
        tags=["Alerts"],
    )
    @action(detail=False, methods=["post"], url_path="generate/stock")
    def generate_stock(self, request):
        alerts = AlertService.generate_stock_alerts(request.user)
        return Response(ScanResultSerializer({"count": len(alerts), "alerts": alerts}).data)

    @extend_schema(
        operation_id="generate_overdue_alerts",
        summary="Run the overdue-invoice scan now",
        request=None,
        responses={200: ScanResultSerializer},
        tags=["Alerts"],
    )
    @action(detail=False, methods=["post"], url_path="generate/overdue")
    def generate_overdue(self, request):
        alerts = AlertService.generate_overdue_invoice_alerts(request.user)
        return Response(ScanResultSerializer({"count": len(alerts), "alerts": alerts}).data)

    @extend_schema(
        operation_id="cleanup_alerts",
        summary="Delete old resolved alerts",
        parameters=[
            OpenApiParameter(
                "days",
                OpenApiTypes.INT,
                description="Keep alerts resolved in the last N days (default from settings)",
            ),
        ],
        request=None,
        responses={200: CleanupResultSerializer},
        tags=["Alerts"],
    )
    @action(detail=False, methods=["delete"])
    def cleanup(self, request):
        query = CleanupQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        deleted = AlertService.cleanup_resolved(days=query.validated_data.get("days"), owner=request.user)
        return Response({"deleted": deleted})
