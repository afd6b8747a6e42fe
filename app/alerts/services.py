"""
Alert generator and inbox service.

Scans:
    generate_stock_alerts: one alert per product at or below its threshold
    generate_overdue_invoice_alerts: one alert per unpaid invoice past due

Both scans are idempotent: running one twice without data changes leaves
the same set of open alerts. The stock scan gets there by resolving every
open stock alert and opening fresh ones. The overdue scan keeps the open
alert of an invoice that is still overdue and resolves the alerts of
invoices that no longer are.

Policy:
    stock == 0                    → critical_stock / critical
    stock <= threshold / 2        → low_stock / high
    stock <= threshold            → low_stock / medium
    days past due > 30            → overdue_invoice / critical
    days past due > 7             → overdue_invoice / high
    otherwise                     → overdue_invoice / medium

Usage:
    from alerts.services import AlertService

    AlertService.generate_all(user)
    AlertService.unread_count(user)
    AlertService.mark_resolved(alert_id, owner=user)
    AlertService.create_alert(user, AlertType.PAYMENT_DUE, "Rent", "Rent is due Friday")
"""

from __future__ import annotations

import datetime
from typing import TYPE_CHECKING

from django.conf import settings
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import IntegrityError, transaction
from django.db.models import F, Q
from django.utils import timezone

from alerts.exceptions import AlertNotFound
from alerts.models import (
    STOCK_ALERT_TYPES,
    AlertEntityType,
    AlertSeverity,
    AlertType,
    BusinessAlert,
)
from core.services import BaseService
from sales.models import UNPAID_STATUSES, Invoice, Product

if TYPE_CHECKING:
    import uuid
    from typing import Any

    from authentication.models import User


class AlertService(BaseService):
    """
    Service for business alerts.

    All methods are owner-scoped. Scans run inside one atomic block each,
    and individual inserts use a savepoint so a lost race on the open-alert
    constraint only costs that one insert.
    """

    # ==========================================================================
    # Scans
    # ==========================================================================

    @classmethod
    def generate_stock_alerts(cls, owner: User) -> list[BusinessAlert]:
        """
        Refresh the owner's stock alerts.

        Returns:
            The open stock alerts after the scan, one per low product
        """
        now = timezone.now()
        with cls.atomic():
            resolved = BusinessAlert.objects.filter(
                owner=owner,
                type__in=STOCK_ALERT_TYPES,
                is_resolved=False,
            ).update(is_resolved=True, resolved_at=now, updated_at=now)

            low_products = Product.objects.filter(
                owner=owner,
                stock__lte=F("alert_threshold"),
            ).order_by("name")
            alerts = [
                cls._open_alert(owner, **cls._stock_alert_fields(product))
                for product in low_products
            ]

        cls.get_logger().info(
            "Stock scan for user %s: %d open, %d superseded",
            owner.pk,
            len(alerts),
            resolved,
            extra={"owner_id": owner.pk, "open": len(alerts), "resolved": resolved},
        )
        return alerts

    @classmethod
    def generate_overdue_invoice_alerts(
        cls,
        owner: User,
        today: datetime.date | None = None,
    ) -> list[BusinessAlert]:
        """
        Make sure every overdue invoice of the owner has exactly one open alert.

        An invoice is overdue when it is pending or partially paid and its
        due date is before ``today``.

        Returns:
            The open overdue alerts after the scan, one per overdue invoice
        """
        today = today or timezone.localdate()
        now = timezone.now()

        with cls.atomic():
            overdue = list(
                Invoice.objects.filter(
                    owner=owner,
                    status__in=UNPAID_STATUSES,
                    due_date__lt=today,
                )
                .select_related("client")
                .order_by("due_date", "number")
            )
            overdue_ids = [invoice.id for invoice in overdue]

            open_alerts = BusinessAlert.objects.filter(
                owner=owner,
                type=AlertType.OVERDUE_INVOICE,
                is_resolved=False,
            )
            # Paid, cancelled, deleted or rescheduled invoices
            resolved = open_alerts.exclude(
                entity_type=AlertEntityType.INVOICE,
                entity_id__in=overdue_ids,
            ).update(is_resolved=True, resolved_at=now, updated_at=now)

            existing = {
                alert.entity_id: alert
                for alert in open_alerts.filter(
                    entity_type=AlertEntityType.INVOICE,
                    entity_id__in=overdue_ids,
                )
            }

            alerts = []
            for invoice in overdue:
                alert = existing.get(invoice.id)
                if alert is None:
                    alert = cls._open_alert(owner, **cls._overdue_alert_fields(invoice, today))
                alerts.append(alert)

        cls.get_logger().info(
            "Overdue scan for user %s: %d open, %d resolved",
            owner.pk,
            len(alerts),
            resolved,
            extra={"owner_id": owner.pk, "open": len(alerts), "resolved": resolved},
        )
        return alerts

    @classmethod
    def generate_all(cls, owner: User) -> dict[str, list[BusinessAlert]]:
        """Run both scans for one owner."""
        return {
            "stock": cls.generate_stock_alerts(owner),
            "overdue_invoices": cls.generate_overdue_invoice_alerts(owner),
        }

    @staticmethod
    def _stock_alert_fields(product: Product) -> dict[str, Any]:
        stock = product.stock
        threshold = product.alert_threshold

        if stock == 0:
            alert_type = AlertType.CRITICAL_STOCK
            severity = AlertSeverity.CRITICAL
            title = "Out of stock"
            message = f'Product "{product.name}" is out of stock.'
        else:
            alert_type = AlertType.LOW_STOCK
            severity = AlertSeverity.HIGH if stock * 2 <= threshold else AlertSeverity.MEDIUM
            title = "Low stock"
            message = f'Product "{product.name}" is low on stock: {stock} unit(s) left.'

        return {
            "type": alert_type,
            "severity": severity,
            "title": title,
            "message": message,
            "entity_type": AlertEntityType.PRODUCT,
            "entity_id": product.id,
            "metadata": {
                "product_name": product.name,
                "current_stock": stock,
                "alert_threshold": threshold,
            },
        }

    @staticmethod
    def _overdue_alert_fields(invoice: Invoice, today: datetime.date) -> dict[str, Any]:
        days = invoice.days_past_due(today)
        if days > 30:
            severity = AlertSeverity.CRITICAL
        elif days > 7:
            severity = AlertSeverity.HIGH
        else:
            severity = AlertSeverity.MEDIUM

        client_name = invoice.client.name if invoice.client_id else "Unknown client"
        return {
            "type": AlertType.OVERDUE_INVOICE,
            "severity": severity,
            "title": "Overdue invoice",
            "message": f"Invoice {invoice.number} from {client_name} is {days} day(s) past due.",
            "entity_type": AlertEntityType.INVOICE,
            "entity_id": invoice.id,
            "metadata": {
                "invoice_number": invoice.number,
                "client_name": client_name,
                "amount": str(invoice.total_ttc),
                "due_date": invoice.due_date.isoformat(),
                "days_past_due": days,
            },
        }

    @classmethod
    def create_alert(
        cls,
        owner: User,
        type: str,
        title: str,
        message: str,
        severity: str = AlertSeverity.MEDIUM,
        entity_type: str = "",
        entity_id: uuid.UUID | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> tuple[BusinessAlert, bool]:
        """
        Open an alert by hand.

        An alert about a record is not duplicated: while an open alert of the
        same type exists for that record, it is returned instead.

        Returns:
            (alert, created) like QuerySet.get_or_create
        """
        fields = {
            "severity": severity,
            "title": title,
            "message": message,
            "metadata": metadata or {},
        }

        if entity_id is None:
            alert = BusinessAlert.objects.create(
                owner=owner, type=type, entity_type=entity_type, **fields
            )
            created = True
        else:
            alert = BusinessAlert.objects.filter(
                owner=owner,
                type=type,
                entity_type=entity_type,
                entity_id=entity_id,
                is_resolved=False,
            ).first()
            created = alert is None
            if created:
                alert = cls._open_alert(owner, type, entity_type, entity_id, **fields)

        if created:
            cls.get_logger().info(
                "Created %s alert %s for user %s",
                type,
                alert.id,
                owner.pk,
                extra={"owner_id": owner.pk, "alert_id": str(alert.id)},
            )
        return alert, created

    @classmethod
    def _open_alert(
        cls,
        owner: User,
        type: str,
        entity_type: str,
        entity_id: uuid.UUID,
        **fields: Any,
    ) -> BusinessAlert:
        """
        Insert an open alert, or return the one a concurrent scan just inserted.

        Raises:
            IntegrityError: If the insert failed for another reason
        """
        try:
            with transaction.atomic():
                return BusinessAlert.objects.create(
                    owner=owner,
                    type=type,
                    entity_type=entity_type,
                    entity_id=entity_id,
                    **fields,
                )
        except IntegrityError:
            existing = BusinessAlert.objects.filter(
                owner=owner,
                type=type,
                entity_type=entity_type,
                entity_id=entity_id,
                is_resolved=False,
            ).first()
            if existing is None:
                raise
            cls.get_logger().debug(
                "Open %s alert for %s %s already exists",
                type,
                entity_type,
                entity_id,
            )
            return existing

    # ==========================================================================
    # Inbox
    # ==========================================================================

    @classmethod
    def get_alert(cls, alert_id: uuid.UUID, owner: User) -> BusinessAlert:
        """
        Raises:
            AlertNotFound: If the alert does not exist for this owner
        """
        try:
            return BusinessAlert.objects.get(id=alert_id, owner=owner)
        except (BusinessAlert.DoesNotExist, DjangoValidationError):
            raise AlertNotFound(
                f"Alert {alert_id} not found",
                details={"alert_id": str(alert_id)},
            ) from None

    @classmethod
    def unread_count(cls, owner: User) -> int:
        """Open alerts the owner has not read yet."""
        return BusinessAlert.objects.filter(owner=owner, is_read=False, is_resolved=False).count()

    @classmethod
    def mark_read(cls, alert_id: uuid.UUID, owner: User) -> BusinessAlert:
        """Mark one alert read. Idempotent."""
        alert = cls.get_alert(alert_id, owner)
        if not alert.is_read:
            alert.is_read = True
            alert.save(update_fields=["is_read", "updated_at"])
        return alert

    @classmethod
    def mark_all_read(cls, owner: User) -> int:
        """
        Returns:
            Number of alerts that were unread
        """
        count = BusinessAlert.objects.filter(owner=owner, is_read=False).update(
            is_read=True, updated_at=timezone.now()
        )
        cls.get_logger().info("Marked %d alert(s) read for user %s", count, owner.pk)
        return count

    @classmethod
    def mark_resolved(cls, alert_id: uuid.UUID, owner: User) -> BusinessAlert:
        """Resolve an alert (it also counts as read). Idempotent."""
        alert = cls.get_alert(alert_id, owner)
        if not alert.is_resolved:
            alert.is_resolved = True
            alert.is_read = True
            alert.resolved_at = timezone.now()
            alert.save(update_fields=["is_resolved", "is_read", "resolved_at", "updated_at"])
        return alert

    @classmethod
    def delete_alert(cls, alert_id: uuid.UUID, owner: User) -> None:
        alert = cls.get_alert(alert_id, owner)
        alert.delete()

    @classmethod
    def cleanup_resolved(cls, days: int | None = None, owner: User | None = None) -> int:
        """
        Delete resolved alerts older than ``days``.

        Args:
            days: Retention window, defaults to ALERT_RESOLVED_RETENTION_DAYS
            owner: Limit the cleanup to one owner (all owners when None)

        Returns:
            Number of alerts deleted
        """
        if days is None:
            days = settings.ALERT_RESOLVED_RETENTION_DAYS
        cutoff = timezone.now() - datetime.timedelta(days=days)

        queryset = BusinessAlert.objects.filter(is_resolved=True).filter(
            Q(resolved_at__lt=cutoff) | Q(resolved_at__isnull=True, updated_at__lt=cutoff)
        )
        if owner is not None:
            queryset = queryset.filter(owner=owner)

        deleted, _ = queryset.delete()
        cls.get_logger().info(
            "Deleted %d resolved alert(s) older than %d day(s)",
            deleted,
            days,
            extra={"deleted": deleted, "days": days},
        )
        return deleted
