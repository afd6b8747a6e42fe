"""
Tests for AlertService.

Covers the stock and overdue-invoice scans (deduplication, severity,
resolution) and the inbox operations.
"""

import datetime
from decimal import Decimal

import pytest
from django.db import IntegrityError, transaction
from freezegun import freeze_time

from alerts.exceptions import AlertNotFound
from alerts.models import AlertEntityType, AlertSeverity, AlertType, BusinessAlert
from alerts.services import AlertService
from alerts.tests.factories import BusinessAlertFactory
from sales.models import InvoiceStatus
from sales.tests.factories import InvoiceFactory, ProductFactory

TODAY = datetime.date(2024, 6, 15)


def _open(owner, **filters):
    return BusinessAlert.objects.filter(owner=owner, is_resolved=False, **filters)


# =============================================================================
# Stock Scan
# =============================================================================


class TestGenerateStockAlerts:
    def test_two_low_products_twice_keeps_two_open_alerts(self, owner):
        """Should resolve and recreate rather than accumulate on a rescan."""
        ProductFactory(owner=owner, name="Ink", stock=3, alert_threshold=10)
        ProductFactory(owner=owner, name="Toner", stock=0, alert_threshold=5)

        first = AlertService.generate_stock_alerts(owner)
        second = AlertService.generate_stock_alerts(owner)

        assert len(first) == 2
        assert len(second) == 2
        assert _open(owner).count() == 2
        assert BusinessAlert.objects.filter(owner=owner, is_resolved=True).count() == 2
        assert {alert.id for alert in first}.isdisjoint({alert.id for alert in second})

    def test_products_above_threshold_are_ignored(self, owner):
        ProductFactory(owner=owner, stock=11, alert_threshold=10)

        assert AlertService.generate_stock_alerts(owner) == []
        assert not BusinessAlert.objects.exists()

    @pytest.mark.parametrize(
        ("stock", "threshold", "alert_type", "severity"),
        [
            (0, 10, AlertType.CRITICAL_STOCK, AlertSeverity.CRITICAL),
            (5, 10, AlertType.LOW_STOCK, AlertSeverity.HIGH),
            (1, 10, AlertType.LOW_STOCK, AlertSeverity.HIGH),
            (6, 10, AlertType.LOW_STOCK, AlertSeverity.MEDIUM),
            (10, 10, AlertType.LOW_STOCK, AlertSeverity.MEDIUM),
        ],
    )
    def test_severity(self, owner, stock, threshold, alert_type, severity):
        ProductFactory(owner=owner, stock=stock, alert_threshold=threshold)

        [alert] = AlertService.generate_stock_alerts(owner)

        assert alert.type == alert_type
        assert alert.severity == severity

    def test_alert_links_product_and_records_metadata(self, owner):
        product = ProductFactory(owner=owner, name="Ink", stock=2, alert_threshold=10)

        [alert] = AlertService.generate_stock_alerts(owner)

        assert alert.entity_type == AlertEntityType.PRODUCT
        assert alert.entity_id == product.id
        assert alert.metadata == {"product_name": "Ink", "current_stock": 2, "alert_threshold": 10}
        assert "Ink" in alert.message

    def test_restocked_product_alert_is_resolved(self, owner):
        product = ProductFactory(owner=owner, stock=2, alert_threshold=10)
        AlertService.generate_stock_alerts(owner)

        product.stock = 100
        product.save()
        AlertService.generate_stock_alerts(owner)

        assert not _open(owner).exists()
        assert BusinessAlert.objects.get(owner=owner).resolved_at is not None

    def test_other_owners_are_untouched(self, owner, other_owner):
        ProductFactory(owner=owner, stock=0)
        theirs = BusinessAlertFactory(owner=other_owner, type=AlertType.LOW_STOCK)

        AlertService.generate_stock_alerts(owner)

        assert BusinessAlert.objects.get(id=theirs.id).is_resolved is False
        assert not BusinessAlert.objects.filter(owner=other_owner).exclude(id=theirs.id).exists()


# =============================================================================
# Overdue Invoice Scan
# =============================================================================


class TestGenerateOverdueInvoiceAlerts:
    def test_overdue_invoice_twice_keeps_one_alert(self, owner, sales_client):
        """Should keep the existing open alert instead of inserting another."""
        invoice = InvoiceFactory(owner=owner, client=sales_client, due_date=datetime.date(2024, 6, 1))

        [first] = AlertService.generate_overdue_invoice_alerts(owner, today=TODAY)
        [second] = AlertService.generate_overdue_invoice_alerts(owner, today=TODAY)

        assert first.id == second.id
        assert _open(owner, entity_id=invoice.id).count() == 1
        assert BusinessAlert.objects.filter(owner=owner).count() == 1

    @pytest.mark.parametrize(
        ("due_date", "severity"),
        [
            (datetime.date(2024, 6, 14), AlertSeverity.MEDIUM),
            (datetime.date(2024, 6, 8), AlertSeverity.MEDIUM),
            (datetime.date(2024, 6, 7), AlertSeverity.HIGH),
            (datetime.date(2024, 5, 16), AlertSeverity.HIGH),
            (datetime.date(2024, 5, 15), AlertSeverity.CRITICAL),
        ],
    )
    def test_severity_by_days_late(self, owner, sales_client, due_date, severity):
        InvoiceFactory(owner=owner, client=sales_client, due_date=due_date)

        [alert] = AlertService.generate_overdue_invoice_alerts(owner, today=TODAY)

        assert alert.severity == severity

    def test_severity_does_not_change_on_rescan(self, owner, sales_client):
        """Should keep the original alert even once the invoice is later."""
        InvoiceFactory(owner=owner, client=sales_client, due_date=datetime.date(2024, 6, 10))
        AlertService.generate_overdue_invoice_alerts(owner, today=TODAY)

        [alert] = AlertService.generate_overdue_invoice_alerts(
            owner, today=TODAY + datetime.timedelta(days=60)
        )

        assert alert.severity == AlertSeverity.MEDIUM

    @pytest.mark.parametrize(
        ("status", "due_date"),
        [
            (InvoiceStatus.PAID, datetime.date(2024, 1, 1)),
            (InvoiceStatus.CANCELLED, datetime.date(2024, 1, 1)),
            (InvoiceStatus.PENDING, TODAY),
            (InvoiceStatus.PENDING, None),
        ],
    )
    def test_non_overdue_invoices_are_ignored(self, owner, sales_client, status, due_date):
        InvoiceFactory(owner=owner, client=sales_client, status=status, due_date=due_date)

        assert AlertService.generate_overdue_invoice_alerts(owner, today=TODAY) == []

    def test_partially_paid_counts_as_unpaid(self, owner, sales_client):
        InvoiceFactory(
            owner=owner,
            client=sales_client,
            status=InvoiceStatus.PARTIALLY_PAID,
            due_date=datetime.date(2024, 6, 1),
        )

        assert len(AlertService.generate_overdue_invoice_alerts(owner, today=TODAY)) == 1

    def test_metadata(self, owner, sales_client):
        InvoiceFactory(
            owner=owner,
            client=sales_client,
            number="F-2024-042",
            total_ht=Decimal("100.00"),
            tax_rate=Decimal("18.00"),
            due_date=datetime.date(2024, 6, 5),
        )

        [alert] = AlertService.generate_overdue_invoice_alerts(owner, today=TODAY)

        assert alert.metadata == {
            "invoice_number": "F-2024-042",
            "client_name": "Acme SARL",
            "amount": "118.00",
            "due_date": "2024-06-05",
            "days_past_due": 10,
        }

    def test_paid_invoice_alert_is_resolved(self, owner, sales_client):
        invoice = InvoiceFactory(owner=owner, client=sales_client, due_date=datetime.date(2024, 6, 1))
        AlertService.generate_overdue_invoice_alerts(owner, today=TODAY)

        invoice.status = InvoiceStatus.PAID
        invoice.save()
        result = AlertService.generate_overdue_invoice_alerts(owner, today=TODAY)

        assert result == []
        assert not _open(owner).exists()

    def test_scan_leaves_stock_alerts_alone(self, owner):
        stock_alert = BusinessAlertFactory(owner=owner, type=AlertType.LOW_STOCK)

        AlertService.generate_overdue_invoice_alerts(owner, today=TODAY)

        assert BusinessAlert.objects.get(id=stock_alert.id).is_resolved is False

    @freeze_time("2024-06-15 12:00:00")
    def test_defaults_to_today(self, owner, sales_client):
        InvoiceFactory(owner=owner, client=sales_client, due_date=datetime.date(2024, 6, 14))

        [alert] = AlertService.generate_overdue_invoice_alerts(owner)

        assert alert.metadata["days_past_due"] == 1


class TestGenerateAll:
    def test_runs_both_scans(self, owner, sales_client):
        ProductFactory(owner=owner, stock=0)
        InvoiceFactory(owner=owner, client=sales_client, due_date=datetime.date(2000, 1, 1))

        results = AlertService.generate_all(owner)

        assert len(results["stock"]) == 1
        assert len(results["overdue_invoices"]) == 1


# =============================================================================
# Deduplication
# =============================================================================


class TestOpenAlertUniqueness:
    def test_database_rejects_second_open_alert(self, owner):
        alert = BusinessAlertFactory(owner=owner)

        with pytest.raises(IntegrityError), transaction.atomic():
            BusinessAlertFactory(
                owner=owner, type=alert.type, entity_type=alert.entity_type, entity_id=alert.entity_id
            )

    def test_resolved_alert_does_not_block_new_one(self, owner):
        alert = BusinessAlertFactory(owner=owner, is_resolved=True)

        BusinessAlertFactory(
            owner=owner, type=alert.type, entity_type=alert.entity_type, entity_id=alert.entity_id
        )

        assert BusinessAlert.objects.filter(entity_id=alert.entity_id).count() == 2

    def test_open_alert_returns_existing_on_conflict(self, owner):
        """Should hand back the concurrent scan's alert instead of failing."""
        existing = BusinessAlertFactory(
            owner=owner,
            type=AlertType.OVERDUE_INVOICE,
            entity_type=AlertEntityType.INVOICE,
        )

        alert = AlertService._open_alert(
            owner,
            type=AlertType.OVERDUE_INVOICE,
            entity_type=AlertEntityType.INVOICE,
            entity_id=existing.entity_id,
            severity=AlertSeverity.HIGH,
            title="Overdue invoice",
            message="Late",
        )

        assert alert.id == existing.id
        assert BusinessAlert.objects.count() == 1


class TestCreateAlert:
    """Tests for AlertService.create_alert()."""

    def test_creates_alert_without_entity(self, owner):
        alert, created = AlertService.create_alert(
            owner,
            type=AlertType.PAYMENT_DUE,
            title="Rent",
            message="Rent is due on Friday.",
        )

        assert created is True
        assert alert.owner == owner
        assert alert.severity == AlertSeverity.MEDIUM
        assert alert.entity_id is None
        assert alert.metadata == {}

    def test_entity_less_alerts_are_not_deduplicated(self, owner):
        for _ in range(2):
            AlertService.create_alert(
                owner, type=AlertType.PAYMENT_DUE, title="Rent", message="Due"
            )

        assert _open(owner, type=AlertType.PAYMENT_DUE).count() == 2

    def test_returns_open_alert_for_same_entity(self, owner):
        """Should hand back the open alert instead of adding a second one."""
        existing = BusinessAlertFactory(owner=owner, type=AlertType.LOW_STOCK)

        alert, created = AlertService.create_alert(
            owner,
            type=AlertType.LOW_STOCK,
            title="Low stock",
            message="Again",
            severity=AlertSeverity.HIGH,
            entity_type=AlertEntityType.PRODUCT,
            entity_id=existing.entity_id,
        )

        assert created is False
        assert alert.id == existing.id
        assert alert.severity == AlertSeverity.MEDIUM
        assert BusinessAlert.objects.count() == 1

    def test_resolved_alert_does_not_block_new_one(self, owner):
        resolved = BusinessAlertFactory(owner=owner, is_resolved=True)

        alert, created = AlertService.create_alert(
            owner,
            type=resolved.type,
            title="Low stock",
            message="Low again",
            entity_type=resolved.entity_type,
            entity_id=resolved.entity_id,
            metadata={"current_stock": 2},
        )

        assert created is True
        assert alert.id != resolved.id
        assert alert.metadata == {"current_stock": 2}

    def test_other_owner_alert_is_ignored(self, owner, other_owner):
        theirs = BusinessAlertFactory(owner=other_owner)

        alert, created = AlertService.create_alert(
            owner,
            type=theirs.type,
            title="Low stock",
            message="Mine",
            entity_type=theirs.entity_type,
            entity_id=theirs.entity_id,
        )

        assert created is True
        assert alert.owner == owner


# =============================================================================
# Inbox
# =============================================================================


class TestInbox:
    def test_unread_count_ignores_read_and_resolved(self, owner, other_owner):
        BusinessAlertFactory.create_batch(2, owner=owner)
        BusinessAlertFactory(owner=owner, is_read=True)
        BusinessAlertFactory(owner=owner, is_resolved=True)
        BusinessAlertFactory(owner=other_owner)

        assert AlertService.unread_count(owner) == 2

    def test_mark_read_is_idempotent(self, owner):
        alert = BusinessAlertFactory(owner=owner)

        AlertService.mark_read(alert.id, owner=owner)
        AlertService.mark_read(alert.id, owner=owner)

        assert BusinessAlert.objects.get(id=alert.id).is_read is True

    def test_mark_all_read_returns_count(self, owner):
        BusinessAlertFactory.create_batch(3, owner=owner)
        BusinessAlertFactory(owner=owner, is_read=True)

        assert AlertService.mark_all_read(owner) == 3
        assert AlertService.mark_all_read(owner) == 0

    def test_mark_resolved_also_marks_read(self, owner):
        alert = BusinessAlertFactory(owner=owner)

        resolved = AlertService.mark_resolved(alert.id, owner=owner)

        assert resolved.is_resolved is True
        assert resolved.is_read is True
        assert resolved.resolved_at is not None

    def test_other_owner_alert_is_not_found(self, owner, other_owner):
        alert = BusinessAlertFactory(owner=other_owner)

        with pytest.raises(AlertNotFound):
            AlertService.mark_read(alert.id, owner=owner)

    def test_malformed_id_is_not_found(self, owner):
        with pytest.raises(AlertNotFound):
            AlertService.get_alert("not-a-uuid", owner=owner)

    def test_delete_alert(self, owner):
        alert = BusinessAlertFactory(owner=owner)

        AlertService.delete_alert(alert.id, owner=owner)

        assert not BusinessAlert.objects.filter(id=alert.id).exists()


class TestCleanupResolved:
    def test_deletes_only_old_resolved_alerts(self, owner):
        with freeze_time("2024-01-01"):
            old = BusinessAlertFactory(owner=owner)
            AlertService.mark_resolved(old.id, owner=owner)
            old_open = BusinessAlertFactory(owner=owner)
        with freeze_time("2024-01-25"):
            recent = BusinessAlertFactory(owner=owner)
            AlertService.mark_resolved(recent.id, owner=owner)

        with freeze_time("2024-02-05"):
            deleted = AlertService.cleanup_resolved(days=30)

        assert deleted == 1
        assert not BusinessAlert.objects.filter(id=old.id).exists()
        assert BusinessAlert.objects.filter(id__in=[old_open.id, recent.id]).count() == 2

    def test_uses_retention_setting(self, owner, settings):
        settings.ALERT_RESOLVED_RETENTION_DAYS = 7
        with freeze_time("2024-01-01"):
            alert = BusinessAlertFactory(owner=owner)
            AlertService.mark_resolved(alert.id, owner=owner)

        with freeze_time("2024-01-09"):
            assert AlertService.cleanup_resolved() == 1

    def test_limited_to_owner(self, owner, other_owner):
        with freeze_time("2024-01-01"):
            mine = BusinessAlertFactory(owner=owner, is_resolved=True)
            theirs = BusinessAlertFactory(owner=other_owner, is_resolved=True)

        with freeze_time("2024-03-01"):
            AlertService.cleanup_resolved(days=30, owner=owner)

        assert not BusinessAlert.objects.filter(id=mine.id).exists()
        assert BusinessAlert.objects.filter(id=theirs.id).exists()
