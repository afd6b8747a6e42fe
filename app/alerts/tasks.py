"""
Celery tasks for business alerts.

Tasks:
    scan_business_alerts: Fan out one scan_owner_alerts per active owner (hourly)
    scan_owner_alerts: Run both scans for one owner
    cleanup_resolved_alerts: Delete resolved alerts past retention (daily)

Schedules are installed by migration 0002 (django-celery-beat
DatabaseScheduler), so they can be retimed from the admin.

Usage:
    from alerts.tasks import scan_owner_alerts

    scan_owner_alerts.delay(owner_id=user.pk)
"""

from __future__ import annotations

import logging

from celery import shared_task
from django.contrib.auth import get_user_model
from django.db import OperationalError
from django.db.models import Q

from alerts.services import AlertService

logger = logging.getLogger(__name__)


@shared_task
def scan_business_alerts() -> int:
    """
    Queue an alert scan for every owner that has products or invoices.

    Returns:
        Number of owners queued
    """
    User = get_user_model()
    owner_ids = list(
        User.objects.filter(
            Q(products__isnull=False) | Q(invoices__isnull=False),
            is_active=True,
        )
        .distinct()
        .values_list("pk", flat=True)
    )

    for owner_id in owner_ids:
        scan_owner_alerts.delay(owner_id)

    logger.info("Queued alert scans for %d owner(s)", len(owner_ids))
    return len(owner_ids)


@shared_task(
    bind=True,
    autoretry_for=(OperationalError,),
    retry_backoff=True,
    retry_backoff_max=300,
    retry_kwargs={"max_retries": 3},
)
def scan_owner_alerts(self, owner_id: int) -> dict:
    """
    Run the stock and overdue-invoice scans for one owner.

    Returns:
        {"owner_id": ..., "stock": n, "overdue_invoices": n}, or
        {"owner_id": ..., "skipped": True} if the user no longer exists
    """
    User = get_user_model()
    try:
        owner = User.objects.get(pk=owner_id)
    except User.DoesNotExist:
        logger.warning("Skipping alert scan for missing user %s", owner_id)
        return {"owner_id": owner_id, "skipped": True}

    results = AlertService.generate_all(owner)
    return {
        "owner_id": owner_id,
        "stock": len(results["stock"]),
        "overdue_invoices": len(results["overdue_invoices"]),
    }


@shared_task
def cleanup_resolved_alerts(days: int | None = None) -> int:
    """
    Delete resolved alerts older than the retention window.

    Returns:
        Number of alerts deleted
    """
    return AlertService.cleanup_resolved(days=days)
