"""
Infrastructure views that sit outside the business domain.
"""

import logging

from django.core.cache import cache
from django.db import DatabaseError, connection
from django.http import JsonResponse

logger = logging.getLogger(__name__)


def health_check(request):
    """
    Report database and cache connectivity for probes and load balancers.

    The database is required: if it cannot answer SELECT 1 the endpoint
    returns 503. A broken cache only shows up as "disconnected" because the
    ledger works without it.

    Example Response:
        {"status": "healthy", "database": "connected", "cache": "connected"}
    """
    payload = {"status": "healthy", "database": "unknown", "cache": "unknown"}
    status_code = 200

    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
            cursor.fetchone()
        payload["database"] = "connected"
    except DatabaseError:
        logger.exception("Health check could not reach the database")
        payload["database"] = "disconnected"
        payload["status"] = "unhealthy"
        status_code = 503

    try:
        cache.set("health_check", "ok", timeout=1)
        payload["cache"] = "connected" if cache.get("health_check") == "ok" else "disconnected"
    except Exception:  # noqa: BLE001 - any backend error means the cache is down
        logger.warning("Health check could not reach the cache", exc_info=True)
        payload["cache"] = "disconnected"

    return JsonResponse(payload, status=status_code)
