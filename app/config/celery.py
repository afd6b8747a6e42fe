"""
Celery configuration for bizledger.

Celery runs the periodic alert scans and the cleanup of resolved alerts.
The ledger itself never goes through the queue: approvals and manual
transactions complete inside the request.

Redis is both the message broker and the result backend. Tasks are
auto-discovered from the installed apps, and beat reads its schedule from
the database (django-celery-beat).

Usage:
    celery -A config worker -l info
    celery -A config beat -l info

For more information, see:
https://docs.celeryq.dev/en/stable/django/first-steps-with-django.html
"""

import os

from celery import Celery

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

app = Celery("bizledger")

# All Celery settings are prefixed with CELERY_ in settings.py
app.config_from_object("django.conf:settings", namespace="CELERY")

# Picks up alerts/tasks.py
app.autodiscover_tasks()
