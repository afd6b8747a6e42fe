"""
Add Celery Beat schedules for business alerts.

- Hourly: scan every owner's stock levels and overdue invoices
- Daily at 3 AM: delete resolved alerts past the retention window
"""

from django.db import migrations

TASK_NAMES = [
    "Alerts: Scan Business Alerts",
    "Alerts: Cleanup Resolved Alerts",
]


def create_periodic_tasks(apps, schema_editor):
    """Create periodic tasks for alert scans and cleanup."""
    IntervalSchedule = apps.get_model("django_celery_beat", "IntervalSchedule")
    CrontabSchedule = apps.get_model("django_celery_beat", "CrontabSchedule")
    PeriodicTask = apps.get_model("django_celery_beat", "PeriodicTask")

    every_hour, _ = IntervalSchedule.objects.get_or_create(
        every=1,
        period="hours",
    )

    daily_3am, _ = CrontabSchedule.objects.get_or_create(
        minute="0",
        hour="3",
        day_of_week="*",
        day_of_month="*",
        month_of_year="*",
    )

    PeriodicTask.objects.get_or_create(
        name="Alerts: Scan Business Alerts",
        defaults={
            "task": "alerts.tasks.scan_business_alerts",
            "interval": every_hour,
            "enabled": True,
            "description": (
                "Queues a stock and overdue-invoice scan for every owner "
                "with products or invoices."
            ),
        },
    )

    PeriodicTask.objects.get_or_create(
        name="Alerts: Cleanup Resolved Alerts",
        defaults={
            "task": "alerts.tasks.cleanup_resolved_alerts",
            "crontab": daily_3am,
            "enabled": True,
            "description": (
                "Deletes resolved alerts older than ALERT_RESOLVED_RETENTION_DAYS "
                "(default 30 days)."
            ),
        },
    )


def remove_periodic_tasks(apps, schema_editor):
    """Remove alert periodic tasks on migration rollback."""
    PeriodicTask = apps.get_model("django_celery_beat", "PeriodicTask")
    PeriodicTask.objects.filter(name__in=TASK_NAMES).delete()


class Migration(migrations.Migration):
    dependencies = [
        ("alerts", "0001_initial"),
        ("django_celery_beat", "0019_alter_periodictasks_options"),
    ]

    operations = [
        migrations.RunPython(create_periodic_tasks, remove_periodic_tasks),
    ]
