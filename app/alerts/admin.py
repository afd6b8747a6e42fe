from django.contrib import admin

from alerts.models import BusinessAlert


@admin.register(BusinessAlert)
class BusinessAlertAdmin(admin.ModelAdmin):
    list_display = ["title", "type", "severity", "owner", "is_read", "is_resolved", "created_at"]
    list_filter = ["type", "severity", "is_read", "is_resolved"]
    search_fields = ["title", "message", "owner__email"]
    readonly_fields = ["entity_type", "entity_id", "metadata", "resolved_at", "created_at", "updated_at"]
    raw_id_fields = ["owner"]
