"""
DRF serializers for business alerts.
"""

from rest_framework import serializers

from alerts.models import AlertEntityType, AlertSeverity, AlertType, BusinessAlert


class BusinessAlertSerializer(serializers.ModelSerializer):
    class Meta:
        model = BusinessAlert
        fields = [
            "id",
            "type",
            "severity",
            "title",
            "message",
            "entity_type",
            "entity_id",
            "metadata",
            "is_read",
            "is_resolved",
            "resolved_at",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class UnreadCountSerializer(serializers.Serializer):
    unread_count = serializers.IntegerField()


class MarkAllReadSerializer(serializers.Serializer):
    marked_read = serializers.IntegerField()


class GenerateAlertsSerializer(serializers.Serializer):
    stock = BusinessAlertSerializer(many=True)
    overdue_invoices = BusinessAlertSerializer(many=True)


class ScanResultSerializer(serializers.Serializer):
    count = serializers.IntegerField()
    alerts = BusinessAlertSerializer(many=True)


class AlertCreateSerializer(serializers.Serializer):
    """Input for an alert opened by hand."""

    type = serializers.ChoiceField(choices=AlertType.choices)
    severity = serializers.ChoiceField(choices=AlertSeverity.choices, default=AlertSeverity.MEDIUM)
    title = serializers.CharField(max_length=255)
    message = serializers.CharField()
    entity_type = serializers.ChoiceField(
        choices=AlertEntityType.choices, required=False, allow_blank=True, default=""
    )
    entity_id = serializers.UUIDField(required=False, allow_null=True, default=None)
    metadata = serializers.DictField(required=False, default=dict)

    def validate(self, attrs):
        if bool(attrs.get("entity_type")) != (attrs.get("entity_id") is not None):
            raise serializers.ValidationError("entity_type and entity_id must be given together.")
        return attrs


class CleanupQuerySerializer(serializers.Serializer):
    days = serializers.IntegerField(min_value=1, required=False)


class CleanupResultSerializer(serializers.Serializer):
    deleted = serializers.IntegerField()
