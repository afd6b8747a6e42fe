import django_filters as filters

from alerts.models import AlertSeverity, AlertType, BusinessAlert


class BusinessAlertFilter(filters.FilterSet):
    """
    Inbox filters.

    ?unread=true      only alerts not read yet
    ?resolved=false   only open alerts
    ?type=low_stock&severity=high
    """

    unread = filters.BooleanFilter(field_name="is_read", exclude=True)
    resolved = filters.BooleanFilter(field_name="is_resolved")
    type = filters.ChoiceFilter(choices=AlertType.choices)
    severity = filters.ChoiceFilter(choices=AlertSeverity.choices)

    class Meta:
        model = BusinessAlert
        fields = ["unread", "resolved", "type", "severity"]
