import django_filters as filters
from django.db.models import F

from sales.models import Invoice, Product


class InvoiceFilter(filters.FilterSet):
    due_after = filters.DateFilter(field_name="due_date", lookup_expr="gte")
    due_before = filters.DateFilter(field_name="due_date", lookup_expr="lte")

    class Meta:
        model = Invoice
        fields = ["status", "client", "due_after", "due_before"]


class ProductFilter(filters.FilterSet):
    low_stock = filters.BooleanFilter(method="filter_low_stock")

    class Meta:
        model = Product
        fields = ["category", "low_stock"]

    def filter_low_stock(self, queryset, name, value):
        if value:
            return queryset.filter(stock__lte=F("alert_threshold"))
        return queryset.filter(stock__gt=F("alert_threshold"))
