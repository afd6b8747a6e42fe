"""
DRF serializers for the sales app.

Owner-relative checks (invoice number uniqueness, client ownership) read
the requesting user from the serializer context.
"""

from __future__ import annotations

from decimal import Decimal

from rest_framework import serializers

from sales.models import TAX_RATES, Client, Invoice, Product


class ProductSerializer(serializers.ModelSerializer):
    price = serializers.DecimalField(max_digits=15, decimal_places=2, min_value=Decimal("0"))
    is_low_stock = serializers.BooleanField(read_only=True)

    class Meta:
        model = Product
        fields = [
            "id",
            "name",
            "description",
            "price",
            "stock",
            "alert_threshold",
            "category",
            "is_low_stock",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "created_at", "updated_at"]


class ClientSerializer(serializers.ModelSerializer):
    class Meta:
        model = Client
        fields = ["id", "name", "email", "phone", "address", "company", "created_at", "updated_at"]
        read_only_fields = ["id", "created_at", "updated_at"]


class InvoiceSerializer(serializers.ModelSerializer):
    """
    Invoice with computed totals.

    total_tax and total_ttc are read-only; they follow total_ht and tax_rate.
    """

    client = serializers.PrimaryKeyRelatedField(queryset=Client.objects.all())
    client_name = serializers.CharField(source="client.name", read_only=True)
    total_ht = serializers.DecimalField(max_digits=15, decimal_places=2, min_value=Decimal("0"))
    is_overdue = serializers.SerializerMethodField()

    class Meta:
        model = Invoice
        fields = [
            "id",
            "number",
            "client",
            "client_name",
            "status",
            "total_ht",
            "tax_rate",
            "total_tax",
            "total_ttc",
            "due_date",
            "is_overdue",
            "notes",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "total_tax", "total_ttc", "created_at", "updated_at"]

    def get_is_overdue(self, obj: Invoice) -> bool:
        return obj.is_overdue()

    def validate_client(self, value: Client) -> Client:
        if value.owner_id != self.context["request"].user.pk:
            # Same message as an unknown id
            raise serializers.ValidationError(f'Invalid pk "{value.pk}" - object does not exist.')
        return value

    def validate_tax_rate(self, value: Decimal) -> Decimal:
        if value not in TAX_RATES:
            allowed = ", ".join(str(rate) for rate in TAX_RATES)
            raise serializers.ValidationError(f"Tax rate must be one of: {allowed}.")
        return value

    def validate_number(self, value: str) -> str:
        owner = self.context["request"].user
        queryset = Invoice.objects.filter(owner=owner, number=value)
        if self.instance is not None:
            queryset = queryset.exclude(pk=self.instance.pk)
        if queryset.exists():
            raise serializers.ValidationError("An invoice with this number already exists.")
        return value
