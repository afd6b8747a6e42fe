from django.contrib import admin

from sales.models import Client, Invoice, Product


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ["name", "owner", "price", "stock", "alert_threshold", "category"]
    list_filter = ["category"]
    search_fields = ["name", "owner__email"]
    raw_id_fields = ["owner"]


@admin.register(Client)
class ClientAdmin(admin.ModelAdmin):
    list_display = ["name", "company", "email", "phone", "owner"]
    search_fields = ["name", "company", "email", "owner__email"]
    raw_id_fields = ["owner"]


@admin.register(Invoice)
class InvoiceAdmin(admin.ModelAdmin):
    list_display = ["number", "client", "owner", "status", "total_ttc", "due_date"]
    list_filter = ["status"]
    search_fields = ["number", "client__name", "owner__email"]
    readonly_fields = ["total_tax", "total_ttc", "created_at", "updated_at"]
    raw_id_fields = ["owner", "client"]
