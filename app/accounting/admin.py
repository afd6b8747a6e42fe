"""
Django admin for accounting models.

Key features:
- ImprestTransaction is read-only (no add, change or delete)
- Fund balances and expense statuses are shown but not editable, since
  they may only change through the recorder and the approval workflow
"""

from django.contrib import admin

from accounting.models import Expense, ExpenseCategory, ImprestFund, ImprestTransaction


class ImprestTransactionInline(admin.TabularInline):
    model = ImprestTransaction
    fields = ["sequence", "reference", "type", "amount", "balance_after", "expense", "created_at"]
    readonly_fields = fields
    ordering = ["sequence"]
    extra = 0
    can_delete = False
    show_change_link = True

    def has_add_permission(self, request, obj=None) -> bool:
        return False


@admin.register(ImprestFund)
class ImprestFundAdmin(admin.ModelAdmin):
    list_display = [
        "reference",
        "account_holder",
        "owner",
        "initial_amount",
        "current_balance",
        "status",
        "created_at",
    ]
    list_filter = ["status"]
    search_fields = ["reference", "account_holder", "owner__email"]
    readonly_fields = [
        "id",
        "reference",
        "initial_amount",
        "current_balance",
        "status",
        "closed_at",
        "created_at",
        "updated_at",
    ]
    raw_id_fields = ["owner"]
    inlines = [ImprestTransactionInline]

    def has_add_permission(self, request) -> bool:
        # Funds are opened through FundService so the reference and balance are set
        return False


@admin.register(ImprestTransaction)
class ImprestTransactionAdmin(admin.ModelAdmin):
    """Ledger rows are append-only, so the admin only lists them."""

    list_display = ["reference", "fund", "sequence", "type", "amount", "balance_after", "created_at"]
    list_filter = ["type"]
    search_fields = ["reference", "fund__reference", "description"]
    ordering = ["-created_at"]

    def has_add_permission(self, request) -> bool:
        return False

    def has_change_permission(self, request, obj=None) -> bool:
        return False

    def has_delete_permission(self, request, obj=None) -> bool:
        return False


@admin.register(ExpenseCategory)
class ExpenseCategoryAdmin(admin.ModelAdmin):
    list_display = ["name", "owner", "is_major", "created_at"]
    list_filter = ["is_major"]
    search_fields = ["name", "owner__email"]
    raw_id_fields = ["owner"]


@admin.register(Expense)
class ExpenseAdmin(admin.ModelAdmin):
    list_display = ["reference", "description", "amount", "status", "fund", "expense_date", "owner"]
    list_filter = ["status", "payment_method"]
    search_fields = ["reference", "description", "owner__email"]
    date_hierarchy = "expense_date"
    readonly_fields = [
        "id",
        "reference",
        "status",
        "approved_by",
        "approved_at",
        "rejected_at",
        "created_at",
        "updated_at",
    ]
    raw_id_fields = ["owner", "category", "fund"]

    def has_add_permission(self, request) -> bool:
        return False

    def get_readonly_fields(self, request, obj=None):
        readonly = list(super().get_readonly_fields(request, obj))
        if obj is not None and not obj.is_pending:
            # Amount and fund are bound to the ledger once the expense leaves pending
            readonly += ["amount", "fund"]
        return readonly
