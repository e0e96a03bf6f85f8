"""Django admin configuration for customers app."""

from django.contrib import admin

from customers.models import BALANCE_FIELDS, CustomerAccount


@admin.register(CustomerAccount)
class CustomerAccountAdmin(admin.ModelAdmin):
    """
    Admin configuration for CustomerAccount model.

    Balance columns are read-only; they change only through ledger entries.
    """

    list_display = [
        "id",
        "name",
        "phone",
        "shop",
        "balance",
        "total_credit",
        "total_paid",
        "is_active",
        "updated_at",
    ]
    list_filter = ["is_active"]
    search_fields = ["name", "phone", "shop__email"]
    readonly_fields = ["id", *BALANCE_FIELDS, "created_at", "updated_at"]
    raw_id_fields = ["shop"]
    ordering = ["-updated_at"]

    def has_delete_permission(self, request, obj=None):
        # Accounts are referenced by ledger entries (PROTECT)
        return False
