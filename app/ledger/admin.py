"""
Django admin configuration for the ledger.

Entries are append-only: balances move only through LedgerService, so the
admin is a read-only audit view over every entry, reversed ones included.
"""

from django.contrib import admin

from ledger.models import LedgerEntry


@admin.register(LedgerEntry)
class LedgerEntryAdmin(admin.ModelAdmin):
    """Read-only admin for LedgerEntry."""

    list_display = [
        "id",
        "shop",
        "customer",
        "entry_type",
        "amount",
        "balance_after",
        "occurred_at",
        "is_deleted",
    ]
    list_filter = ["entry_type", "payment_method", "is_deleted"]
    search_fields = ["customer__name", "shop__email", "bill_number", "description"]
    raw_id_fields = ["shop", "customer", "created_by"]
    date_hierarchy = "occurred_at"
    ordering = ["-occurred_at"]

    def get_queryset(self, request):
        """Show all entries including reversed ones in admin."""
        return LedgerEntry.all_objects.select_related("customer", "shop")

    def get_readonly_fields(self, request, obj=None):
        return [field.name for field in LedgerEntry._meta.fields]

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
