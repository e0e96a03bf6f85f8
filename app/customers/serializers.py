"""
Serializers for the customers API.

This module provides serializers for:
- CustomerAccountSerializer: Account representation (balance columns read-only)
- CustomerWriteSerializer: Profile fields for create and update
- CustomerDetailSerializer: Account plus its most recent entries
- CustomerListQuerySerializer: Listing query parameters
- CustomerStatsSerializer: Shop-wide balance statistics
"""

from __future__ import annotations

from rest_framework import serializers

from ledger.serializers import LedgerEntrySerializer

from .models import CustomerAccount, phone_validator
from .store import PROFILE_FIELDS, SORT_OPTIONS


class CustomerAccountSerializer(serializers.ModelSerializer):
    """Serializer for CustomerAccount responses."""

    is_over_limit = serializers.BooleanField(read_only=True)

    class Meta:
        model = CustomerAccount
        fields = [
            "id",
            "name",
            "phone",
            "email",
            "address",
            "notes",
            "balance",
            "total_credit",
            "total_paid",
            "credit_limit",
            "is_over_limit",
            "is_active",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class CustomerWriteSerializer(serializers.Serializer):
    """
    Profile fields accepted when registering or editing a customer.

    Balance columns are not part of this serializer; any balance values
    in the request body are ignored.
    """

    name = serializers.CharField(max_length=100)
    phone = serializers.CharField(
        max_length=10,
        required=False,
        allow_blank=True,
        allow_null=True,
        validators=[phone_validator],
        help_text="10-digit mobile number, unique per shop",
    )
    email = serializers.EmailField(required=False, allow_blank=True)
    address = serializers.CharField(max_length=255, required=False, allow_blank=True)
    notes = serializers.CharField(max_length=500, required=False, allow_blank=True)
    credit_limit = serializers.DecimalField(
        max_digits=14,
        decimal_places=2,
        min_value=0,
        required=False,
        allow_null=True,
    )

    def validate_name(self, value: str) -> str:
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Name cannot be blank.")
        return value

    def validate_phone(self, value: str | None) -> str | None:
        """Store a blank phone as NULL so it never collides with other blanks."""
        return value or None

    def to_profile(self) -> dict:
        """Validated data restricted to editable profile fields."""
        return {k: v for k, v in self.validated_data.items() if k in PROFILE_FIELDS}


class CustomerDetailSerializer(CustomerAccountSerializer):
    """Customer account with its latest live entries."""

    recent_entries = serializers.SerializerMethodField()

    class Meta(CustomerAccountSerializer.Meta):
        fields = [*CustomerAccountSerializer.Meta.fields, "recent_entries"]
        read_only_fields = fields

    def get_recent_entries(self, obj) -> list:
        entries = self.context.get("recent_entries", [])
        return LedgerEntrySerializer(entries, many=True).data


class CustomerListQuerySerializer(serializers.Serializer):
    """Query parameters for the customer listing."""

    search = serializers.CharField(required=False, allow_blank=True, help_text="Match on name or phone")
    has_balance = serializers.BooleanField(
        required=False,
        allow_null=True,
        default=None,
        help_text="true: balance > 0, false: balance <= 0",
    )
    sort = serializers.ChoiceField(choices=list(SORT_OPTIONS), required=False, default="recent")
    page = serializers.IntegerField(required=False, min_value=1, default=1)
    page_size = serializers.IntegerField(required=False, min_value=1)


class CustomerStatsSerializer(serializers.Serializer):
    """Balance statistics across a shop's active customers."""

    total_customers = serializers.IntegerField()
    total_receivable = serializers.DecimalField(max_digits=14, decimal_places=2)
    total_payable = serializers.DecimalField(max_digits=14, decimal_places=2)
    customers_with_balance = serializers.IntegerField()
