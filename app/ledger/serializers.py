"""
Serializers for the ledger API.

This module provides serializers for:
- LedgerEntrySerializer: Read-only entry representation
- AccountBalanceSerializer: Balance columns of the affected customer
- EntryResultSerializer: Entry plus account after create/reverse
- CreateEntrySerializer: Request shape for recording an entry
- ReverseEntrySerializer: Request shape for reversing an entry
- EntryListQuerySerializer / SummaryQuerySerializer: Query parameters
- EntrySummarySerializer: Credit/payment totals

Amount validation (> 0, finite) is left to the ledger engine so that every
entry point reports it with the same INVALID_AMOUNT error code.
"""

from __future__ import annotations

from rest_framework import serializers

from customers.models import CustomerAccount

from .models import EntryType, LedgerEntry, PaymentMethod


class LedgerEntrySerializer(serializers.ModelSerializer):
    """
    Read-only serializer for LedgerEntry.

    Includes the customer's name so listings render without a second call.
    """

    customer_name = serializers.CharField(source="customer.name", read_only=True)

    class Meta:
        model = LedgerEntry
        fields = [
            "id",
            "customer",
            "customer_name",
            "entry_type",
            "amount",
            "balance_after",
            "occurred_at",
            "payment_method",
            "description",
            "bill_number",
            "is_deleted",
            "deleted_at",
            "deleted_reason",
            "created_at",
        ]
        read_only_fields = fields


class AccountBalanceSerializer(serializers.ModelSerializer):
    """Balance columns of a customer account after a ledger operation."""

    class Meta:
        model = CustomerAccount
        fields = ["id", "name", "balance", "total_credit", "total_paid"]
        read_only_fields = fields


class EntryResultSerializer(serializers.Serializer):
    """Serializer for EntryResult (create and reverse responses)."""

    entry = LedgerEntrySerializer(read_only=True)
    account = AccountBalanceSerializer(read_only=True)


class CreateEntrySerializer(serializers.Serializer):
    """
    Request body for recording a credit or payment.

    entry_type is checked against the choices here. amount is passed through
    as text and parsed by the ledger engine, which rejects non-numeric,
    non-finite and non-positive values with INVALID_AMOUNT.
    """

    customer = serializers.UUIDField(
        help_text="Customer account id",
    )
    entry_type = serializers.ChoiceField(
        choices=EntryType.choices,
        help_text="credit (customer takes goods on account) or payment (customer pays)",
    )
    amount = serializers.CharField(
        max_length=32,
        help_text="Positive amount, rounded half-up to 2 decimal places",
    )
    payment_method = serializers.ChoiceField(
        choices=PaymentMethod.choices,
        required=False,
        allow_null=True,
        help_text="Payments only (default: cash)",
    )
    description = serializers.CharField(
        max_length=500,
        required=False,
        allow_blank=True,
        default="",
    )
    bill_number = serializers.CharField(
        max_length=50,
        required=False,
        allow_blank=True,
        default="",
    )
    occurred_at = serializers.DateTimeField(
        required=False,
        allow_null=True,
        help_text="When the transaction happened (default: now)",
    )
    idempotency_key = serializers.CharField(
        max_length=255,
        required=False,
        allow_blank=True,
        allow_null=True,
        help_text="Repeat-safe key; also accepted as the Idempotency-Key header",
    )


class ReverseEntrySerializer(serializers.Serializer):
    """Optional body for reversing an entry."""

    reason = serializers.CharField(
        max_length=255,
        required=False,
        allow_blank=True,
        default="",
        help_text="Why the entry is being removed",
    )


class SummaryQuerySerializer(serializers.Serializer):
    """
    Query parameters for ledger summaries.

    Dates are local calendar days, both inclusive.
    """

    customer = serializers.UUIDField(required=False)
    start_date = serializers.DateField(required=False)
    end_date = serializers.DateField(required=False)

    def validate(self, attrs):
        start_date = attrs.get("start_date")
        end_date = attrs.get("end_date")
        if start_date and end_date and start_date > end_date:
            raise serializers.ValidationError(
                {"start_date": "Start date must be on or before end date."}
            )
        return attrs


class EntryListQuerySerializer(SummaryQuerySerializer):
    """Query parameters for listing ledger entries."""

    type = serializers.ChoiceField(
        choices=EntryType.choices,
        required=False,
        help_text="Filter by entry type",
    )
    include_deleted = serializers.BooleanField(
        required=False,
        default=False,
        help_text="Include reversed entries",
    )
    page = serializers.IntegerField(required=False, min_value=1, default=1)
    page_size = serializers.IntegerField(required=False, min_value=1)


class EntrySummarySerializer(serializers.Serializer):
    """Serializer for EntrySummary."""

    credit_total = serializers.DecimalField(max_digits=14, decimal_places=2)
    credit_count = serializers.IntegerField()
    payment_total = serializers.DecimalField(max_digits=14, decimal_places=2)
    payment_count = serializers.IntegerField()
    net = serializers.DecimalField(max_digits=14, decimal_places=2)


class EntryPageSerializer(serializers.Serializer):
    """Serializer for EntryPage."""

    count = serializers.IntegerField(source="total")
    page = serializers.IntegerField()
    page_size = serializers.IntegerField()
    total_pages = serializers.IntegerField()
    results = LedgerEntrySerializer(source="entries", many=True)
