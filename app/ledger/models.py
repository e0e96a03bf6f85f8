"""
Ledger entry model.

A LedgerEntry records one credit (goods/money given to the customer on
account) or payment (money received from the customer) against a
CustomerAccount. Entries are immutable except for a single transition to
the soft-deleted state, which the ledger service pairs with a balance
reversal.

Usage:
    from ledger.models import EntryType, LedgerEntry

    EntryType.CREDIT.signed(Decimal("250"))    # Decimal("250")
    EntryType.PAYMENT.signed(Decimal("100"))   # Decimal("-100")
    EntryType.PAYMENT.inverse(Decimal("100"))  # Decimal("100")

    LedgerEntry.objects.filter(customer=account)             # live entries
    LedgerEntry.all_objects.filter(customer=account)         # audit trail
"""

from __future__ import annotations

from decimal import Decimal

from django.conf import settings
from django.db import models
from django.db.models import Q
from django.utils import timezone

from core.managers import SoftDeleteManager
from core.model_mixins import SoftDeleteMixin, UUIDPrimaryKeyMixin
from core.models import BaseModel


class EntryType(models.TextChoices):
    """
    Direction of a ledger entry.

    Values:
        CREDIT: Customer takes goods on account; balance goes up
        PAYMENT: Customer pays; balance goes down

    signed() and inverse() are the only places the sign convention lives,
    so applying an entry and reversing it are symmetric by construction.
    """

    CREDIT = "credit", "Credit"
    PAYMENT = "payment", "Payment"

    def signed(self, amount: Decimal) -> Decimal:
        """Return the balance delta for applying an entry of this type."""
        return amount if self == EntryType.CREDIT else -amount

    def inverse(self, amount: Decimal) -> Decimal:
        """Return the balance delta that undoes an entry of this type."""
        return -self.signed(amount)


class PaymentMethod(models.TextChoices):
    """How a payment was received. Not recorded for credits."""

    CASH = "cash", "Cash"
    UPI = "upi", "UPI"
    CARD = "card", "Card"
    BANK_TRANSFER = "bank_transfer", "Bank Transfer"
    CHEQUE = "cheque", "Cheque"
    OTHER = "other", "Other"


DEFAULT_DELETED_REASON = "Deleted by user"


class LedgerEntry(UUIDPrimaryKeyMixin, SoftDeleteMixin, BaseModel):
    """
    A single credit or payment against a customer account.

    Fields:
        shop: Owning shop; always equals customer.shop
        customer: Account the entry applies to (immutable)
        entry_type: credit or payment
        amount: Strictly positive amount (2 decimal places)
        balance_after: Account balance immediately after this entry applied
        occurred_at: Business date of the transaction (may be backdated)
        payment_method: For payments only
        description / bill_number: Free-form reference data
        idempotency_key: Optional caller token, unique per shop
        deleted_reason: Why the entry was reversed
        created_by: User who recorded the entry

    Managers:
        objects: Live (non-deleted) entries
        all_objects: Every entry, including reversed ones
    """

    shop = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="ledger_entries",
        help_text="Shop that owns this entry",
    )
    customer = models.ForeignKey(
        "customers.CustomerAccount",
        on_delete=models.PROTECT,
        related_name="entries",
        help_text="Customer account this entry applies to",
    )
    entry_type = models.CharField(
        max_length=16,
        choices=EntryType.choices,
        help_text="credit increases the balance, payment decreases it",
    )
    amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        help_text="Entry amount (always positive)",
    )
    balance_after = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        help_text="Customer balance immediately after this entry was applied",
    )
    occurred_at = models.DateTimeField(
        default=timezone.now,
        db_index=True,
        help_text="When the transaction happened (may differ from created_at)",
    )
    payment_method = models.CharField(
        max_length=16,
        choices=PaymentMethod.choices,
        null=True,
        blank=True,
        help_text="How the payment was received (payments only)",
    )
    description = models.CharField(
        max_length=500,
        blank=True,
        default="",
        help_text="Human-readable description",
    )
    bill_number = models.CharField(
        max_length=50,
        blank=True,
        default="",
        help_text="Optional bill or invoice reference",
    )
    idempotency_key = models.CharField(
        max_length=255,
        null=True,
        blank=True,
        help_text="Caller-supplied key; repeating it returns the original entry",
    )
    deleted_reason = models.CharField(
        max_length=255,
        blank=True,
        default="",
        help_text="Reason given when the entry was reversed",
    )
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
        help_text="User who recorded this entry",
    )

    objects = SoftDeleteManager()
    all_objects = models.Manager()

    class Meta:
        db_table = "ledger_ledgerentry"
        verbose_name = "ledger entry"
        verbose_name_plural = "ledger entries"
        ordering = ["-occurred_at", "-created_at"]
        base_manager_name = "all_objects"
        indexes = [
            models.Index(fields=["shop", "occurred_at"], name="ledger_ledg_shop_id_3c8e1a_idx"),
            models.Index(fields=["customer", "occurred_at"], name="ledger_ledg_custome_7f2b9d_idx"),
            models.Index(fields=["shop", "entry_type"], name="ledger_ledg_shop_id_b41c62_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(amount__gt=0),
                name="ledger_entry_amount_positive",
            ),
            models.CheckConstraint(
                condition=Q(entry_type__in=["credit", "payment"]),
                name="ledger_entry_type_valid",
            ),
            models.UniqueConstraint(
                fields=["shop", "idempotency_key"],
                condition=Q(idempotency_key__isnull=False),
                name="unique_ledger_idempotency_key_per_shop",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.get_entry_type_display()}: {self.amount}"

    @property
    def kind(self) -> EntryType:
        """entry_type as an EntryType member."""
        return EntryType(self.entry_type)

    @property
    def signed_amount(self) -> Decimal:
        """Balance delta this entry contributed when it was applied."""
        return self.kind.signed(self.amount)
