"""
Customer account model.

A CustomerAccount is the balance record a shop keeps for one customer.
Positive balances mean the customer owes the shop; negative balances mean
the shop owes the customer (an advance or overpayment).

Balance invariant:
    balance      == sum(non-deleted credit amounts) - sum(non-deleted payment amounts)
    total_credit == sum(non-deleted credit amounts)
    total_paid   == sum(non-deleted payment amounts)

The three balance columns are written only by the ledger engine through
CustomerAccountStore.apply_delta(). Profile edits never touch them.

Related files:
    - store.py: CustomerAccountStore (the only writer of balance columns)
    - ledger/models.py: LedgerEntry (the source of truth for balances)
"""

from decimal import Decimal

from django.conf import settings
from django.core.validators import RegexValidator
from django.db import models
from django.db.models import Q

from core.model_mixins import UUIDPrimaryKeyMixin
from core.models import BaseModel

# Ten-digit Indian mobile number
phone_validator = RegexValidator(
    regex=r"^[6-9]\d{9}$",
    message="Enter a valid 10-digit mobile number.",
)

BALANCE_FIELDS = ("balance", "total_credit", "total_paid")


class CustomerAccount(UUIDPrimaryKeyMixin, BaseModel):
    """
    A shop's customer and their running balance.

    Fields:
        shop: Owning shop (the authenticated user); partition key
        name: Customer display name
        phone: Optional mobile number, unique within a shop
        email / address / notes: Optional profile data
        balance: Signed amount the customer owes (negative = advance)
        total_credit: Sum of live credit entries
        total_paid: Sum of live payment entries
        credit_limit: Informational limit shown to the shopkeeper
        is_active: False once the customer has been deactivated
    """

    shop = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="customer_accounts",
        help_text="Shop that owns this customer",
    )
    name = models.CharField(
        max_length=100,
        help_text="Customer display name",
    )
    phone = models.CharField(
        max_length=10,
        null=True,
        blank=True,
        validators=[phone_validator],
        help_text="10-digit mobile number, unique per shop",
    )
    email = models.EmailField(
        blank=True,
        default="",
        help_text="Optional contact email",
    )
    address = models.CharField(
        max_length=255,
        blank=True,
        default="",
        help_text="Optional postal address",
    )
    notes = models.CharField(
        max_length=500,
        blank=True,
        default="",
        help_text="Free-form notes from the shopkeeper",
    )
    balance = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        default=Decimal("0.00"),
        help_text="Amount owed by the customer (negative means the shop owes)",
    )
    total_credit = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        default=Decimal("0.00"),
        help_text="Sum of non-deleted credit entries",
    )
    total_paid = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        default=Decimal("0.00"),
        help_text="Sum of non-deleted payment entries",
    )
    credit_limit = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        null=True,
        blank=True,
        help_text="Optional credit limit (informational, not enforced)",
    )
    is_active = models.BooleanField(
        default=True,
        db_index=True,
        help_text="Inactive customers are hidden from listings",
    )

    class Meta:
        db_table = "customers_customeraccount"
        verbose_name = "customer account"
        verbose_name_plural = "customer accounts"
        ordering = ["-updated_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["shop", "phone"],
                condition=Q(phone__isnull=False),
                name="unique_customer_phone_per_shop",
            ),
        ]
        indexes = [
            models.Index(fields=["shop", "is_active"], name="customers_c_shop_id_6b1f0e_idx"),
            models.Index(fields=["shop", "name"], name="customers_c_shop_id_9a2d4c_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.name} ({self.balance})"

    @property
    def is_over_limit(self) -> bool:
        """True when a credit limit is set and the balance exceeds it."""
        return self.credit_limit is not None and self.balance > self.credit_limit
