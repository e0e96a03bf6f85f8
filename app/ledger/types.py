"""
Data types for ledger operations.

This module defines dataclasses used to pass ledger data between the
service, the façade and the API layer.

Types:
    CreateEntryParams: Validated input for recording an entry
    DateRange: Inclusive window on occurred_at
    EntryResult: Entry plus the account state after the operation
    EntryPage: One page of an entry listing
    EntrySummary: Credit/payment totals and counts
    BalanceSnapshot: The three balance columns of an account
    BalanceDrift: Stored vs recomputed balances for one account

Usage:
    from ledger.types import CreateEntryParams, DateRange

    params = CreateEntryParams(
        shop_id=shop.id,
        customer_id=customer.id,
        entry_type="payment",
        amount="100.00",
        payment_method="upi",
    )
    params.amount  # Decimal("100.00")
"""

from __future__ import annotations

import math
import uuid
from dataclasses import dataclass
from datetime import date, datetime, time
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import TYPE_CHECKING, Any

from django.utils import timezone

from core.exceptions import ValidationError

from .exceptions import InvalidAmount, InvalidEntryType
from .models import EntryType, PaymentMethod

if TYPE_CHECKING:
    from customers.models import CustomerAccount

    from .models import LedgerEntry

CENT = Decimal("0.01")

# LedgerEntry.amount is DecimalField(max_digits=12, decimal_places=2)
MAX_AMOUNT = Decimal("9999999999.99")


def normalize_amount(value: Any) -> Decimal:
    """
    Convert an input amount to a positive two-place Decimal.

    Accepts Decimal, int, float and numeric strings. Floats are converted
    through their shortest repr so 0.1 becomes Decimal("0.1"), not its
    binary expansion. Values are rounded half-up to cents.

    Raises:
        InvalidAmount: For booleans, non-numeric values, NaN, infinities,
            values that round to zero or below, and values too large to store
    """
    if isinstance(value, bool) or value is None:
        raise InvalidAmount(value)

    if isinstance(value, float):
        if not math.isfinite(value):
            raise InvalidAmount(value)
        value = repr(value)

    try:
        amount = value if isinstance(value, Decimal) else Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        raise InvalidAmount(value)

    if not amount.is_finite() or amount <= 0:
        raise InvalidAmount(value)
    if amount > MAX_AMOUNT:
        raise InvalidAmount(value, message=f"Amount must not exceed {MAX_AMOUNT}")

    amount = amount.quantize(CENT, rounding=ROUND_HALF_UP)
    if amount <= 0:
        raise InvalidAmount(value)
    return amount


def normalize_entry_type(value: Any) -> EntryType:
    """
    Convert an input value to an EntryType member.

    Raises:
        InvalidEntryType: If value is not "credit" or "payment"
    """
    try:
        return EntryType(value)
    except ValueError:
        raise InvalidEntryType(
            f"Entry type must be one of: {', '.join(EntryType.values)}",
            details={"entry_type": str(value)},
        )


@dataclass
class CreateEntryParams:
    """
    Parameters for recording a ledger entry.

    Construction validates and normalizes the input, so an instance
    always holds a legal entry_type and a positive two-place amount.

    Required Attributes:
        shop_id: Owning shop id
        customer_id: Target customer account id
        entry_type: "credit" or "payment" (normalized to EntryType)
        amount: Any value accepted by normalize_amount()

    Optional Attributes:
        description: Free text (<= 500 chars)
        payment_method: Payments only; defaults to cash, forced to None for credits
        occurred_at: Business timestamp; defaults to now
        bill_number: Bill reference
        idempotency_key: Repeat-safe token, unique per shop
        created_by_id: User recording the entry
    """

    shop_id: int
    customer_id: uuid.UUID
    entry_type: EntryType | str
    amount: Any

    description: str = ""
    payment_method: str | None = None
    occurred_at: datetime | None = None
    bill_number: str = ""
    idempotency_key: str | None = None
    created_by_id: int | None = None

    def __post_init__(self) -> None:
        """Validate and normalize params after initialization."""
        self.entry_type = normalize_entry_type(self.entry_type)
        self.amount = normalize_amount(self.amount)

        if self.entry_type == EntryType.PAYMENT:
            self.payment_method = self.payment_method or PaymentMethod.CASH
            if self.payment_method not in PaymentMethod.values:
                raise ValidationError(
                    f"Payment method must be one of: {', '.join(PaymentMethod.values)}",
                    error_code="INVALID_PAYMENT_METHOD",
                    details={"payment_method": str(self.payment_method)},
                )
        else:
            self.payment_method = None

        self.description = self.description or ""
        self.bill_number = self.bill_number or ""
        if len(self.description) > 500:
            raise ValidationError(
                "Description cannot exceed 500 characters",
                error_code="VALIDATION_ERROR",
                details={"description": ["Ensure this field has no more than 500 characters."]},
            )
        if self.idempotency_key == "":
            self.idempotency_key = None
        if self.occurred_at is None:
            self.occurred_at = timezone.now()

    @property
    def signed_amount(self) -> Decimal:
        return self.entry_type.signed(self.amount)


@dataclass(frozen=True)
class DateRange:
    """
    Inclusive window on LedgerEntry.occurred_at.

    Either bound may be None (open-ended).

    Example:
        DateRange.from_dates(date(2024, 1, 1), date(2024, 1, 31))
        DateRange.today()
    """

    start: datetime | None = None
    end: datetime | None = None

    def __post_init__(self) -> None:
        if self.start and self.end and self.start > self.end:
            raise ValidationError(
                "Start date must be before end date",
                error_code="INVALID_DATE_RANGE",
                details={"start": self.start.isoformat(), "end": self.end.isoformat()},
            )

    @classmethod
    def from_dates(cls, start_date: date | None = None, end_date: date | None = None) -> DateRange:
        """Build a range covering whole local calendar days."""
        start = (
            timezone.make_aware(datetime.combine(start_date, time.min))
            if start_date
            else None
        )
        end = (
            timezone.make_aware(datetime.combine(end_date, time.max))
            if end_date
            else None
        )
        return cls(start=start, end=end)

    @classmethod
    def today(cls) -> DateRange:
        """Range covering the current local calendar day."""
        today = timezone.localdate()
        return cls.from_dates(today, today)

    def as_filter(self, field_name: str = "occurred_at") -> dict[str, datetime]:
        """Return ORM filter kwargs for this range."""
        lookups = {}
        if self.start:
            lookups[f"{field_name}__gte"] = self.start
        if self.end:
            lookups[f"{field_name}__lte"] = self.end
        return lookups


@dataclass
class EntryResult:
    """Outcome of create/reverse: the entry and the account after the operation."""

    entry: LedgerEntry
    account: CustomerAccount
    created: bool = True


@dataclass
class EntryPage:
    """One page of a ledger listing."""

    entries: list[LedgerEntry]
    total: int
    page: int
    page_size: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.page_size) if self.page_size else 0


@dataclass
class EntrySummary:
    """Totals and counts of non-deleted entries."""

    credit_total: Decimal = Decimal("0.00")
    credit_count: int = 0
    payment_total: Decimal = Decimal("0.00")
    payment_count: int = 0

    @property
    def net(self) -> Decimal:
        """Credit minus payments over the summarized window."""
        return self.credit_total - self.payment_total


@dataclass(frozen=True)
class BalanceSnapshot:
    """The three balance columns of a customer account."""

    balance: Decimal
    total_credit: Decimal
    total_paid: Decimal

    @classmethod
    def of(cls, account: CustomerAccount) -> BalanceSnapshot:
        return cls(
            balance=account.balance,
            total_credit=account.total_credit,
            total_paid=account.total_paid,
        )

    def to_dict(self) -> dict[str, str]:
        return {
            "balance": str(self.balance),
            "total_credit": str(self.total_credit),
            "total_paid": str(self.total_paid),
        }


@dataclass
class BalanceDrift:
    """An account whose stored balances differ from the entry log."""

    customer_id: uuid.UUID
    shop_id: int
    stored: BalanceSnapshot
    computed: BalanceSnapshot
    repaired: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "customer_id": str(self.customer_id),
            "shop_id": self.shop_id,
            "stored": self.stored.to_dict(),
            "computed": self.computed.to_dict(),
            "repaired": self.repaired,
        }
