"""
Customer account store.

This module provides CustomerAccountStore, the only code path that reads
and writes CustomerAccount rows. It has two audiences:

Ledger engine (balance maintenance):
    - get_account(): scoped lookup
    - lock_account(): scoped lookup with SELECT ... FOR UPDATE
    - apply_delta(): single conditional UPDATE of balance/total columns

API layer (profile CRUD):
    - register(), list_accounts(), get_stats(), update_profile(), deactivate()

apply_delta() does no business validation: amounts are validated by the
ledger engine before it opens a unit of work. It refuses to run outside a
transaction so a balance change can never commit without its entry.

Usage:
    from customers.store import CustomerAccountStore

    with transaction.atomic():
        account = CustomerAccountStore.lock_account(shop_id, customer_id)
        account = CustomerAccountStore.apply_delta(
            shop_id, customer_id, Decimal("-100.00"), "payment"
        )
"""

from __future__ import annotations

import uuid
from decimal import Decimal
from typing import TYPE_CHECKING

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import IntegrityError
from django.db.models import Case, Count, DecimalField, F, Q, Sum, Value, When
from django.db.models.functions import Abs, Coalesce
from django.db.transaction import TransactionManagementError
from django.utils import timezone

from core.services import BaseService

from .exceptions import CustomerNotFound, DuplicateCustomer, OutstandingBalance
from .models import BALANCE_FIELDS, CustomerAccount

if TYPE_CHECKING:
    from typing import Any

    from django.db.models import QuerySet

# Entry kinds understood by apply_delta(); match ledger EntryType values
KIND_CREDIT = "credit"
KIND_PAYMENT = "payment"

ZERO = Decimal("0.00")

# Sort keys accepted by list_accounts()
SORT_OPTIONS = {
    "recent": ("-updated_at",),
    "name": ("name",),
    "balance_high": ("-balance", "name"),
    "balance_low": ("balance", "name"),
}

# Fields the API may edit; balance columns and shop are never writable
PROFILE_FIELDS = ("name", "phone", "email", "address", "notes", "credit_limit")


class CustomerAccountStore(BaseService):
    """
    Data access for customer accounts.

    All methods are static - no instance state is maintained. Every lookup
    is scoped by shop_id; an id belonging to another shop behaves exactly
    like a missing id.
    """

    # =========================================================================
    # Ledger-facing operations
    # =========================================================================

    @staticmethod
    def get_account(shop_id: int, customer_id: uuid.UUID) -> CustomerAccount:
        """
        Get a customer account owned by a shop.

        Args:
            shop_id: Owning shop (user) id
            customer_id: UUID of the customer account

        Returns:
            The CustomerAccount

        Raises:
            CustomerNotFound: If no such account exists under the shop
        """
        try:
            return CustomerAccount.objects.get(id=customer_id, shop_id=shop_id)
        except (CustomerAccount.DoesNotExist, DjangoValidationError):
            raise CustomerNotFound(
                f"Customer {customer_id} not found",
                details={"customer_id": str(customer_id)},
            )

    @staticmethod
    def lock_account(shop_id: int, customer_id: uuid.UUID) -> CustomerAccount:
        """
        Get a customer account and hold its row lock until the transaction ends.

        Concurrent writers for the same customer queue here, so the
        balance they read is the balance they update.

        Raises:
            CustomerNotFound: If no such account exists under the shop
            TransactionManagementError: If called outside an atomic block
        """
        try:
            return CustomerAccount.objects.select_for_update().get(
                id=customer_id, shop_id=shop_id
            )
        except (CustomerAccount.DoesNotExist, DjangoValidationError):
            raise CustomerNotFound(
                f"Customer {customer_id} not found",
                details={"customer_id": str(customer_id)},
            )

    @classmethod
    def apply_delta(
        cls,
        shop_id: int,
        customer_id: uuid.UUID,
        signed_amount: Decimal,
        kind: str,
    ) -> CustomerAccount:
        """
        Add a signed amount to a customer's balance and matching running total.

        The update is one UPDATE statement with column expressions, so it
        never loses a concurrent change. Running totals move by the
        unsigned amount of the entry kind:

            kind=credit:  balance += s, total_credit += s
            kind=payment: balance += s, total_paid   -= s

        Reversals pass the inverse signed amount, which decrements the
        corresponding total.

        Args:
            shop_id: Owning shop id
            customer_id: Customer account id
            signed_amount: Positive for credit, negative for payment
                (or the inverse for a reversal)
            kind: "credit" or "payment", the type of the entry being applied

        Returns:
            The account as stored after the update

        Raises:
            TransactionManagementError: If called outside an atomic block
            CustomerNotFound: If no such account exists under the shop
            ValueError: If kind is not credit or payment
        """
        if not cls.in_atomic_block():
            raise TransactionManagementError(
                "apply_delta() must run inside a transaction"
            )

        if kind == KIND_CREDIT:
            credit_delta, paid_delta = signed_amount, ZERO
        elif kind == KIND_PAYMENT:
            credit_delta, paid_delta = ZERO, -signed_amount
        else:
            raise ValueError(f"Unknown entry kind: {kind!r}")

        updated = CustomerAccount.objects.filter(id=customer_id, shop_id=shop_id).update(
            balance=F("balance") + signed_amount,
            total_credit=F("total_credit") + credit_delta,
            total_paid=F("total_paid") + paid_delta,
            updated_at=timezone.now(),
        )
        if not updated:
            raise CustomerNotFound(
                f"Customer {customer_id} not found",
                details={"customer_id": str(customer_id)},
            )

        return CustomerAccount.objects.get(id=customer_id)

    @staticmethod
    def set_balances(
        account: CustomerAccount,
        balance: Decimal,
        total_credit: Decimal,
        total_paid: Decimal,
    ) -> CustomerAccount:
        """
        Overwrite the balance columns with recomputed values.

        Only used by reconciliation repair; normal writes go through
        apply_delta().
        """
        account.balance = balance
        account.total_credit = total_credit
        account.total_paid = total_paid
        account.save(update_fields=[*BALANCE_FIELDS, "updated_at"])
        return account

    # =========================================================================
    # API-facing operations
    # =========================================================================

    @classmethod
    def register(cls, shop, **fields: Any) -> CustomerAccount:
        """
        Create a customer account for a shop with a zero balance.

        Balance columns in ``fields`` are ignored.

        Raises:
            DuplicateCustomer: If the phone number is already used in the shop
        """
        cls.validate_required(name=fields.get("name"))
        profile = {k: v for k, v in fields.items() if k in PROFILE_FIELDS}
        try:
            with cls.atomic():
                account = CustomerAccount.objects.create(shop=shop, **profile)
        except IntegrityError:
            raise DuplicateCustomer(
                "Customer with this phone number already exists",
                details={"phone": profile.get("phone")},
            )

        cls.get_logger().info(
            "Registered customer",
            extra={"shop_id": shop.pk, "customer_id": str(account.id)},
        )
        return account

    @staticmethod
    def list_accounts(
        shop_id: int,
        search: str | None = None,
        has_balance: bool | None = None,
        sort: str | None = None,
        include_inactive: bool = False,
    ) -> QuerySet[CustomerAccount]:
        """
        Build the customer listing queryset for a shop.

        Args:
            shop_id: Owning shop id
            search: Case-insensitive match on name or phone
            has_balance: True for balance > 0, False for balance <= 0
            sort: One of SORT_OPTIONS keys (default "recent")
            include_inactive: Include deactivated customers

        Returns:
            Ordered queryset (the caller paginates)
        """
        queryset = CustomerAccount.objects.filter(shop_id=shop_id)
        if not include_inactive:
            queryset = queryset.filter(is_active=True)
        if search:
            queryset = queryset.filter(
                Q(name__icontains=search) | Q(phone__icontains=search)
            )
        if has_balance is True:
            queryset = queryset.filter(balance__gt=0)
        elif has_balance is False:
            queryset = queryset.filter(balance__lte=0)

        return queryset.order_by(*SORT_OPTIONS.get(sort or "recent", SORT_OPTIONS["recent"]))

    @staticmethod
    def get_stats(shop_id: int) -> dict[str, Any]:
        """
        Summarize balances across a shop's active customers.

        Returns:
            Dict with total_customers, total_receivable (sum of positive
            balances), total_payable (sum of absolute negative balances)
            and customers_with_balance (count of positive balances)
        """
        money = DecimalField(max_digits=14, decimal_places=2)
        stats = CustomerAccount.objects.filter(shop_id=shop_id, is_active=True).aggregate(
            total_customers=Count("id"),
            total_receivable=Coalesce(
                Sum(Case(When(balance__gt=0, then=F("balance")), default=Value(ZERO), output_field=money)),
                Value(ZERO),
                output_field=money,
            ),
            total_payable=Coalesce(
                Sum(Case(When(balance__lt=0, then=Abs("balance")), default=Value(ZERO), output_field=money)),
                Value(ZERO),
                output_field=money,
            ),
            customers_with_balance=Count("id", filter=Q(balance__gt=0)),
        )
        return stats

    @classmethod
    def update_profile(cls, account: CustomerAccount, **fields: Any) -> CustomerAccount:
        """
        Update profile fields of an account.

        Balance columns, shop and any unknown keys are dropped silently.

        Raises:
            DuplicateCustomer: If the new phone number is already used in the shop
        """
        changes = {k: v for k, v in fields.items() if k in PROFILE_FIELDS}
        if not changes:
            return account

        for field_name, value in changes.items():
            setattr(account, field_name, value)
        try:
            with cls.atomic():
                account.save(update_fields=[*changes.keys(), "updated_at"])
        except IntegrityError:
            raise DuplicateCustomer(
                "Customer with this phone number already exists",
                details={"phone": changes.get("phone")},
            )
        return account

    @classmethod
    def deactivate(cls, shop_id: int, customer_id: uuid.UUID) -> CustomerAccount:
        """
        Hide a customer from listings.

        The balance is checked under the row lock so a concurrent entry
        cannot slip in between the check and the update.

        Raises:
            CustomerNotFound: If no such account exists under the shop
            OutstandingBalance: If the balance is not zero
        """
        with cls.atomic():
            account = cls.lock_account(shop_id, customer_id)
            if account.balance != 0:
                raise OutstandingBalance(
                    "Cannot deactivate a customer with an outstanding balance. "
                    "Please settle the balance first.",
                    details={
                        "customer_id": str(account.id),
                        "balance": str(account.balance),
                    },
                )
            account.is_active = False
            account.save(update_fields=["is_active", "updated_at"])

        cls.get_logger().info(
            "Deactivated customer",
            extra={"shop_id": shop_id, "customer_id": str(customer_id)},
        )
        return account
