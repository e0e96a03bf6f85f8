"""
Ledger service layer.

This module provides LedgerService, which owns every change to a
customer's balance. All ledger writes go through this service so that
the balance invariant holds for every account:

    balance      == sum(live credits) - sum(live payments)
    total_credit == sum(live credits)
    total_paid   == sum(live payments)

where "live" means not soft deleted.

Key features:
- Each mutation runs in one UnitOfWork: the account update and the entry
  write commit together or not at all
- The customer row is locked before its balance is read, so concurrent
  writers for one customer are serialized and every entry gets a distinct
  balance_after
- Reversal applies EntryType.inverse() of the original entry and marks it
  deleted in the same unit; reversing twice is rejected
- Optional per-shop idempotency keys make create safe to repeat
- Balances can be recomputed from the entry log for audit

The service never retries. Transient failures surface as
ConcurrencyConflict for the façade to retry.

Usage:
    from ledger.services import LedgerService, ledger
    from ledger.types import CreateEntryParams

    result = ledger.create_entry(CreateEntryParams(
        shop_id=shop.id,
        customer_id=customer.id,
        entry_type="credit",
        amount="250.00",
    ))
    result.account.balance  # Decimal("250.00")

    ledger.reverse_entry(shop.id, result.entry.id, reason="Wrong customer")
"""

from __future__ import annotations

import logging
import uuid
from decimal import ROUND_HALF_UP, Decimal
from typing import TYPE_CHECKING

from django.conf import settings
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import IntegrityError
from django.db.models import Count, DecimalField, Q, Sum, Value
from django.db.models.functions import Coalesce

from core.helpers import clamp_page
from customers.models import CustomerAccount
from customers.store import CustomerAccountStore

from .exceptions import AlreadyReversed, EntryNotFound, IdempotencyKeyReused
from .models import DEFAULT_DELETED_REASON, EntryType, LedgerEntry
from .types import (
    CENT,
    BalanceDrift,
    BalanceSnapshot,
    CreateEntryParams,
    DateRange,
    EntryPage,
    EntryResult,
    EntrySummary,
    normalize_entry_type,
)
from .unit_of_work import UnitOfWork

if TYPE_CHECKING:
    from collections.abc import Iterable

logger = logging.getLogger(__name__)

ZERO = Decimal("0.00")
MONEY = DecimalField(max_digits=14, decimal_places=2)


def _money_sum(entry_type: EntryType) -> Coalesce:
    return Coalesce(
        Sum("amount", filter=Q(entry_type=entry_type)),
        Value(ZERO),
        output_field=MONEY,
    )


def _to_cents(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


class LedgerService:
    """
    Service class for ledger operations.

    All methods are static - no instance state is maintained.
    """

    # =========================================================================
    # Mutations
    # =========================================================================

    @staticmethod
    def create_entry(params: CreateEntryParams) -> EntryResult:
        """
        Record a credit or payment and update the customer's balance.

        Amount and type are already validated by CreateEntryParams, so
        invalid input is rejected before any unit of work is opened.

        Steps, inside one unit of work:
            1. Lock and read the customer account
            2. Compute the signed delta from the entry type
            3. Apply the delta to the account
            4. Stamp balance_after from the updated account
            5. Persist the entry

        Idempotent when params.idempotency_key is set: an existing entry
        with the same key for the shop is returned unchanged, provided it
        was recorded for the same customer, type and amount.

        Args:
            params: Validated entry parameters

        Returns:
            EntryResult with the entry and the updated account
            (created=False when an idempotent replay returned an existing entry)

        Raises:
            CustomerNotFound: If the customer does not belong to the shop
            IdempotencyKeyReused: If the key belongs to a different entry
            ConcurrencyConflict: If the database aborted the unit
        """
        if params.idempotency_key:
            existing = LedgerService._find_by_idempotency_key(
                params.shop_id, params.idempotency_key
            )
            if existing is not None:
                return LedgerService._replay(existing, params)

        try:
            with UnitOfWork(name="create_entry"):
                CustomerAccountStore.lock_account(params.shop_id, params.customer_id)

                account = CustomerAccountStore.apply_delta(
                    params.shop_id,
                    params.customer_id,
                    params.signed_amount,
                    params.entry_type,
                )

                entry = LedgerEntry.objects.create(
                    shop_id=params.shop_id,
                    customer_id=account.id,
                    entry_type=params.entry_type,
                    amount=params.amount,
                    balance_after=account.balance,
                    occurred_at=params.occurred_at,
                    payment_method=params.payment_method,
                    description=params.description,
                    bill_number=params.bill_number,
                    idempotency_key=params.idempotency_key,
                    created_by_id=params.created_by_id,
                )
        except IntegrityError:
            # Another request with the same key committed between our
            # lookup and insert; the unit above has been rolled back.
            if not params.idempotency_key:
                raise
            existing = LedgerService._find_by_idempotency_key(
                params.shop_id, params.idempotency_key
            )
            if existing is None:
                raise
            return LedgerService._replay(existing, params)

        logger.info(
            "Ledger entry created",
            extra={
                "shop_id": params.shop_id,
                "customer_id": str(account.id),
                "entry_id": str(entry.id),
                "entry_type": str(params.entry_type),
                "amount": str(params.amount),
                "balance_after": str(entry.balance_after),
            },
        )
        return EntryResult(entry=entry, account=account)

    @staticmethod
    def reverse_entry(
        shop_id: int,
        entry_id: uuid.UUID,
        reason: str | None = None,
    ) -> EntryResult:
        """
        Soft delete an entry and undo its effect on the customer's balance.

        Steps, inside one unit of work:
            1. Lock the entry row
            2. Reject if it is already deleted
            3. Apply the inverse delta (also decrements the running total)
            4. Mark the entry deleted with a reason

        Reversal does not depend on entries recorded after this one;
        their balance_after values stay as historical snapshots.

        Args:
            shop_id: Owning shop id
            entry_id: Entry to reverse
            reason: Why the entry is being removed (default "Deleted by user")

        Returns:
            EntryResult with the deleted entry and the updated account

        Raises:
            EntryNotFound: If the entry does not belong to the shop
            AlreadyReversed: If the entry was already reversed
            ConcurrencyConflict: If the database aborted the unit
        """
        with UnitOfWork(name="reverse_entry"):
            entry = LedgerService._lock_entry(shop_id, entry_id)
            if entry.is_deleted:
                raise AlreadyReversed(
                    f"Entry {entry_id} has already been reversed",
                    details={
                        "entry_id": str(entry_id),
                        "deleted_at": entry.deleted_at.isoformat() if entry.deleted_at else None,
                    },
                )

            account = CustomerAccountStore.apply_delta(
                shop_id,
                entry.customer_id,
                entry.kind.inverse(entry.amount),
                entry.entry_type,
            )

            entry.deleted_reason = (reason or "").strip() or DEFAULT_DELETED_REASON
            entry.soft_delete(extra_fields=["deleted_reason"])

        logger.info(
            "Ledger entry reversed",
            extra={
                "shop_id": shop_id,
                "customer_id": str(account.id),
                "entry_id": str(entry.id),
                "entry_type": entry.entry_type,
                "amount": str(entry.amount),
                "balance": str(account.balance),
            },
        )
        return EntryResult(entry=entry, account=account)

    # =========================================================================
    # Reads
    # =========================================================================

    @staticmethod
    def get_entry(
        shop_id: int,
        entry_id: uuid.UUID,
        include_deleted: bool = True,
    ) -> LedgerEntry:
        """
        Get a single entry owned by a shop.

        Raises:
            EntryNotFound: If missing, owned by another shop, or deleted
                while include_deleted is False
        """
        manager = LedgerEntry.all_objects if include_deleted else LedgerEntry.objects
        try:
            return manager.select_related("customer").get(id=entry_id, shop_id=shop_id)
        except (LedgerEntry.DoesNotExist, DjangoValidationError):
            raise EntryNotFound(
                f"Entry {entry_id} not found",
                details={"entry_id": str(entry_id)},
            )

    @staticmethod
    def list_entries(
        shop_id: int,
        customer_id: uuid.UUID | None = None,
        entry_type: EntryType | str | None = None,
        date_range: DateRange | None = None,
        page: int = 1,
        page_size: int | None = None,
        include_deleted: bool = False,
    ) -> EntryPage:
        """
        List a shop's entries, newest occurred_at first.

        Args:
            shop_id: Owning shop id
            customer_id: Restrict to one customer (must belong to the shop)
            entry_type: Restrict to credit or payment
            date_range: Inclusive occurred_at window
            page: 1-based page number (values < 1 become 1)
            page_size: Entries per page, clamped to LEDGER_MAX_PAGE_SIZE
            include_deleted: Include reversed entries (audit view)

        Returns:
            EntryPage with the page's entries and the total match count

        Raises:
            CustomerNotFound: If customer_id is given but not in the shop
            InvalidEntryType: If entry_type is not credit/payment
        """
        page, page_size = clamp_page(
            page,
            page_size,
            default_size=settings.LEDGER_DEFAULT_PAGE_SIZE,
            max_size=settings.LEDGER_MAX_PAGE_SIZE,
        )
        queryset = LedgerService._filtered(
            shop_id, customer_id, entry_type, date_range, include_deleted
        )

        total = queryset.count()
        offset = (page - 1) * page_size
        entries = list(
            queryset.select_related("customer").order_by("-occurred_at", "-created_at")[
                offset : offset + page_size
            ]
        )
        return EntryPage(entries=entries, total=total, page=page, page_size=page_size)

    @staticmethod
    def recent_entries(shop_id: int, customer_id: uuid.UUID, limit: int = 10) -> list[LedgerEntry]:
        """Return a customer's latest live entries."""
        return list(
            LedgerEntry.objects.filter(shop_id=shop_id, customer_id=customer_id).order_by(
                "-occurred_at", "-created_at"
            )[:limit]
        )

    @staticmethod
    def summarize(
        shop_id: int,
        date_range: DateRange | None = None,
        customer_id: uuid.UUID | None = None,
    ) -> EntrySummary:
        """
        Total and count live credits and payments.

        Reversed entries are excluded.

        Raises:
            CustomerNotFound: If customer_id is given but not in the shop
        """
        queryset = LedgerService._filtered(shop_id, customer_id, None, date_range, False)
        totals = queryset.aggregate(
            credit_total=_money_sum(EntryType.CREDIT),
            credit_count=Count("id", filter=Q(entry_type=EntryType.CREDIT)),
            payment_total=_money_sum(EntryType.PAYMENT),
            payment_count=Count("id", filter=Q(entry_type=EntryType.PAYMENT)),
        )
        return EntrySummary(
            credit_total=_to_cents(totals["credit_total"]),
            credit_count=totals["credit_count"],
            payment_total=_to_cents(totals["payment_total"]),
            payment_count=totals["payment_count"],
        )

    @staticmethod
    def summarize_today(shop_id: int) -> EntrySummary:
        """Summarize entries whose occurred_at falls on the current local day."""
        return LedgerService.summarize(shop_id, date_range=DateRange.today())

    # =========================================================================
    # Reconciliation
    # =========================================================================

    @staticmethod
    def recompute_balance(account: CustomerAccount) -> BalanceSnapshot:
        """
        Recompute an account's balance columns from its live entries.

        Sums are quantized to cents since SQLite returns them with
        arbitrary scale.

        Returns:
            BalanceSnapshot of the values the account should hold
        """
        totals = LedgerEntry.objects.filter(customer_id=account.id).aggregate(
            total_credit=_money_sum(EntryType.CREDIT),
            total_paid=_money_sum(EntryType.PAYMENT),
        )
        total_credit = _to_cents(totals["total_credit"])
        total_paid = _to_cents(totals["total_paid"])
        return BalanceSnapshot(
            balance=total_credit - total_paid,
            total_credit=total_credit,
            total_paid=total_paid,
        )

    @staticmethod
    def find_balance_drift(
        shop_id: int | None = None,
        accounts: Iterable[CustomerAccount] | None = None,
    ) -> list[BalanceDrift]:
        """
        Compare stored balances with values recomputed from the entry log.

        Args:
            shop_id: Restrict to one shop (all shops when None)
            accounts: Explicit accounts to check (overrides shop_id)

        Returns:
            One BalanceDrift per account whose stored values differ
        """
        if accounts is None:
            accounts = CustomerAccount.objects.all().order_by("id")
            if shop_id is not None:
                accounts = accounts.filter(shop_id=shop_id)
            accounts = accounts.iterator(chunk_size=settings.LEDGER_RECONCILIATION_BATCH_SIZE)

        drifts = []
        for account in accounts:
            stored = BalanceSnapshot.of(account)
            computed = LedgerService.recompute_balance(account)
            if stored != computed:
                drifts.append(
                    BalanceDrift(
                        customer_id=account.id,
                        shop_id=account.shop_id,
                        stored=stored,
                        computed=computed,
                    )
                )
        return drifts

    @staticmethod
    def repair_balance(shop_id: int, customer_id: uuid.UUID) -> BalanceDrift | None:
        """
        Overwrite an account's balance columns with recomputed values.

        Runs under the account lock so no entry can be applied between the
        recompute and the write.

        Returns:
            The repaired drift, or None if the account was already consistent

        Raises:
            CustomerNotFound: If the customer does not belong to the shop
        """
        with UnitOfWork(name="repair_balance"):
            account = CustomerAccountStore.lock_account(shop_id, customer_id)
            stored = BalanceSnapshot.of(account)
            computed = LedgerService.recompute_balance(account)
            if stored == computed:
                return None
            CustomerAccountStore.set_balances(
                account,
                balance=computed.balance,
                total_credit=computed.total_credit,
                total_paid=computed.total_paid,
            )

        logger.warning(
            "Repaired customer balance",
            extra={
                "shop_id": shop_id,
                "customer_id": str(customer_id),
                "stored": stored.to_dict(),
                "computed": computed.to_dict(),
            },
        )
        return BalanceDrift(
            customer_id=account.id,
            shop_id=shop_id,
            stored=stored,
            computed=computed,
            repaired=True,
        )

    # =========================================================================
    # Helpers
    # =========================================================================

    @staticmethod
    def _filtered(
        shop_id: int,
        customer_id: uuid.UUID | None,
        entry_type: EntryType | str | None,
        date_range: DateRange | None,
        include_deleted: bool,
    ):
        manager = LedgerEntry.all_objects if include_deleted else LedgerEntry.objects
        queryset = manager.filter(shop_id=shop_id)

        if customer_id is not None:
            # Raises CustomerNotFound for ids outside the shop
            CustomerAccountStore.get_account(shop_id, customer_id)
            queryset = queryset.filter(customer_id=customer_id)
        if entry_type:
            queryset = queryset.filter(entry_type=normalize_entry_type(entry_type))
        if date_range is not None:
            queryset = queryset.filter(**date_range.as_filter())
        return queryset

    @staticmethod
    def _lock_entry(shop_id: int, entry_id: uuid.UUID) -> LedgerEntry:
        try:
            return LedgerEntry.all_objects.select_for_update().get(id=entry_id, shop_id=shop_id)
        except (LedgerEntry.DoesNotExist, DjangoValidationError):
            raise EntryNotFound(
                f"Entry {entry_id} not found",
                details={"entry_id": str(entry_id)},
            )

    @staticmethod
    def _find_by_idempotency_key(shop_id: int, key: str) -> LedgerEntry | None:
        return LedgerEntry.all_objects.filter(shop_id=shop_id, idempotency_key=key).first()

    @staticmethod
    def _replay(entry: LedgerEntry, params: CreateEntryParams) -> EntryResult:
        if (
            str(entry.customer_id) != str(params.customer_id)
            or entry.entry_type != params.entry_type
            or entry.amount != params.amount
        ):
            raise IdempotencyKeyReused(
                "Idempotency key was already used for a different entry",
                details={
                    "idempotency_key": params.idempotency_key,
                    "entry_id": str(entry.id),
                },
            )

        logger.info(
            "Idempotent replay of ledger entry",
            extra={"shop_id": entry.shop_id, "entry_id": str(entry.id)},
        )
        account = CustomerAccount.objects.get(id=entry.customer_id)
        return EntryResult(entry=entry, account=account, created=False)


# Singleton instance for convenience
ledger = LedgerService()
