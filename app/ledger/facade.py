"""
Ledger façade.

LedgerFacade is the entry point for callers outside the ledger app: the
REST views, the customers API and any integration that records payments
(for example a payment-gateway webhook handler). It accepts plain
arguments, builds validated parameter objects, delegates to
LedgerService and retries transient conflicts.

Retry policy:
    Only ConcurrencyConflict is retried, up to LEDGER_MAX_RETRIES
    attempts in total, with exponential backoff plus jitter between
    attempts. Each attempt is a complete unit of work, so a retried
    attempt never doubles an effect. After the last attempt the
    ConcurrencyConflict propagates to the caller.

Usage:
    from ledger.facade import facade

    result = facade.create_entry(
        shop_id=request.user.id,
        customer_id=customer_id,
        entry_type="payment",
        amount="100.00",
        payment_method="upi",
    )
"""

from __future__ import annotations

import logging
import random
import time
import uuid
from datetime import datetime
from typing import TYPE_CHECKING, Any, Callable, TypeVar

from django.conf import settings

from .exceptions import ConcurrencyConflict
from .services import LedgerService
from .types import CreateEntryParams, DateRange

if TYPE_CHECKING:
    from .models import LedgerEntry
    from .types import EntryPage, EntryResult, EntrySummary

logger = logging.getLogger(__name__)

T = TypeVar("T")


def backoff_delay(attempt: int, base: float = 0.05, max_delay: float = 2.0) -> float:
    """
    Calculate exponential backoff delay with jitter.

    Jitter spreads out writers that collided on the same customer row.

    Args:
        attempt: Current attempt number (0-indexed)
        base: Base delay in seconds
        max_delay: Maximum delay in seconds before jitter

    Returns:
        Delay in seconds with jitter (0-25% of calculated delay)

    Example:
        # Attempt 0: 0.05 - 0.0625 seconds
        # Attempt 1: 0.10 - 0.125 seconds
        delay = backoff_delay(attempt=1)
    """
    delay = min(base * (2**attempt), max_delay)
    jitter = delay * random.uniform(0, 0.25)
    return delay + jitter


class LedgerFacade:
    """
    Request-shaping and retry layer over LedgerService.

    Attributes:
        max_attempts: Total attempts for a mutating call (>= 1)
        base_delay: Base backoff delay in seconds
        sleep: Sleep function (replaceable in tests)
    """

    def __init__(
        self,
        max_attempts: int | None = None,
        base_delay: float | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self._max_attempts = max_attempts
        self._base_delay = base_delay
        self.sleep = sleep

    @property
    def max_attempts(self) -> int:
        attempts = self._max_attempts if self._max_attempts is not None else settings.LEDGER_MAX_RETRIES
        return max(1, attempts)

    @property
    def base_delay(self) -> float:
        return self._base_delay if self._base_delay is not None else settings.LEDGER_RETRY_BASE_DELAY

    # =========================================================================
    # Mutations (retried)
    # =========================================================================

    def create_entry(
        self,
        shop_id: int,
        customer_id: uuid.UUID,
        entry_type: str,
        amount: Any,
        description: str = "",
        payment_method: str | None = None,
        occurred_at: datetime | None = None,
        bill_number: str = "",
        idempotency_key: str | None = None,
        created_by_id: int | None = None,
    ) -> EntryResult:
        """
        Record a credit or payment.

        Input is validated before the first attempt, so InvalidAmount and
        InvalidEntryType are raised without touching the database.

        Returns:
            EntryResult(entry, account)

        Raises:
            InvalidAmount, InvalidEntryType, ValidationError: Bad input
            CustomerNotFound: Customer not in the shop
            ConcurrencyConflict: Still conflicting after every attempt
        """
        params = CreateEntryParams(
            shop_id=shop_id,
            customer_id=customer_id,
            entry_type=entry_type,
            amount=amount,
            description=description,
            payment_method=payment_method,
            occurred_at=occurred_at,
            bill_number=bill_number,
            idempotency_key=idempotency_key,
            created_by_id=created_by_id,
        )
        return self._with_retry("create_entry", LedgerService.create_entry, params)

    def reverse_entry(
        self,
        shop_id: int,
        entry_id: uuid.UUID,
        reason: str | None = None,
    ) -> EntryResult:
        """
        Reverse (soft delete) an entry.

        Returns:
            EntryResult(entry, account) with the account after reversal

        Raises:
            EntryNotFound: Entry not in the shop
            AlreadyReversed: Entry was already reversed
            ConcurrencyConflict: Still conflicting after every attempt
        """
        return self._with_retry(
            "reverse_entry", LedgerService.reverse_entry, shop_id, entry_id, reason
        )

    # =========================================================================
    # Queries
    # =========================================================================

    def get_entry(self, shop_id: int, entry_id: uuid.UUID) -> LedgerEntry:
        return LedgerService.get_entry(shop_id, entry_id)

    def list_entries(
        self,
        shop_id: int,
        customer_id: uuid.UUID | None = None,
        entry_type: str | None = None,
        date_range: DateRange | None = None,
        page: int = 1,
        page_size: int | None = None,
        include_deleted: bool = False,
    ) -> EntryPage:
        return LedgerService.list_entries(
            shop_id,
            customer_id=customer_id,
            entry_type=entry_type,
            date_range=date_range,
            page=page,
            page_size=page_size,
            include_deleted=include_deleted,
        )

    def summarize(
        self,
        shop_id: int,
        date_range: DateRange | None = None,
        customer_id: uuid.UUID | None = None,
    ) -> EntrySummary:
        return LedgerService.summarize(shop_id, date_range=date_range, customer_id=customer_id)

    def summarize_today(self, shop_id: int) -> EntrySummary:
        return LedgerService.summarize_today(shop_id)

    def recent_entries(self, shop_id: int, customer_id: uuid.UUID, limit: int = 10) -> list[LedgerEntry]:
        return LedgerService.recent_entries(shop_id, customer_id, limit=limit)

    # =========================================================================
    # Retry
    # =========================================================================

    def _with_retry(self, operation: str, func: Callable[..., T], *args: Any) -> T:
        attempts = self.max_attempts
        attempt = 0
        while True:
            try:
                return func(*args)
            except ConcurrencyConflict as exc:
                attempt += 1
                if attempt >= attempts:
                    logger.error(
                        "Ledger %s gave up after %d attempts",
                        operation,
                        attempts,
                        extra={"operation": operation, "attempts": attempts},
                    )
                    exc.details["attempts"] = attempts
                    raise
                delay = backoff_delay(attempt - 1, base=self.base_delay)
                logger.warning(
                    "Ledger %s conflicted (attempt %d/%d), retrying in %.3fs",
                    operation,
                    attempt,
                    attempts,
                    delay,
                    extra={"operation": operation, "attempt": attempt},
                )
                self.sleep(delay)


# Singleton instance for convenience
facade = LedgerFacade()
