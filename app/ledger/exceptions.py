"""
Ledger-specific exceptions.

Exception Hierarchy:
    LedgerError (base)
    ├── EntryNotFound - Entry missing or owned by another shop
    ├── InvalidAmount - Amount not a finite number > 0
    ├── InvalidEntryType - Entry type not credit/payment
    ├── AlreadyReversed - Entry was already soft deleted
    ├── IdempotencyKeyReused - Key already used for a different entry
    └── ConcurrencyConflict - Transient lock/serialization failure

    CustomerNotFound (customers.exceptions) - re-exported here

Usage:
    from ledger.exceptions import AlreadyReversed, LedgerError

    try:
        facade.reverse_entry(shop_id=shop.id, entry_id=entry_id)
    except AlreadyReversed as e:
        return Response(e.to_dict(), status=409)

Note:
    ConcurrencyConflict is the only retryable error. Every other ledger
    error is deterministic and retrying it returns the same failure.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from core.exceptions import BaseApplicationError, ConflictError, NotFoundError, ValidationError
from customers.exceptions import CustomerNotFound

if TYPE_CHECKING:
    from typing import Any

__all__ = [
    "AlreadyReversed",
    "ConcurrencyConflict",
    "CustomerNotFound",
    "EntryNotFound",
    "IdempotencyKeyReused",
    "InvalidAmount",
    "InvalidEntryType",
    "LedgerError",
]


class LedgerError(BaseApplicationError):
    """
    Base exception for all ledger operations.

    Example:
        try:
            ledger.create_entry(params)
        except LedgerError as e:
            logger.error(f"Ledger operation failed: {e}")
            return Response(e.to_dict(), status=400)
    """

    default_error_code: str = "LEDGER_ERROR"


class EntryNotFound(LedgerError, NotFoundError):
    """
    Raised when a ledger entry cannot be found under the caller's shop.

    Example:
        raise EntryNotFound(
            f"Entry {entry_id} not found",
            details={"entry_id": str(entry_id)},
        )
    """

    default_error_code: str = "ENTRY_NOT_FOUND"


class InvalidAmount(LedgerError, ValidationError):
    """
    Raised when an entry amount is zero, negative, non-numeric or not finite.

    Raised before any database work starts, so a rejected amount never
    touches the account.
    """

    default_error_code: str = "INVALID_AMOUNT"

    def __init__(
        self,
        amount: Any,
        message: str | None = None,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        """
        Initialize with the rejected value.

        Args:
            amount: The value that failed validation (kept as given)
            message: Optional override for the default message
            error_code: Optional custom error code
            details: Optional additional error context
        """
        self.amount = amount

        full_details = {"amount": str(amount)}
        if details:
            full_details.update(details)

        super().__init__(
            message=message or "Amount must be a number greater than zero",
            error_code=error_code,
            details=full_details,
        )


class InvalidEntryType(LedgerError, ValidationError):
    """Raised when entry_type is neither credit nor payment."""

    default_error_code: str = "INVALID_ENTRY_TYPE"


class AlreadyReversed(LedgerError, ConflictError):
    """
    Raised when reversing an entry that is already soft deleted.

    A second reversal would apply the inverse delta twice, so it is
    rejected rather than treated as a no-op success.
    """

    default_error_code: str = "ALREADY_REVERSED"


class IdempotencyKeyReused(LedgerError, ConflictError):
    """Raised when an idempotency key is replayed with a different customer, type or amount."""

    default_error_code: str = "IDEMPOTENCY_KEY_REUSED"


class ConcurrencyConflict(LedgerError, ConflictError):
    """
    Raised when the database aborts a unit of work for a transient reason.

    Covers deadlocks, serialization failures, lock timeouts and SQLite's
    "database is locked". The unit has been rolled back in full, so the
    operation can be retried as-is.
    """

    default_error_code: str = "CONCURRENCY_CONFLICT"
