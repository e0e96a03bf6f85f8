"""
Customer-specific exceptions.

Exception Hierarchy:
    CustomerError (base)
    ├── CustomerNotFound - Lookup by (shop, id) failed
    ├── OutstandingBalance - Deactivation refused while balance != 0
    └── DuplicateCustomer - Phone number already registered for the shop

CustomerNotFound is also raised by the ledger engine when an entry
targets a customer outside the caller's shop; ledger.exceptions re-exports
it so ledger callers can catch every ledger failure from one module.
"""

from __future__ import annotations

from core.exceptions import BaseApplicationError, ConflictError, NotFoundError


class CustomerError(BaseApplicationError):
    """Base exception for customer account operations."""

    default_error_code: str = "CUSTOMER_ERROR"


class CustomerNotFound(CustomerError, NotFoundError):
    """
    Raised when a customer account does not exist under the given shop.

    Example:
        raise CustomerNotFound(
            f"Customer {customer_id} not found",
            details={"customer_id": str(customer_id)},
        )
    """

    default_error_code: str = "CUSTOMER_NOT_FOUND"


class OutstandingBalance(CustomerError, ConflictError):
    """Raised when deactivating a customer whose balance is not zero."""

    default_error_code: str = "OUTSTANDING_BALANCE"


class DuplicateCustomer(CustomerError, ConflictError):
    """Raised when a shop registers a second customer with the same phone."""

    default_error_code: str = "DUPLICATE_CUSTOMER"
