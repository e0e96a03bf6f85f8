"""
Base exception classes shared by every app in the project.

Domain errors carry a human-readable message, a machine-readable error
code and an optional details dict. Views turn them into JSON bodies via
``to_dict()`` so API clients can branch on ``error_code``.

Exception Hierarchy:
    BaseApplicationError (base)
    ├── ValidationError - Input rejected by business rules
    ├── NotFoundError - Resource missing or owned by another shop
    └── ConflictError - State conflicts (already applied, concurrent writes)

Usage:
    from core.exceptions import NotFoundError

    raise NotFoundError(
        "Customer not found",
        error_code="CUSTOMER_NOT_FOUND",
        details={"customer_id": str(customer_id)},
    )

    try:
        ...
    except BaseApplicationError as e:
        return Response(e.to_dict(), status=400)

Note:
    DRF still owns request-shape errors (serializer validation,
    authentication). These classes are for service-layer failures.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import Any


class BaseApplicationError(Exception):
    """
    Base exception for all application-specific errors.

    Attributes:
        message: Human-readable error description
        error_code: Machine-readable code for client-side handling
        details: Additional error context (ids, amounts, field errors)

    Example:
        try:
            facade.reverse_entry(shop_id=shop.id, entry_id=entry_id)
        except BaseApplicationError as e:
            logger.warning("Reverse failed: %s", e.error_code)
            return Response(e.to_dict(), status=409)
    """

    default_error_code: str = "APPLICATION_ERROR"

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        """
        Initialize the exception.

        Args:
            message: Human-readable error description
            error_code: Machine-readable error code (defaults to class default)
            details: Additional error context
        """
        self.message = message
        self.error_code = error_code or self.default_error_code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """
        Convert exception to dictionary for API response.

        Returns:
            Dict with error and error_code keys, plus details when present

        Example:
            {
                "error": "Entry already reversed",
                "error_code": "ALREADY_REVERSED",
                "details": {"entry_id": "3f0c..."}
            }
        """
        result: dict[str, Any] = {
            "error": self.message,
            "error_code": self.error_code,
        }
        if self.details:
            result["details"] = self.details
        return result

    def __str__(self) -> str:
        return f"[{self.error_code}] {self.message}"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"error_code={self.error_code!r}, "
            f"details={self.details!r})"
        )


class ValidationError(BaseApplicationError):
    """
    Raised when a value passes request parsing but fails a business rule.

    Example:
        raise ValidationError(
            "Amount must be greater than zero",
            error_code="INVALID_AMOUNT",
            details={"amount": "0"},
        )
    """

    default_error_code: str = "VALIDATION_ERROR"


class NotFoundError(BaseApplicationError):
    """
    Raised when a requested resource does not exist.

    Resources owned by a different shop are reported the same way so that
    callers cannot discover ids outside their own partition.
    """

    default_error_code: str = "NOT_FOUND"


class ConflictError(BaseApplicationError):
    """
    Raised when an operation conflicts with current state.

    Use for:
    - Repeating a one-shot transition (reversing a reversed entry)
    - Lock or serialization failures between concurrent writers
    - Deactivating a record that still carries a balance
    """

    default_error_code: str = "CONFLICT"
