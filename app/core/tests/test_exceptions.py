"""
Tests for the application exception hierarchy.
"""

from core.exceptions import BaseApplicationError, ConflictError, NotFoundError, ValidationError
from customers.exceptions import CustomerNotFound, OutstandingBalance
from ledger.exceptions import AlreadyReversed, ConcurrencyConflict, IdempotencyKeyReused, InvalidAmount


class TestBaseApplicationError:
    def test_defaults(self):
        error = BaseApplicationError("Something broke")

        assert error.message == "Something broke"
        assert error.error_code == "APPLICATION_ERROR"
        assert error.details == {}
        assert str(error) == "[APPLICATION_ERROR] Something broke"

    def test_to_dict_omits_empty_details(self):
        assert NotFoundError("Missing").to_dict() == {"error": "Missing", "error_code": "NOT_FOUND"}

    def test_to_dict_includes_details(self):
        error = ValidationError("Bad", error_code="CUSTOM", details={"field": ["required"]})

        assert error.to_dict() == {
            "error": "Bad",
            "error_code": "CUSTOM",
            "details": {"field": ["required"]},
        }

    def test_repr(self):
        assert repr(ConflictError("Busy")) == (
            "ConflictError(message='Busy', error_code='CONFLICT', details={})"
        )


class TestDomainHierarchy:
    def test_ledger_errors_map_to_http_categories(self):
        assert isinstance(InvalidAmount("0"), ValidationError)
        assert isinstance(AlreadyReversed("done"), ConflictError)
        assert isinstance(IdempotencyKeyReused("reused"), ConflictError)
        assert isinstance(ConcurrencyConflict("locked"), ConflictError)
        assert isinstance(CustomerNotFound("gone"), NotFoundError)
        assert isinstance(OutstandingBalance("owes"), ConflictError)

    def test_invalid_amount_keeps_value(self):
        error = InvalidAmount("-5")

        assert error.amount == "-5"
        assert error.error_code == "INVALID_AMOUNT"
        assert error.details == {"amount": "-5"}
