"""
Tests for UnitOfWork.

Covers commit, rollback on error and translation of database
OperationalError into ConcurrencyConflict.
"""

import pytest
from django.db import OperationalError

from customers.models import CustomerAccount
from ledger.exceptions import ConcurrencyConflict
from ledger.unit_of_work import UnitOfWork


class TestUnitOfWork:
    def test_clean_exit_commits(self, shop):
        with UnitOfWork(name="test") as uow:
            CustomerAccount.objects.create(shop=shop, name="Committed")

        assert uow.committed is True
        assert CustomerAccount.objects.filter(name="Committed").exists()

    def test_exception_rolls_back_and_propagates(self, shop):
        uow = UnitOfWork(name="test")

        with pytest.raises(RuntimeError):
            with uow:
                CustomerAccount.objects.create(shop=shop, name="Discarded")
                raise RuntimeError("boom")

        assert uow.committed is False
        assert not CustomerAccount.objects.filter(name="Discarded").exists()

    def test_operational_error_becomes_concurrency_conflict(self, shop):
        with pytest.raises(ConcurrencyConflict) as exc_info:
            with UnitOfWork(name="create_entry"):
                CustomerAccount.objects.create(shop=shop, name="Locked")
                raise OperationalError("database is locked")

        assert exc_info.value.details == {"operation": "create_entry"}
        assert isinstance(exc_info.value.__cause__, OperationalError)
        assert not CustomerAccount.objects.filter(name="Locked").exists()

    def test_conflict_is_logged(self, shop, caplog):
        with pytest.raises(ConcurrencyConflict):
            with UnitOfWork(name="reverse_entry"):
                raise OperationalError("deadlock detected")

        assert "reverse_entry" in caplog.text
