"""
Tests for SoftDeleteManager and SoftDeleteQuerySet in core/managers.py.
"""

import pytest

from core.managers import SoftDeleteQuerySet
from ledger.models import LedgerEntry
from ledger.tests.factories import LedgerEntryFactory


@pytest.fixture
def entries(db):
    live = LedgerEntryFactory()
    gone = LedgerEntryFactory(customer=live.customer)
    gone.soft_delete()
    return live, gone


@pytest.mark.django_db
class TestSoftDeleteManager:
    def test_default_queryset_excludes_deleted(self, entries):
        live, _ = entries

        assert list(LedgerEntry.objects.values_list("id", flat=True)) == [live.id]

    def test_deleted_returns_only_deleted(self, entries):
        _, gone = entries

        assert [e.id for e in LedgerEntry.objects.deleted()] == [gone.id]

    def test_has_no_unfiltered_shortcut(self, db):
        assert not hasattr(LedgerEntry.objects, "with_deleted")

    def test_returns_soft_delete_queryset(self, db):
        assert isinstance(LedgerEntry.objects.all(), SoftDeleteQuerySet)


@pytest.mark.django_db
class TestSoftDeleteQuerySet:
    def test_deleted_chains_with_filters(self, entries):
        live, gone = entries

        queryset = LedgerEntry.objects.deleted().filter(customer=live.customer)

        assert [e.id for e in queryset] == [gone.id]

    def test_all_objects_is_plain_manager(self, entries):
        assert LedgerEntry.all_objects.count() == 2
