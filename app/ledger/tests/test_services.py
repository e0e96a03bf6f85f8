"""
Tests for LedgerService.

Test Organization:
    - TestCreateEntry: balance updates, balance_after, validation
    - TestAtomicity: injected failures leave the account untouched
    - TestReverseEntry: symmetric reversal and double-reversal rejection
    - TestIdempotency: repeat-safe creation with a key
    - TestShopIsolation: ids from another shop behave as missing
    - TestListEntries: filters, ordering, pagination, audit view
    - TestSummarize: totals and counts of live entries
    - TestReconciliation: drift detection and repair

Every balance assertion is paired with the invariant check
balance == sum(live credits) - sum(live payments).
"""

import uuid
from datetime import date, datetime, timedelta
from decimal import Decimal
from unittest.mock import patch

import pytest
from django.db import IntegrityError
from django.utils import timezone
from freezegun import freeze_time

from customers.exceptions import CustomerNotFound
from customers.models import CustomerAccount
from customers.tests.factories import CustomerAccountFactory
from ledger.exceptions import (
    AlreadyReversed,
    EntryNotFound,
    IdempotencyKeyReused,
    InvalidAmount,
    InvalidEntryType,
)
from ledger.models import DEFAULT_DELETED_REASON, LedgerEntry, PaymentMethod
from ledger.services import LedgerService
from ledger.tests.factories import LedgerEntryFactory, record_entry
from ledger.types import CreateEntryParams, DateRange


def assert_invariant(account):
    """Stored balances equal the sums of the account's live entries."""
    account.refresh_from_db()
    recomputed = LedgerService.recompute_balance(account)
    assert account.balance == recomputed.balance
    assert account.total_credit == recomputed.total_credit
    assert account.total_paid == recomputed.total_paid


def at(days_ago, hour=12):
    """Aware datetime `days_ago` days before today at `hour` local time."""
    day = timezone.localdate() - timedelta(days=days_ago)
    return timezone.make_aware(datetime(day.year, day.month, day.day, hour))


# =============================================================================
# Create
# =============================================================================


class TestCreateEntry:
    def test_credit_increases_balance(self, customer):
        result = record_entry(customer, "credit", "250.00")

        assert result.created is True
        assert result.account.balance == Decimal("250.00")
        assert result.account.total_credit == Decimal("250.00")
        assert result.entry.balance_after == Decimal("250.00")
        assert result.entry.payment_method is None
        assert_invariant(customer)

    def test_payment_decreases_balance_and_can_go_negative(self, customer):
        result = record_entry(customer, "payment", "100.00", payment_method="upi")

        assert result.account.balance == Decimal("-100.00")
        assert result.account.total_paid == Decimal("100.00")
        assert result.entry.payment_method == PaymentMethod.UPI
        assert_invariant(customer)

    def test_balance_after_tracks_running_balance(self, customer):
        first = record_entry(customer, "credit", "250.00")
        second = record_entry(customer, "payment", "100.00")
        third = record_entry(customer, "credit", "20.50")

        assert [first.entry.balance_after, second.entry.balance_after, third.entry.balance_after] == [
            Decimal("250.00"),
            Decimal("150.00"),
            Decimal("170.50"),
        ]
        assert_invariant(customer)

    def test_records_metadata(self, shop, customer):
        occurred = at(days_ago=3)

        result = record_entry(
            customer,
            "credit",
            "40",
            description="Rice 5kg",
            bill_number="B-17",
            occurred_at=occurred,
            created_by_id=shop.id,
        )

        entry = LedgerEntry.objects.get(id=result.entry.id)
        assert entry.description == "Rice 5kg"
        assert entry.bill_number == "B-17"
        assert entry.occurred_at == occurred
        assert entry.created_by_id == shop.id
        assert entry.shop_id == shop.id

    @pytest.mark.parametrize("amount", [0, "-5", "NaN", "abc"])
    def test_invalid_amount_leaves_balance_unchanged(self, customer, amount):
        with pytest.raises(InvalidAmount):
            record_entry(customer, "credit", amount)

        customer.refresh_from_db()
        assert customer.balance == Decimal("0.00")
        assert not LedgerEntry.all_objects.filter(customer=customer).exists()

    def test_invalid_entry_type_rejected(self, customer):
        with pytest.raises(InvalidEntryType):
            record_entry(customer, "refund", "10")

    def test_unknown_customer_raises_not_found(self, shop):
        with pytest.raises(CustomerNotFound):
            LedgerService.create_entry(
                CreateEntryParams(shop_id=shop.id, customer_id=uuid.uuid4(), entry_type="credit", amount="1")
            )

    def test_logs_creation(self, customer, caplog):
        with caplog.at_level("INFO", logger="ledger"):
            record_entry(customer, "credit", "10")

        assert "Ledger entry created" in caplog.text


class TestScenario:
    """0 -> credit 250 -> payment 100 -> reverse credit -> -100."""

    def test_full_scenario(self, shop, customer):
        credit = record_entry(customer, "credit", "250")
        assert credit.account.balance == Decimal("250.00")

        payment = record_entry(customer, "payment", "100")
        assert payment.account.balance == Decimal("150.00")

        reversed_ = LedgerService.reverse_entry(shop.id, credit.entry.id)

        assert reversed_.account.balance == Decimal("-100.00")
        assert reversed_.account.total_credit == Decimal("0.00")
        assert reversed_.account.total_paid == Decimal("100.00")
        # Historical snapshot of the later entry is not rewritten
        assert LedgerEntry.objects.get(id=payment.entry.id).balance_after == Decimal("150.00")
        assert_invariant(customer)


# =============================================================================
# Atomicity
# =============================================================================


class TestAtomicity:
    def test_failure_writing_entry_rolls_back_balance(self, customer):
        with patch.object(LedgerEntry.objects, "create", side_effect=RuntimeError("disk full")):
            with pytest.raises(RuntimeError):
                record_entry(customer, "credit", "500")

        customer.refresh_from_db()
        assert customer.balance == Decimal("0.00")
        assert customer.total_credit == Decimal("0.00")
        assert not LedgerEntry.all_objects.filter(customer=customer).exists()

    def test_failure_marking_reversal_rolls_back_balance(self, shop, customer):
        entry = record_entry(customer, "credit", "80").entry

        with patch.object(LedgerEntry, "soft_delete", side_effect=RuntimeError("crash")):
            with pytest.raises(RuntimeError):
                LedgerService.reverse_entry(shop.id, entry.id)

        customer.refresh_from_db()
        assert customer.balance == Decimal("80.00")
        assert LedgerEntry.objects.filter(id=entry.id).exists()
        assert_invariant(customer)

    def test_integrity_error_without_key_propagates(self, customer):
        with patch.object(LedgerEntry.objects, "create", side_effect=IntegrityError("boom")):
            with pytest.raises(IntegrityError):
                record_entry(customer, "credit", "5")

        customer.refresh_from_db()
        assert customer.balance == Decimal("0.00")


# =============================================================================
# Reverse
# =============================================================================


class TestReverseEntry:
    def test_reversing_payment_restores_balance(self, shop, customer):
        record_entry(customer, "credit", "250")
        payment = record_entry(customer, "payment", "100")

        result = LedgerService.reverse_entry(shop.id, payment.entry.id, reason="Entered twice")

        assert result.account.balance == Decimal("250.00")
        assert result.account.total_paid == Decimal("0.00")
        assert result.entry.is_deleted is True
        assert result.entry.deleted_at is not None
        assert result.entry.deleted_reason == "Entered twice"
        assert_invariant(customer)

    def test_default_reason(self, shop, customer):
        entry = record_entry(customer, "credit", "10").entry

        result = LedgerService.reverse_entry(shop.id, entry.id, reason="   ")

        assert result.entry.deleted_reason == DEFAULT_DELETED_REASON

    def test_second_reversal_rejected_and_balance_unchanged(self, shop, customer):
        record_entry(customer, "credit", "250")
        payment = record_entry(customer, "payment", "100")
        LedgerService.reverse_entry(shop.id, payment.entry.id)

        with pytest.raises(AlreadyReversed) as exc_info:
            LedgerService.reverse_entry(shop.id, payment.entry.id)

        assert exc_info.value.error_code == "ALREADY_REVERSED"
        customer.refresh_from_db()
        assert customer.balance == Decimal("250.00")
        assert_invariant(customer)

    def test_unknown_entry_raises_not_found(self, shop):
        with pytest.raises(EntryNotFound):
            LedgerService.reverse_entry(shop.id, uuid.uuid4())

    def test_reversal_order_does_not_matter(self, shop, customer):
        entries = [
            record_entry(customer, "credit", "30").entry,
            record_entry(customer, "payment", "12.50").entry,
            record_entry(customer, "credit", "7.25").entry,
        ]

        for entry in reversed(entries):
            LedgerService.reverse_entry(shop.id, entry.id)
            assert_invariant(customer)

        customer.refresh_from_db()
        assert customer.balance == Decimal("0.00")
        assert customer.total_credit == Decimal("0.00")
        assert customer.total_paid == Decimal("0.00")


# =============================================================================
# Idempotency
# =============================================================================


class TestIdempotency:
    def test_repeat_with_same_key_returns_original(self, customer):
        first = record_entry(customer, "payment", "100", idempotency_key="pos-123")
        second = record_entry(customer, "payment", "100", idempotency_key="pos-123")

        assert second.created is False
        assert second.entry.id == first.entry.id
        assert second.account.balance == Decimal("-100.00")
        assert LedgerEntry.objects.filter(customer=customer).count() == 1

    def test_without_key_duplicates_are_recorded(self, customer):
        record_entry(customer, "payment", "100")
        record_entry(customer, "payment", "100")

        customer.refresh_from_db()
        assert customer.balance == Decimal("-200.00")

    @pytest.mark.parametrize(
        "entry_type, amount",
        [("payment", "99"), ("credit", "100")],
    )
    def test_reused_key_with_different_request_conflicts(self, customer, entry_type, amount):
        record_entry(customer, "payment", "100", idempotency_key="pos-123")

        with pytest.raises(IdempotencyKeyReused) as exc_info:
            record_entry(customer, entry_type, amount, idempotency_key="pos-123")

        assert exc_info.value.error_code == "IDEMPOTENCY_KEY_REUSED"
        customer.refresh_from_db()
        assert customer.balance == Decimal("-100.00")

    def test_reused_key_for_other_customer_conflicts(self, shop, customer):
        other = CustomerAccountFactory(shop=shop)
        record_entry(customer, "credit", "10", idempotency_key="k9")

        with pytest.raises(IdempotencyKeyReused):
            record_entry(other, "credit", "10", idempotency_key="k9")

        other.refresh_from_db()
        assert other.balance == Decimal("0.00")

    def test_same_key_in_other_shop_is_independent(self, customer, foreign_customer):
        record_entry(customer, "credit", "10", idempotency_key="k1")
        other = record_entry(foreign_customer, "credit", "10", idempotency_key="k1")

        assert other.created is True

    def test_key_committed_concurrently_is_replayed(self, customer):
        existing = record_entry(customer, "credit", "60", idempotency_key="race")
        missed_then_found = [None, existing.entry]

        with patch.object(
            LedgerService,
            "_find_by_idempotency_key",
            side_effect=lambda shop_id, key: missed_then_found.pop(0),
        ):
            result = record_entry(customer, "credit", "60", idempotency_key="race")

        assert result.created is False
        assert result.entry.id == existing.entry.id
        customer.refresh_from_db()
        assert customer.balance == Decimal("60.00")


# =============================================================================
# Shop isolation
# =============================================================================


class TestShopIsolation:
    def test_cannot_record_against_other_shops_customer(self, shop, foreign_customer):
        with pytest.raises(CustomerNotFound):
            LedgerService.create_entry(
                CreateEntryParams(
                    shop_id=shop.id, customer_id=foreign_customer.id, entry_type="credit", amount="10"
                )
            )

        foreign_customer.refresh_from_db()
        assert foreign_customer.balance == Decimal("0.00")

    def test_cannot_reverse_or_read_other_shops_entry(self, other_shop, shop, foreign_customer):
        entry = record_entry(foreign_customer, "credit", "10").entry

        with pytest.raises(EntryNotFound):
            LedgerService.reverse_entry(shop.id, entry.id)
        with pytest.raises(EntryNotFound):
            LedgerService.get_entry(shop.id, entry.id)

        assert LedgerService.get_entry(other_shop.id, entry.id) == entry

    def test_listing_never_shows_other_shops_entries(self, shop, customer, foreign_customer):
        record_entry(customer, "credit", "1")
        record_entry(foreign_customer, "credit", "2")

        page = LedgerService.list_entries(shop.id)

        assert page.total == 1
        assert page.entries[0].customer_id == customer.id

    def test_listing_by_other_shops_customer_raises(self, shop, foreign_customer):
        with pytest.raises(CustomerNotFound):
            LedgerService.list_entries(shop.id, customer_id=foreign_customer.id)


# =============================================================================
# Listing
# =============================================================================


class TestListEntries:
    def test_newest_occurred_at_first(self, shop, customer):
        old = record_entry(customer, "credit", "1", occurred_at=at(days_ago=5)).entry
        new = record_entry(customer, "credit", "2", occurred_at=at(days_ago=1)).entry
        backdated = record_entry(customer, "credit", "3", occurred_at=at(days_ago=3)).entry

        page = LedgerService.list_entries(shop.id)

        assert [e.id for e in page.entries] == [new.id, backdated.id, old.id]

    def test_filters_by_customer_and_type(self, shop, customer):
        other = CustomerAccountFactory(shop=shop)
        record_entry(customer, "credit", "10")
        payment = record_entry(customer, "payment", "5").entry
        record_entry(other, "payment", "7")

        page = LedgerService.list_entries(shop.id, customer_id=customer.id, entry_type="payment")

        assert [e.id for e in page.entries] == [payment.id]

    def test_filters_by_date_range(self, shop, customer):
        record_entry(customer, "credit", "1", occurred_at=at(days_ago=10))
        inside = record_entry(customer, "credit", "2", occurred_at=at(days_ago=4)).entry
        record_entry(customer, "credit", "3", occurred_at=at(days_ago=0))

        today = timezone.localdate()
        date_range = DateRange.from_dates(today - timedelta(days=5), today - timedelta(days=2))
        page = LedgerService.list_entries(shop.id, date_range=date_range)

        assert [e.id for e in page.entries] == [inside.id]

    def test_pagination(self, shop, customer):
        for i in range(5):
            record_entry(customer, "credit", "1", occurred_at=at(days_ago=i))

        page = LedgerService.list_entries(shop.id, page=2, page_size=2)

        assert page.total == 5
        assert page.page == 2
        assert page.total_pages == 3
        assert len(page.entries) == 2

    def test_page_size_is_clamped(self, shop, customer, settings):
        settings.LEDGER_MAX_PAGE_SIZE = 3
        for _ in range(4):
            record_entry(customer, "credit", "1")

        page = LedgerService.list_entries(shop.id, page=0, page_size=500)

        assert page.page == 1
        assert page.page_size == 3
        assert len(page.entries) == 3

    def test_deleted_entries_only_in_audit_view(self, shop, customer):
        kept = record_entry(customer, "credit", "5").entry
        removed = record_entry(customer, "credit", "6").entry
        LedgerService.reverse_entry(shop.id, removed.id)

        live = LedgerService.list_entries(shop.id)
        audit = LedgerService.list_entries(shop.id, include_deleted=True)

        assert [e.id for e in live.entries] == [kept.id]
        assert {e.id for e in audit.entries} == {kept.id, removed.id}

    def test_recent_entries_limit(self, shop, customer):
        for _ in range(4):
            record_entry(customer, "credit", "1")

        assert len(LedgerService.recent_entries(shop.id, customer.id, limit=3)) == 3


# =============================================================================
# Summaries
# =============================================================================


class TestSummarize:
    def test_totals_and_counts_exclude_deleted(self, shop, customer):
        record_entry(customer, "credit", "250")
        record_entry(customer, "credit", "50")
        payment = record_entry(customer, "payment", "100").entry
        record_entry(customer, "payment", "30")
        LedgerService.reverse_entry(shop.id, payment.id)

        summary = LedgerService.summarize(shop.id)

        assert summary.credit_total == Decimal("300.00")
        assert summary.credit_count == 2
        assert summary.payment_total == Decimal("30.00")
        assert summary.payment_count == 1
        assert summary.net == Decimal("270.00")

    def test_empty_summary_is_zero(self, shop):
        summary = LedgerService.summarize(shop.id)

        assert summary.credit_total == Decimal("0.00")
        assert summary.credit_count == 0
        assert summary.payment_total == Decimal("0.00")
        assert summary.payment_count == 0

    def test_scoped_to_customer_and_range(self, shop, customer):
        other = CustomerAccountFactory(shop=shop)
        record_entry(customer, "credit", "10", occurred_at=at(days_ago=1))
        record_entry(customer, "credit", "20", occurred_at=at(days_ago=8))
        record_entry(other, "credit", "99", occurred_at=at(days_ago=1))

        today = timezone.localdate()
        summary = LedgerService.summarize(
            shop.id,
            date_range=DateRange.from_dates(today - timedelta(days=2), today),
            customer_id=customer.id,
        )

        assert summary.credit_total == Decimal("10.00")
        assert summary.credit_count == 1

    def test_summarize_today_uses_local_day(self, shop, customer, settings):
        settings.TIME_ZONE = "Asia/Kolkata"
        with freeze_time("2024-05-10 20:00:00"):
            # 01:30 on 11 May in the shop's time zone
            record_entry(customer, "credit", "15")
        with freeze_time("2024-05-10 10:00:00"):
            record_entry(customer, "payment", "5")

        with freeze_time("2024-05-11 06:00:00"):
            today = LedgerService.summarize_today(shop.id)

        assert today.credit_total == Decimal("15.00")
        assert today.payment_count == 0

    def test_explicit_dates(self, shop, customer):
        occurred = timezone.make_aware(datetime(2024, 1, 15, 11, 0))
        record_entry(customer, "payment", "45", occurred_at=occurred)

        summary = LedgerService.summarize(
            shop.id, date_range=DateRange.from_dates(date(2024, 1, 15), date(2024, 1, 15))
        )

        assert summary.payment_total == Decimal("45.00")


# =============================================================================
# Reconciliation
# =============================================================================


class TestReconciliation:
    def test_consistent_accounts_report_no_drift(self, shop, customer):
        record_entry(customer, "credit", "100")
        record_entry(customer, "payment", "40")

        assert LedgerService.find_balance_drift(shop_id=shop.id) == []

    def test_recomputed_values_are_two_place_money(self, customer):
        for amount in ["0.10", "0.20", "0.07", "1.01", "33.33", "0.01"]:
            record_entry(customer, "credit", amount)
        record_entry(customer, "payment", "0.30")

        snapshot = LedgerService.recompute_balance(customer)

        assert snapshot.to_dict() == {
            "balance": "34.42",
            "total_credit": "34.72",
            "total_paid": "0.30",
        }
        assert LedgerService.find_balance_drift(accounts=[CustomerAccount.objects.get(id=customer.id)]) == []

    def test_whole_amounts_keep_cents(self, shop, customer):
        record_entry(customer, "credit", "100")
        record_entry(customer, "payment", "40")

        assert LedgerService.recompute_balance(customer).to_dict()["balance"] == "60.00"
        summary = LedgerService.summarize(shop.id)
        assert str(summary.credit_total) == "100.00"
        assert str(summary.payment_total) == "40.00"

    def test_tampered_balance_is_detected(self, shop, customer):
        record_entry(customer, "credit", "100")
        CustomerAccount.objects.filter(id=customer.id).update(balance=Decimal("1.00"))

        drifts = LedgerService.find_balance_drift(shop_id=shop.id)

        assert len(drifts) == 1
        assert drifts[0].customer_id == customer.id
        assert drifts[0].stored.balance == Decimal("1.00")
        assert drifts[0].computed.balance == Decimal("100.00")

    def test_entry_written_outside_engine_is_detected(self, shop, customer):
        LedgerEntryFactory(customer=customer, amount=Decimal("10.00"))

        drifts = LedgerService.find_balance_drift(accounts=[customer])

        assert drifts[0].computed.total_credit == Decimal("10.00")

    def test_repair_overwrites_with_recomputed_values(self, shop, customer):
        record_entry(customer, "credit", "100")
        record_entry(customer, "payment", "30")
        CustomerAccount.objects.filter(id=customer.id).update(
            balance=Decimal("0.00"), total_credit=Decimal("0.00")
        )

        drift = LedgerService.repair_balance(shop.id, customer.id)

        assert drift.repaired is True
        customer.refresh_from_db()
        assert customer.balance == Decimal("70.00")
        assert customer.total_credit == Decimal("100.00")
        assert_invariant(customer)

    def test_repair_of_consistent_account_is_noop(self, shop, customer):
        record_entry(customer, "credit", "5")

        assert LedgerService.repair_balance(shop.id, customer.id) is None
