"""
Tests for the CustomerAccount model.

Covers defaults, the per-shop phone uniqueness constraint, phone format
validation and the credit limit helper.
"""

from decimal import Decimal

import pytest
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import IntegrityError, transaction

from customers.models import CustomerAccount
from customers.tests.factories import CustomerAccountFactory


class TestCustomerAccountDefaults:
    def test_new_account_has_zero_balances(self, shop):
        account = CustomerAccount.objects.create(shop=shop, name="Suresh")

        assert account.balance == Decimal("0.00")
        assert account.total_credit == Decimal("0.00")
        assert account.total_paid == Decimal("0.00")
        assert account.is_active is True
        assert account.credit_limit is None

    def test_str_includes_name_and_balance(self, customer):
        assert str(customer) == "Ramesh (0.00)"


class TestPhoneUniqueness:
    def test_same_phone_in_same_shop_is_rejected(self, shop, customer):
        with pytest.raises(IntegrityError), transaction.atomic():
            CustomerAccountFactory(shop=shop, phone=customer.phone)

    def test_same_phone_in_different_shops_is_allowed(self, customer, other_shop):
        other = CustomerAccountFactory(shop=other_shop, phone=customer.phone)

        assert other.pk is not None

    def test_many_customers_without_phone_are_allowed(self, shop):
        CustomerAccountFactory(shop=shop, phone=None)
        CustomerAccountFactory(shop=shop, phone=None)

        assert CustomerAccount.objects.filter(shop=shop, phone__isnull=True).count() == 2


class TestPhoneValidation:
    @pytest.mark.parametrize("phone", ["9876543210", "6000000000"])
    def test_valid_mobile_numbers_pass(self, shop, phone):
        CustomerAccount(shop=shop, name="Valid", phone=phone).full_clean()

    @pytest.mark.parametrize("phone", ["1234567890", "98765", "98765abcde"])
    def test_invalid_mobile_numbers_fail(self, shop, phone):
        with pytest.raises(DjangoValidationError) as exc_info:
            CustomerAccount(shop=shop, name="Invalid", phone=phone).full_clean()

        assert "phone" in exc_info.value.message_dict


class TestIsOverLimit:
    def test_false_without_limit(self, customer):
        customer.balance = Decimal("100000.00")

        assert customer.is_over_limit is False

    def test_true_when_balance_exceeds_limit(self, customer):
        customer.credit_limit = Decimal("500.00")
        customer.balance = Decimal("500.01")

        assert customer.is_over_limit is True

    def test_false_at_exact_limit(self, customer):
        customer.credit_limit = Decimal("500.00")
        customer.balance = Decimal("500.00")

        assert customer.is_over_limit is False
