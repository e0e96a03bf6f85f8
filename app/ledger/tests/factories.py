"""
Factory Boy factories and helpers for ledger tests.

Usage:
    from ledger.tests.factories import LedgerEntryFactory, record_entry

    # Through the engine (balance updated)
    result = record_entry(customer, "credit", "250.00")

    # Raw row (balance NOT updated), for drift and audit tests
    LedgerEntryFactory(customer=customer, amount=Decimal("10.00"))
"""

from decimal import Decimal

import factory

from customers.tests.factories import CustomerAccountFactory
from ledger.models import EntryType, LedgerEntry
from ledger.services import LedgerService
from ledger.types import CreateEntryParams


class LedgerEntryFactory(factory.django.DjangoModelFactory):
    """
    Factory for LedgerEntry rows that bypass the ledger engine.

    The customer's balance is left untouched, so a factory entry on its
    own puts the account out of step with its entry log.
    """

    class Meta:
        model = LedgerEntry

    customer = factory.SubFactory(CustomerAccountFactory)
    shop = factory.SelfAttribute("customer.shop")
    entry_type = EntryType.CREDIT
    amount = Decimal("100.00")
    balance_after = factory.LazyAttribute(lambda o: o.amount)
    description = ""


def record_entry(customer, entry_type, amount, **kwargs):
    """Record an entry for `customer` through LedgerService."""
    return LedgerService.create_entry(
        CreateEntryParams(
            shop_id=customer.shop_id,
            customer_id=customer.id,
            entry_type=entry_type,
            amount=amount,
            **kwargs,
        )
    )
