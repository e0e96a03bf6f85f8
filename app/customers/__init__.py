"""
Customers application.

Holds one CustomerAccount per customer of a shop. The account carries the
running balance that the ledger maintains; everything else on it is
profile data editable through the API.

Key components:
    - CustomerAccount model: profile fields plus balance/total_credit/total_paid
    - CustomerAccountStore: row access, locking and balance deltas for the
      ledger, plus registration/listing/deactivation for the API

Usage:
    from customers.store import CustomerAccountStore
"""
