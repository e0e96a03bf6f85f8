"""
Ledger application.

Records credits and payments against customer accounts and keeps every
account's balance equal to the sum of its live entries.

Key components:
    - LedgerEntry model: one credit or payment; reversal is a soft delete
    - LedgerService: transactional engine (create, reverse, list, summarize,
      reconcile); never retries
    - LedgerFacade: argument shaping plus bounded retry of ConcurrencyConflict
    - UnitOfWork: explicit transaction boundary for each mutation
    - tasks: nightly balance reconciliation

Usage:
    from ledger.facade import facade

    result = facade.create_entry(
        shop_id=shop.id,
        customer_id=customer.id,
        entry_type="credit",
        amount="250.00",
    )
    facade.reverse_entry(shop_id=shop.id, entry_id=result.entry.id)
"""
