"""
Celery tasks for the ledger.

This module provides async tasks for:
- Nightly balance reconciliation (recompute every balance from the entry
  log and report accounts that drifted)
- Repairing a single drifted account on demand

Usage:
    from ledger.tasks import reconcile_customer_balances

    # Report drift for one shop
    reconcile_customer_balances.delay(shop_id=shop.id)

    # Scheduled run for all shops (celery-beat, see CELERY_BEAT_SCHEDULE)
    reconcile_customer_balances.delay()
"""

from __future__ import annotations

import logging
from uuid import UUID

from celery import shared_task

from customers.exceptions import CustomerNotFound

from .services import LedgerService

logger = logging.getLogger(__name__)


# =============================================================================
# Reconciliation Tasks
# =============================================================================


@shared_task(bind=True, acks_late=True)
def reconcile_customer_balances(self, shop_id: int | None = None) -> dict:
    """
    Recompute customer balances and report drift.

    Read-only: drifted accounts are logged at ERROR with the stored and
    recomputed values. Use repair_customer_balance to fix one.

    Args:
        shop_id: Restrict to one shop (all shops when None)

    Returns:
        Dict with status, accounts_checked, drift_count and drifted_accounts
    """
    from customers.models import CustomerAccount

    accounts = CustomerAccount.objects.all()
    if shop_id is not None:
        accounts = accounts.filter(shop_id=shop_id)
    accounts_checked = accounts.count()

    logger.info(
        "Starting balance reconciliation",
        extra={"shop_id": shop_id, "accounts": accounts_checked, "task_id": self.request.id},
    )

    drifts = LedgerService.find_balance_drift(shop_id=shop_id)
    for drift in drifts:
        logger.error(
            "Customer balance drift detected",
            extra=drift.to_dict(),
        )

    logger.info(
        "Balance reconciliation complete",
        extra={"shop_id": shop_id, "accounts": accounts_checked, "drift_count": len(drifts)},
    )
    return {
        "status": "drift_detected" if drifts else "ok",
        "accounts_checked": accounts_checked,
        "drift_count": len(drifts),
        "drifted_accounts": [drift.to_dict() for drift in drifts],
    }


@shared_task(bind=True)
def repair_customer_balance(self, shop_id: int, customer_id: str) -> dict:
    """
    Overwrite one account's balance columns with recomputed values.

    Args:
        shop_id: Owning shop id
        customer_id: UUID of the customer account

    Returns:
        Dict with status ("repaired", "consistent" or "not_found")
    """
    if isinstance(customer_id, str):
        customer_id = UUID(customer_id)

    try:
        drift = LedgerService.repair_balance(shop_id, customer_id)
    except CustomerNotFound:
        logger.error(
            "Cannot repair balance, customer not found",
            extra={"shop_id": shop_id, "customer_id": str(customer_id)},
        )
        return {"status": "not_found", "customer_id": str(customer_id)}

    if drift is None:
        return {"status": "consistent", "customer_id": str(customer_id)}
    return {"status": "repaired", **drift.to_dict()}
