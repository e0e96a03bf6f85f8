"""
Unit of work for ledger mutations.

A UnitOfWork is one database transaction that the ledger service opens
explicitly, performs its reads and writes inside, and that commits on a
clean exit or rolls back on any exception. There is no ambient session:
the unit is visible in the code that uses it.

Transient database failures (deadlocks, serialization failures, lock
timeouts, SQLite "database is locked") surface from Django as
OperationalError. Inside a unit they are translated to
ConcurrencyConflict after the rollback, which tells the façade that the
whole operation is safe to retry.

Usage:
    from ledger.unit_of_work import UnitOfWork

    with UnitOfWork(name="create_entry") as uow:
        account = CustomerAccountStore.lock_account(shop_id, customer_id)
        ...
    # committed here

Note:
    Units must not be nested inside another open transaction when the
    caller relies on the commit point, since an inner atomic block only
    creates a savepoint.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from django.db import OperationalError, transaction

from .exceptions import ConcurrencyConflict

if TYPE_CHECKING:
    from types import TracebackType

logger = logging.getLogger(__name__)


class UnitOfWork:
    """
    Context manager wrapping django.db.transaction.atomic().

    Attributes:
        name: Operation label used in logs and error details
        committed: True after the block exits without an exception
    """

    def __init__(self, name: str = "ledger", using: str | None = None):
        self.name = name
        self.using = using
        self.committed = False
        self._atomic = None

    def __enter__(self) -> UnitOfWork:
        self._atomic = transaction.atomic(using=self.using)
        try:
            self._atomic.__enter__()
        except OperationalError as exc:
            self._atomic = None
            raise self._conflict(exc)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> bool:
        atomic, self._atomic = self._atomic, None
        try:
            atomic.__exit__(exc_type, exc, tb)
        except OperationalError as commit_exc:
            # Commit itself failed; the transaction is already rolled back
            raise self._conflict(commit_exc)

        if exc is None:
            self.committed = True
            return False

        if isinstance(exc, OperationalError):
            raise self._conflict(exc) from exc
        return False

    def _conflict(self, exc: BaseException) -> ConcurrencyConflict:
        logger.warning(
            "Unit of work %s aborted by database: %s",
            self.name,
            exc,
            extra={"unit": self.name},
        )
        return ConcurrencyConflict(
            "The operation conflicted with a concurrent update. Please retry.",
            details={"operation": self.name},
        )
