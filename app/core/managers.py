"""
Custom QuerySet and Manager classes for soft-deleted models.

Usage:
    from core.managers import SoftDeleteManager

    class LedgerEntry(SoftDeleteMixin, BaseModel):
        objects = SoftDeleteManager()   # Default: excludes deleted
        all_objects = models.Manager()  # Includes deleted

    LedgerEntry.objects.filter(customer=customer)      # live entries
    LedgerEntry.objects.deleted()                      # reversed entries
    LedgerEntry.all_objects.filter(...)                # audit view

Note:
    Bulk ``delete()`` stays a hard delete. Soft deleting a ledger entry
    also reverses its balance effect, so that transition belongs to
    LedgerService and goes through the instance method.
"""

from __future__ import annotations

from django.db import models


class SoftDeleteQuerySet(models.QuerySet):
    """
    QuerySet with explicit filters for the soft-delete flag.

    Methods:
        deleted(): Filter to only deleted records
    """

    def deleted(self) -> SoftDeleteQuerySet:
        """Filter to only soft-deleted records."""
        return self.filter(is_deleted=True)


class SoftDeleteManager(models.Manager):
    """
    Manager that filters out soft-deleted records by default.

    Always pair with a plain Manager (``all_objects``) so admin and audit
    code can reach deleted rows.
    """

    def get_queryset(self) -> SoftDeleteQuerySet:
        """Return queryset excluding soft-deleted records."""
        return SoftDeleteQuerySet(self.model, using=self._db).filter(is_deleted=False)

    def deleted(self) -> SoftDeleteQuerySet:
        """Shortcut to get only deleted records."""
        return SoftDeleteQuerySet(self.model, using=self._db).filter(is_deleted=True)
