"""
Model mixins providing reusable functionality for Django models.

Available Mixins:
    UUIDPrimaryKeyMixin: Use UUID as primary key
    SoftDeleteMixin: Soft delete support (is_deleted, deleted_at)

Usage:
    from core.models import BaseModel
    from core.model_mixins import SoftDeleteMixin, UUIDPrimaryKeyMixin
    from core.managers import SoftDeleteManager

    class LedgerEntry(UUIDPrimaryKeyMixin, SoftDeleteMixin, BaseModel):
        objects = SoftDeleteManager()
        all_objects = models.Manager()

Note:
    - Mixins are abstract and don't create database tables
    - SoftDeleteMixin expects SoftDeleteManager as the default manager
"""

from __future__ import annotations

import uuid

from django.db import models
from django.utils import timezone


class UUIDPrimaryKeyMixin(models.Model):
    """
    Use UUID as primary key instead of auto-increment integer.

    Customer and entry ids appear in URLs, so they should not reveal how
    many records a shop (or the whole system) holds.

    Fields:
        id: UUIDField as primary key (auto-generated)
    """

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
        help_text="Unique identifier for this record",
    )

    class Meta:
        abstract = True


class SoftDeleteMixin(models.Model):
    """
    Soft delete support for models.

    Instead of removing rows, marks them as deleted so they stay available
    for auditing. Default queries (through SoftDeleteManager) skip them.

    Fields:
        is_deleted: Boolean flag indicating soft delete status
        deleted_at: Timestamp when the record was soft deleted

    Usage:
        entry.soft_delete()
        LedgerEntry.objects.all()       # excludes entry
        LedgerEntry.all_objects.all()   # includes entry

    Subclasses that record extra deletion metadata (a reason, the actor)
    can pass the field names through ``extra_fields`` so everything is
    written in one UPDATE.
    """

    is_deleted = models.BooleanField(
        default=False,
        db_index=True,
        help_text="Whether this record has been soft deleted",
    )
    deleted_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text="Timestamp when this record was soft deleted",
    )

    class Meta:
        abstract = True

    def soft_delete(self, extra_fields: list[str] | None = None) -> None:
        """
        Mark this record as deleted.

        Args:
            extra_fields: Additional field names already set on the
                instance that should be saved along with the marker.
        """
        self.is_deleted = True
        self.deleted_at = timezone.now()
        update_fields = ["is_deleted", "deleted_at", "updated_at"]
        if extra_fields:
            update_fields.extend(extra_fields)
        self.save(update_fields=update_fields)
