"""
Base service layer patterns for business logic encapsulation.

Services encapsulate business logic separate from views and models.
Views handle HTTP concerns, models handle data, services handle logic.

Usage:
    from core.services import BaseService

    class CustomerAccountStore(BaseService):
        @classmethod
        def register(cls, shop, name):
            with cls.atomic():
                account = CustomerAccount.objects.create(shop=shop, name=name)
            cls.get_logger().info("Registered customer %s", account.id)
            return account

Design Notes:
    - Use @staticmethod or @classmethod (no instance state)
    - Raise typed exceptions from core.exceptions for expected failures
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING

from django.db import connection, transaction

from core.exceptions import ValidationError

if TYPE_CHECKING:
    from collections.abc import Generator


class BaseService:
    """
    Base class for service layer classes.

    Provides common utilities for services:
    - Logging setup per service
    - Database transaction management
    - Required-argument validation
    """

    @classmethod
    def get_logger(cls) -> logging.Logger:
        """
        Get logger for this service.

        Returns:
            Logger named ``<module>.<ClassName>`` for easy filtering
        """
        return logging.getLogger(f"{cls.__module__}.{cls.__name__}")

    @classmethod
    @contextmanager
    def atomic(cls) -> Generator[None, None, None]:
        """
        Execute operations in a database transaction.

        All database operations within this context manager commit
        together. If any operation raises, all changes are rolled back
        and the exception propagates.

        Example:
            with cls.atomic():
                account = CustomerAccount.objects.select_for_update().get(id=pk)
                account.save()
        """
        with transaction.atomic():
            yield

    @staticmethod
    def in_atomic_block() -> bool:
        """Return True when called inside an open transaction.atomic() block."""
        return connection.in_atomic_block

    @classmethod
    def validate_required(cls, **kwargs) -> None:
        """
        Validate that required arguments are provided.

        Raises:
            ValidationError: With per-field messages when any value is
                None or a blank string

        Example:
            cls.validate_required(shop_id=shop_id, name=name)
        """
        errors = {}
        for field_name, value in kwargs.items():
            if value is None or (isinstance(value, str) and not value.strip()):
                errors[field_name] = ["This field is required."]

        if errors:
            raise ValidationError(
                "Required fields missing",
                error_code="VALIDATION_ERROR",
                details=errors,
            )
