"""
Core Application - Infrastructure & Base Classes

This app contains infrastructure code shared by the domain apps
(customers, ledger). It has no knowledge of shops, customers or entries.

Models (import from core.models):
    - BaseModel: Abstract model with timestamps (created_at, updated_at)

Model Mixins (import from core.model_mixins):
    - UUIDPrimaryKeyMixin: UUID as primary key
    - SoftDeleteMixin: Soft delete support (is_deleted, deleted_at)

Managers (import from core.managers):
    - SoftDeleteManager: Filter deleted records by default
    - SoftDeleteQuerySet: QuerySet with soft delete filters

Services (import from core.services):
    - BaseService: Base class for service layer (logger, atomic blocks)

Exceptions (import from core.exceptions):
    - BaseApplicationError: Base exception with error codes
    - ValidationError: Business-rule validation failures
    - NotFoundError: Resource not found
    - ConflictError: State conflicts

Helpers (import from core.helpers):
    - clamp_page: Normalize page/page-size request values
    - calculate_pagination: Pagination metadata calculation

Views (import from core.views):
    - health_check: Liveness/readiness endpoint
    - error_response: Application error to DRF Response

Note:
    Django models and model mixins are NOT imported here to avoid
    AppRegistryNotReady errors. Import them directly from their modules.
"""

# Exceptions (no Django dependencies)
from .exceptions import (
    BaseApplicationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)

# Helpers (no Django dependencies)
from .helpers import calculate_pagination, clamp_page

__all__ = [
    # Exceptions
    "BaseApplicationError",
    "ValidationError",
    "NotFoundError",
    "ConflictError",
    # Helpers
    "calculate_pagination",
    "clamp_page",
]
