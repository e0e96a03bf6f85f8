"""
Helper functions for common infrastructure operations.

These utilities have no knowledge of shops, customers or ledger entries.

Usage:
    from core.helpers import calculate_pagination, clamp_page

    page, per_page = clamp_page(request_page, request_size, max_size=100)
    meta = calculate_pagination(total=95, page=page, per_page=per_page)
"""

from __future__ import annotations

import math


def clamp_page(page: int | None, per_page: int | None, default_size: int = 20, max_size: int = 100) -> tuple[int, int]:
    """
    Normalize page/page-size request values.

    Args:
        page: Requested 1-based page (None or < 1 becomes 1)
        per_page: Requested page size (None uses default_size)
        default_size: Page size used when per_page is missing
        max_size: Upper bound for per_page

    Returns:
        Tuple of (page, per_page) with page >= 1 and 1 <= per_page <= max_size
    """
    page = max(1, page or 1)
    per_page = default_size if per_page is None else per_page
    per_page = max(1, min(per_page, max_size))
    return page, per_page


def calculate_pagination(total: int, page: int, per_page: int) -> dict:
    """
    Calculate pagination metadata.

    Args:
        total: Total number of items
        page: Current page number (1-indexed)
        per_page: Items per page

    Returns:
        Dict with pagination metadata

    Example:
        meta = calculate_pagination(total=95, page=2, per_page=20)
        # {"total": 95, "page": 2, "per_page": 20, "total_pages": 5,
        #  "has_next": True, "has_previous": True, ...}
    """
    total_pages = math.ceil(total / per_page) if per_page > 0 else 0

    has_next = page < total_pages
    has_previous = page > 1

    return {
        "total": total,
        "page": page,
        "per_page": per_page,
        "total_pages": total_pages,
        "has_next": has_next,
        "has_previous": has_previous,
        "next_page": page + 1 if has_next else None,
        "previous_page": page - 1 if has_previous else None,
    }
