"""
Core views providing infrastructure endpoints.

This module contains views that are not part of the business domain but are
essential for application infrastructure, such as health checks, plus the
translation of service-layer errors into API responses.
"""

from __future__ import annotations

import logging

from django.core.cache import cache
from django.db import DatabaseError, connection
from django.http import JsonResponse
from rest_framework import status
from rest_framework.response import Response

from core.exceptions import BaseApplicationError, ConflictError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)

# Checked in order; the first matching class wins
ERROR_STATUS_MAP = (
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ConflictError, status.HTTP_409_CONFLICT),
)


def error_response(exc: BaseApplicationError, status_code: int | None = None) -> Response:
    """
    Build a DRF Response for a service-layer error.

    Args:
        exc: The raised application error
        status_code: Explicit status overriding the class mapping

    Returns:
        Response with exc.to_dict() as the body

    Example:
        try:
            result = facade.reverse_entry(shop_id=request.user.id, entry_id=entry_id)
        except LedgerError as e:
            return error_response(e)
    """
    if status_code is None:
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
        for error_class, mapped_status in ERROR_STATUS_MAP:
            if isinstance(exc, error_class):
                status_code = mapped_status
                break

    if status_code >= 500:
        logger.error("Request failed: %s", exc, extra={"error_code": exc.error_code})
    return Response(exc.to_dict(), status=status_code)


def health_check(request):
    """
    Health check endpoint for monitoring and orchestration.

    Returns:
        JsonResponse with status and component health:
        - status: "healthy" or "unhealthy"
        - database: "connected" or "disconnected"
        - cache: "connected" or "disconnected"

    HTTP Status Codes:
        200: Database reachable
        503: Database unreachable

    Example Response:
        {
            "status": "healthy",
            "database": "connected",
            "cache": "connected"
        }
    """
    health_status = {
        "status": "healthy",
        "database": "unknown",
        "cache": "unknown",
    }
    is_healthy = True

    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
            cursor.fetchone()
        health_status["database"] = "connected"
    except DatabaseError:
        logger.exception("Health check: database unreachable")
        health_status["database"] = "disconnected"
        health_status["status"] = "unhealthy"
        is_healthy = False

    # Cache failure degrades but does not fail the check
    try:
        cache.set("health_check", "ok", timeout=1)
        health_status["cache"] = "connected" if cache.get("health_check") == "ok" else "disconnected"
    except Exception:
        logger.warning("Health check: cache unreachable", exc_info=True)
        health_status["cache"] = "disconnected"

    return JsonResponse(health_status, status=200 if is_healthy else 503)
