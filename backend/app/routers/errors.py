"""Translation of service-layer failures into HTTP responses."""

from __future__ import annotations

from fastapi import HTTPException

from ..services.errors import GENERIC_STORAGE_MESSAGE, InventoryServiceError, StorageError


def as_http_exception(exc: InventoryServiceError) -> HTTPException:
    """Build the ``HTTPException`` answering a service error.

    The body is ``{"code": ..., "message": ...}`` plus any structured detail
    the service attached. Storage failures never expose their cause.
    """

    if isinstance(exc, StorageError):
        return HTTPException(
            status_code=exc.status_code,
            detail={"code": exc.code, "message": GENERIC_STORAGE_MESSAGE},
        )
    detail = {"code": exc.code, "message": exc.message}
    if exc.detail:
        detail["detail"] = exc.detail
    return HTTPException(status_code=exc.status_code, detail=detail)
