"""Error taxonomy shared by the inventory services."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

LOGGER = logging.getLogger(__name__)

GENERIC_STORAGE_MESSAGE = "Error interno al acceder a la base de datos."


class InventoryServiceError(RuntimeError):
    """Base class for failures reported by the service layer.

    ``code`` is stable and meant for clients; ``status_code`` is the HTTP
    status the routers answer with.
    """

    code = "service_error"
    status_code = 400

    def __init__(self, message: str, *, detail: dict | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.detail = detail or {}


class ValidationError(InventoryServiceError):
    """Missing field, malformed or future date, or invalid status transition."""

    code = "validation_error"
    status_code = 400


class ConflictError(InventoryServiceError):
    """Duplicate values, blocked deletions and cross-entity mismatches."""

    code = "conflict"
    status_code = 409


class HierarchyMismatch(ConflictError):
    """A room was paired with an area it does not belong to."""

    code = "hierarchy_mismatch"


class NotFoundError(InventoryServiceError):
    code = "not_found"
    status_code = 404


class StorageError(InventoryServiceError):
    """Unclassified database failure; the raw driver message is only logged."""

    code = "storage_error"
    status_code = 500

    def __init__(self, message: str = GENERIC_STORAGE_MESSAGE, **kwargs) -> None:
        super().__init__(message, **kwargs)


def describe_integrity_error(error: IntegrityError) -> str:
    message = str(getattr(error, "orig", error)).upper()
    if "UNIQUE" in message or "DUPLICATE" in message:
        return "El registro contiene valores duplicados que ya existen en la base de datos."
    if "FOREIGN KEY" in message:
        return "El registro está referenciado por otros datos o referencia datos inexistentes."
    return "No se pudo guardar el registro por una restricción de base de datos."


@contextmanager
def atomic(db: Session) -> Iterator[Session]:
    """Run a logical operation as one transaction.

    Commits on success. Any failure rolls the whole transaction back, so a
    partially created location chain or device never survives an error.
    """

    try:
        yield db
        db.commit()
    except InventoryServiceError:
        db.rollback()
        raise
    except IntegrityError as exc:
        db.rollback()
        LOGGER.warning("Integrity violation rolled back: %s", exc.orig)
        raise ConflictError(describe_integrity_error(exc)) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        LOGGER.exception("Database failure rolled back")
        raise StorageError() from exc
