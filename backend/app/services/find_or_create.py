"""Idempotent natural-key lookups shared by the resolver and the catalog."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Tuple, Type, TypeVar

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

LOGGER = logging.getLogger(__name__)

RowT = TypeVar("RowT")


def lookup_row(db: Session, model: Type[RowT], criteria: Mapping[str, Any]) -> Optional[RowT]:
    """Return the row matching every ``column == value`` pair, NULL-aware."""

    query = db.query(model)
    for column, value in criteria.items():
        attribute = getattr(model, column)
        query = query.filter(attribute.is_(None) if value is None else attribute == value)
    return query.first()


def find_or_create(
    db: Session, model: Type[RowT], criteria: Mapping[str, Any]
) -> Tuple[RowT, bool]:
    """Return ``(row, created)`` for the natural key in ``criteria``.

    The insert runs inside a SAVEPOINT. When a concurrent caller commits the
    same key first, the unique violation only rolls back the savepoint and
    the winner's row is read back, so the enclosing transaction survives.
    """

    instance = lookup_row(db, model, criteria)
    if instance is not None:
        return instance, False

    try:
        with db.begin_nested():
            instance = model(**criteria)
            db.add(instance)
    except IntegrityError:
        existing = lookup_row(db, model, criteria)
        if existing is None:
            raise
        LOGGER.warning(
            "Lost insert race for %s %s; reusing id %s",
            model.__name__,
            dict(criteria),
            existing.id,
        )
        return existing, False
    return instance, True
