"""Translate building/floor/area/room descriptions into location rows."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.orm import Session

from .. import models
from .errors import HierarchyMismatch, NotFoundError, ValidationError, atomic
from .find_or_create import find_or_create

LOGGER = logging.getLogger(__name__)


def clean_text(value: Optional[str]) -> Optional[str]:
    """Trim user input and fold blank strings into ``None``."""

    if value is None:
        return None
    stripped = value.strip()
    return stripped or None


@dataclass(frozen=True)
class ResolvedLocation:
    location: models.Location
    created: bool


class LocationResolver:
    """Find-or-create for the whole hierarchy chain.

    The ``resolve*`` methods only flush; callers decide where the transaction
    ends so the chain and whatever uses it commit together.
    """

    @staticmethod
    def resolve(
        db: Session,
        *,
        building: Optional[str],
        floor: Optional[str],
        area: Optional[str],
        room: Optional[str] = None,
        details: Optional[str] = None,
    ) -> ResolvedLocation:
        building_name = clean_text(building)
        floor_name = clean_text(floor)
        area_name = clean_text(area)
        missing = [
            label
            for label, value in (
                ("edificio", building_name),
                ("piso", floor_name),
                ("área", area_name),
            )
            if value is None
        ]
        if missing:
            raise ValidationError(
                "Edificio, piso y área son obligatorios.",
                detail={"missing": missing},
            )

        building_row, _ = find_or_create(db, models.Building, {"name": building_name})
        floor_row, _ = find_or_create(
            db, models.Floor, {"building_id": building_row.id, "name": floor_name}
        )
        area_row, _ = find_or_create(
            db, models.Area, {"floor_id": floor_row.id, "name": area_name}
        )
        room_row = None
        room_name = clean_text(room)
        if room_name is not None:
            room_row, _ = find_or_create(
                db, models.Room, {"area_id": area_row.id, "name": room_name}
            )
        return LocationResolver._find_or_create_location(db, area_row, room_row, details)

    @staticmethod
    def resolve_ids(
        db: Session,
        *,
        area_id: int,
        room_id: Optional[int] = None,
        details: Optional[str] = None,
    ) -> ResolvedLocation:
        area = db.get(models.Area, area_id)
        if area is None:
            raise NotFoundError("El área indicada no existe.")
        room = None
        if room_id is not None:
            room = db.get(models.Room, room_id)
            if room is None:
                raise NotFoundError("La habitación indicada no existe.")
        return LocationResolver._find_or_create_location(db, area, room, details)

    @staticmethod
    def find_or_create(
        db: Session,
        *,
        building: Optional[str],
        floor: Optional[str],
        area: Optional[str],
        room: Optional[str] = None,
        details: Optional[str] = None,
    ) -> ResolvedLocation:
        """Resolve a path in its own transaction and commit it."""

        with atomic(db):
            resolved = LocationResolver.resolve(
                db, building=building, floor=floor, area=area, room=room, details=details
            )
        if resolved.created:
            LOGGER.info(
                "Created location %s (%s > %s > %s > %s)",
                resolved.location.id,
                building,
                floor,
                area,
                room or "-",
            )
        return resolved

    @staticmethod
    def _find_or_create_location(
        db: Session,
        area: models.Area,
        room: Optional[models.Room],
        details: Optional[str],
    ) -> ResolvedLocation:
        if room is not None and room.area_id != area.id:
            raise HierarchyMismatch(
                "La habitación no pertenece al área indicada.",
                detail={"area_id": area.id, "room_id": room.id, "room_area_id": room.area_id},
            )
        location, created = find_or_create(
            db,
            models.Location,
            {
                "area_id": area.id,
                "room_id": room.id if room is not None else None,
                "details": clean_text(details),
            },
        )
        return ResolvedLocation(location=location, created=created)
