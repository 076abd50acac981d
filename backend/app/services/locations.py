"""Business logic for the building > floor > area > room hierarchy."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Optional, Type

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from .. import models, schemas
from .errors import ConflictError, HierarchyMismatch, NotFoundError, ValidationError, atomic
from .find_or_create import lookup_row
from .location_resolver import LocationResolver, ResolvedLocation, clean_text

LOGGER = logging.getLogger(__name__)


class HierarchyKind(str, enum.Enum):
    """Entity kinds addressable by the management endpoints."""

    BUILDINGS = "buildings"
    FLOORS = "floors"
    AREAS = "areas"
    ROOMS = "rooms"
    LOCATIONS = "locations"


@dataclass(frozen=True)
class _HierarchyLevel:
    model: Type
    label: str
    parent_column: Optional[str]


_LEVELS = {
    HierarchyKind.BUILDINGS: _HierarchyLevel(models.Building, "edificio", None),
    HierarchyKind.FLOORS: _HierarchyLevel(models.Floor, "piso", "building_id"),
    HierarchyKind.AREAS: _HierarchyLevel(models.Area, "área", "floor_id"),
    HierarchyKind.ROOMS: _HierarchyLevel(models.Room, "habitación", "area_id"),
    HierarchyKind.LOCATIONS: _HierarchyLevel(models.Location, "ubicación", None),
}


def _location_query(db: Session):
    return db.query(models.Location).options(
        joinedload(models.Location.area)
        .joinedload(models.Area.floor)
        .joinedload(models.Floor.building),
        joinedload(models.Location.room),
    )


class LocationHierarchyService:
    """Listing, renaming and guarded deletion of hierarchy rows."""

    @staticmethod
    def list_buildings(db: Session) -> list[models.Building]:
        return db.query(models.Building).order_by(models.Building.name).all()

    @staticmethod
    def list_floors(db: Session, building_id: int) -> list[models.Floor]:
        if db.get(models.Building, building_id) is None:
            raise NotFoundError("El edificio indicado no existe.")
        return (
            db.query(models.Floor)
            .filter(models.Floor.building_id == building_id)
            .order_by(models.Floor.name)
            .all()
        )

    @staticmethod
    def list_areas(db: Session, floor_id: int) -> list[models.Area]:
        if db.get(models.Floor, floor_id) is None:
            raise NotFoundError("El piso indicado no existe.")
        return (
            db.query(models.Area)
            .filter(models.Area.floor_id == floor_id)
            .order_by(models.Area.name)
            .all()
        )

    @staticmethod
    def list_rooms(db: Session, area_id: int) -> list[models.Room]:
        if db.get(models.Area, area_id) is None:
            raise NotFoundError("El área indicada no existe.")
        return (
            db.query(models.Room)
            .filter(models.Room.area_id == area_id)
            .order_by(models.Room.name)
            .all()
        )

    @staticmethod
    def floor_names(db: Session, building: str) -> list[str]:
        """Floor names of the building called ``building`` (empty if unknown)."""

        rows = (
            db.query(models.Floor.name)
            .join(models.Building, models.Floor.building_id == models.Building.id)
            .filter(models.Building.name == (clean_text(building) or ""))
            .order_by(models.Floor.name)
            .all()
        )
        return [name for (name,) in rows]

    @staticmethod
    def area_names(db: Session, building: str, floor: str) -> list[str]:
        rows = (
            db.query(models.Area.name)
            .join(models.Floor, models.Area.floor_id == models.Floor.id)
            .join(models.Building, models.Floor.building_id == models.Building.id)
            .filter(
                models.Building.name == (clean_text(building) or ""),
                models.Floor.name == (clean_text(floor) or ""),
            )
            .order_by(models.Area.name)
            .all()
        )
        return [name for (name,) in rows]

    @staticmethod
    def list_locations(
        db: Session,
        *,
        building_id: Optional[int] = None,
        floor_id: Optional[int] = None,
        area_id: Optional[int] = None,
        room_id: Optional[int] = None,
        search: Optional[str] = None,
    ) -> list[models.Location]:
        query = (
            _location_query(db)
            .join(models.Area, models.Location.area_id == models.Area.id)
            .join(models.Floor, models.Area.floor_id == models.Floor.id)
            .join(models.Building, models.Floor.building_id == models.Building.id)
            .outerjoin(models.Room, models.Location.room_id == models.Room.id)
        )
        if building_id is not None:
            query = query.filter(models.Building.id == building_id)
        if floor_id is not None:
            query = query.filter(models.Floor.id == floor_id)
        if area_id is not None:
            query = query.filter(models.Location.area_id == area_id)
        if room_id is not None:
            query = query.filter(models.Location.room_id == room_id)
        if search:
            normalized = f"%{search.strip().lower()}%"
            query = query.filter(
                func.lower(models.Building.name).like(normalized)
                | func.lower(models.Floor.name).like(normalized)
                | func.lower(models.Area.name).like(normalized)
                | func.lower(func.coalesce(models.Room.name, "")).like(normalized)
                | func.lower(func.coalesce(models.Location.details, "")).like(normalized)
            )
        return query.order_by(
            models.Building.name,
            models.Floor.name,
            models.Area.name,
            models.Room.name,
            models.Location.id,
        ).all()

    @staticmethod
    def get_location(db: Session, location_id: int) -> models.Location:
        location = _location_query(db).filter(models.Location.id == location_id).first()
        if location is None:
            raise NotFoundError("La ubicación indicada no existe.")
        return location

    @staticmethod
    def create_location(db: Session, data: schemas.LocationPath) -> ResolvedLocation:
        return LocationResolver.find_or_create(
            db,
            building=data.building,
            floor=data.floor,
            area=data.area,
            room=data.room,
            details=data.details,
        )

    @staticmethod
    def resolve_ids(db: Session, data: schemas.LocationIdsRequest) -> ResolvedLocation:
        with atomic(db):
            resolved = LocationResolver.resolve_ids(
                db, area_id=data.area_id, room_id=data.room_id, details=data.details
            )
        return resolved

    @staticmethod
    def update_location(
        db: Session, location_id: int, data: schemas.LocationUpdate
    ) -> models.Location:
        """Move a location to another area/room or change its details.

        Changing the area without naming a room clears the room, since rooms
        never span areas.
        """

        update_data = data.model_dump(exclude_unset=True)
        with atomic(db):
            location = (
                db.query(models.Location)
                .filter(models.Location.id == location_id)
                .with_for_update()
                .first()
            )
            if location is None:
                raise NotFoundError("La ubicación indicada no existe.")

            area_id = update_data.get("area_id") or location.area_id
            if "room_id" in update_data:
                room_id = update_data["room_id"]
            elif area_id != location.area_id:
                room_id = None
            else:
                room_id = location.room_id
            details = (
                clean_text(update_data["details"])
                if "details" in update_data
                else location.details
            )

            area = db.get(models.Area, area_id)
            if area is None:
                raise NotFoundError("El área indicada no existe.")
            if room_id is not None:
                room = db.get(models.Room, room_id)
                if room is None:
                    raise NotFoundError("La habitación indicada no existe.")
                if room.area_id != area.id:
                    raise HierarchyMismatch(
                        "La habitación no pertenece al área indicada.",
                        detail={"area_id": area.id, "room_id": room.id, "room_area_id": room.area_id},
                    )

            existing = lookup_row(
                db,
                models.Location,
                {"area_id": area_id, "room_id": room_id, "details": details},
            )
            if existing is not None and existing.id != location.id:
                raise ConflictError(
                    "Ya existe una ubicación con la misma área, habitación y detalle.",
                    detail={"location_id": existing.id},
                )

            location.area_id = area_id
            location.room_id = room_id
            location.details = details
            db.flush()
        db.refresh(location)
        return LocationHierarchyService.get_location(db, location.id)

    @staticmethod
    def rename(db: Session, kind: HierarchyKind, entity_id: int, name: str):
        if kind is HierarchyKind.LOCATIONS:
            raise ValidationError("Las ubicaciones no tienen nombre; edite su detalle.")
        level = _LEVELS[kind]
        new_name = clean_text(name)
        if new_name is None:
            raise ValidationError("El nombre es obligatorio.")

        with atomic(db):
            entity = db.get(level.model, entity_id)
            if entity is None:
                raise NotFoundError(f"El {level.label} indicado no existe.")
            query = db.query(level.model).filter(
                level.model.name == new_name, level.model.id != entity.id
            )
            if level.parent_column is not None:
                parent_attr = getattr(level.model, level.parent_column)
                query = query.filter(parent_attr == getattr(entity, level.parent_column))
            if query.first() is not None:
                raise ConflictError(f"Ya existe un {level.label} con el nombre '{new_name}'.")
            entity.name = new_name
        db.refresh(entity)
        return entity

    @staticmethod
    def delete(db: Session, kind: HierarchyKind, entity_id: int) -> None:
        """Remove a hierarchy row once nothing depends on it.

        The row is locked before the dependent counts are taken so a
        concurrent insert under it cannot slip between check and delete.
        """

        level = _LEVELS[kind]
        with atomic(db):
            entity = (
                db.query(level.model)
                .filter(level.model.id == entity_id)
                .with_for_update()
                .first()
            )
            if entity is None:
                raise NotFoundError(f"La entidad ({level.label}) indicada no existe.")

            blockers = LocationHierarchyService._dependents(db, kind, entity_id)
            if blockers:
                summary = ", ".join(f"{count} {label}" for label, count in blockers.items())
                raise ConflictError(
                    f"No se puede eliminar: todavía tiene elementos asociados ({summary}).",
                    detail={"dependents": blockers},
                )
            db.delete(entity)
        LOGGER.info("Deleted %s %s", kind.value, entity_id)

    @staticmethod
    def _dependents(db: Session, kind: HierarchyKind, entity_id: int) -> dict[str, int]:
        checks: list[tuple[str, object]] = []
        if kind is HierarchyKind.BUILDINGS:
            checks.append(("pisos", models.Floor.building_id))
        elif kind is HierarchyKind.FLOORS:
            checks.append(("áreas", models.Area.floor_id))
        elif kind is HierarchyKind.AREAS:
            checks.append(("habitaciones", models.Room.area_id))
            checks.append(("ubicaciones", models.Location.area_id))
        elif kind is HierarchyKind.ROOMS:
            checks.append(("ubicaciones", models.Location.room_id))
        elif kind is HierarchyKind.LOCATIONS:
            checks.append(("dispositivos", models.Device.location_id))

        blockers: dict[str, int] = {}
        for label, column in checks:
            count = (
                db.query(func.count())
                .select_from(column.class_)
                .filter(column == entity_id)
                .scalar()
            )
            if count:
                blockers[label] = int(count)
        return blockers
