"""Lookup tables for normalized device attributes.

Each lookup kind maps to one typed handler instead of a table name string,
so every query below goes through a real mapped class.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Any, Optional, Type

from sqlalchemy import func
from sqlalchemy.orm import Session

from .. import models
from .errors import ConflictError, NotFoundError, ValidationError, atomic
from .find_or_create import find_or_create
from .location_resolver import clean_text

LOGGER = logging.getLogger(__name__)


class LookupKind(str, enum.Enum):
    DEVICE_TYPES = "device-types"
    BRANDS = "brands"
    MODELS = "models"
    OPERATING_SYSTEMS = "operating-systems"
    RAM_SIZES = "ram-sizes"
    STORAGE_SIZES = "storage-sizes"
    PROCESSORS = "processors"


@dataclass(frozen=True)
class LookupHandler:
    """How one lookup kind is stored and referenced by devices."""

    kind: LookupKind
    model: Type[Any]
    label: str
    device_column: str

    @property
    def scoped_by_brand(self) -> bool:
        return self.kind is LookupKind.MODELS

    def device_attribute(self):
        return getattr(models.Device, self.device_column)


LOOKUP_HANDLERS: dict[LookupKind, LookupHandler] = {
    handler.kind: handler
    for handler in (
        LookupHandler(LookupKind.DEVICE_TYPES, models.DeviceType, "tipo de dispositivo", "device_type_id"),
        LookupHandler(LookupKind.BRANDS, models.Brand, "marca", "brand_id"),
        LookupHandler(LookupKind.MODELS, models.DeviceModel, "modelo", "model_id"),
        LookupHandler(LookupKind.OPERATING_SYSTEMS, models.OperatingSystem, "sistema operativo", "os_id"),
        LookupHandler(LookupKind.RAM_SIZES, models.RamSize, "memoria RAM", "ram_id"),
        LookupHandler(LookupKind.STORAGE_SIZES, models.StorageSize, "almacenamiento", "storage_id"),
        LookupHandler(LookupKind.PROCESSORS, models.Processor, "procesador", "processor_id"),
    )
}


class LookupService:
    """Uniform CRUD over the lookup kinds."""

    @staticmethod
    def handler(kind: LookupKind | str) -> LookupHandler:
        try:
            return LOOKUP_HANDLERS[LookupKind(kind)]
        except ValueError as exc:
            raise NotFoundError(f"Catálogo desconocido: {kind}.") from exc

    @staticmethod
    def list_values(
        db: Session,
        kind: LookupKind,
        *,
        search: Optional[str] = None,
        brand_id: Optional[int] = None,
    ) -> list[Any]:
        handler = LookupService.handler(kind)
        query = db.query(handler.model)
        if handler.scoped_by_brand and brand_id is not None:
            query = query.filter(handler.model.brand_id == brand_id)
        if search:
            normalized = f"%{search.strip().lower()}%"
            query = query.filter(func.lower(handler.model.value).like(normalized))
        return query.order_by(handler.model.value).all()

    @staticmethod
    def get(db: Session, kind: LookupKind, value_id: int) -> Any:
        handler = LookupService.handler(kind)
        row = db.get(handler.model, value_id)
        if row is None:
            raise NotFoundError(f"El valor de {handler.label} indicado no existe.")
        return row

    @staticmethod
    def _criteria(
        db: Session, handler: LookupHandler, value: Optional[str], brand_id: Optional[int]
    ) -> dict[str, Any]:
        cleaned = clean_text(value)
        if cleaned is None:
            raise ValidationError(f"El valor de {handler.label} es obligatorio.")
        if not handler.scoped_by_brand:
            return {"value": cleaned}
        if brand_id is None:
            raise ValidationError("El modelo requiere una marca.")
        if db.get(models.Brand, brand_id) is None:
            raise NotFoundError("La marca indicada no existe.")
        return {"brand_id": brand_id, "value": cleaned}

    @staticmethod
    def find_or_create_value(
        db: Session, kind: LookupKind, value: Optional[str], brand_id: Optional[int] = None
    ) -> Any:
        """Return the row for ``value``, inserting it when new. Flushes only."""

        handler = LookupService.handler(kind)
        criteria = LookupService._criteria(db, handler, value, brand_id)
        row, created = find_or_create(db, handler.model, criteria)
        if created:
            LOGGER.info("Registered %s '%s'", handler.kind.value, criteria["value"])
        return row

    @staticmethod
    def create(
        db: Session, kind: LookupKind, value: str, brand_id: Optional[int] = None
    ) -> Any:
        handler = LookupService.handler(kind)
        with atomic(db):
            criteria = LookupService._criteria(db, handler, value, brand_id)
            query = db.query(handler.model)
            for column, expected in criteria.items():
                query = query.filter(getattr(handler.model, column) == expected)
            if query.first() is not None:
                raise ConflictError(
                    f"El valor '{criteria['value']}' ya existe en {handler.label}."
                )
            row = handler.model(**criteria)
            db.add(row)
        db.refresh(row)
        return row

    @staticmethod
    def rename(db: Session, kind: LookupKind, value_id: int, value: str) -> Any:
        handler = LookupService.handler(kind)
        with atomic(db):
            row = LookupService.get(db, kind, value_id)
            criteria = LookupService._criteria(
                db, handler, value, getattr(row, "brand_id", None)
            )
            query = db.query(handler.model).filter(handler.model.id != row.id)
            for column, expected in criteria.items():
                query = query.filter(getattr(handler.model, column) == expected)
            if query.first() is not None:
                raise ConflictError(
                    f"El valor '{criteria['value']}' ya existe en {handler.label}."
                )
            row.value = criteria["value"]
        db.refresh(row)
        return row

    @staticmethod
    def delete(db: Session, kind: LookupKind, value_id: int) -> None:
        handler = LookupService.handler(kind)
        with atomic(db):
            row = (
                db.query(handler.model)
                .filter(handler.model.id == value_id)
                .with_for_update()
                .first()
            )
            if row is None:
                raise NotFoundError(f"El valor de {handler.label} indicado no existe.")

            in_use = (
                db.query(func.count(models.Device.id))
                .filter(handler.device_attribute() == value_id)
                .scalar()
            )
            if in_use:
                raise ConflictError(
                    f"No se puede eliminar: {in_use} dispositivo(s) usan este valor.",
                    detail={"devices": int(in_use)},
                )
            if handler.kind is LookupKind.BRANDS:
                owned_models = (
                    db.query(func.count(models.DeviceModel.id))
                    .filter(models.DeviceModel.brand_id == value_id)
                    .scalar()
                )
                if owned_models:
                    raise ConflictError(
                        f"No se puede eliminar: la marca tiene {owned_models} modelo(s).",
                        detail={"models": int(owned_models)},
                    )
            db.delete(row)
        LOGGER.info("Deleted %s %s", handler.kind.value, value_id)

    @staticmethod
    def options(db: Session) -> dict[str, Any]:
        """Every selector value the device and ticket forms need at once."""

        def _distinct(column) -> list[str]:
            rows = (
                db.query(column)
                .filter(column.isnot(None), column != "")
                .distinct()
                .order_by(column)
                .all()
            )
            return [value for (value,) in rows]

        def _values(kind: LookupKind) -> list[Any]:
            return LookupService.list_values(db, kind)

        return {
            "codes": _distinct(models.Device.code),
            "device_types": _values(LookupKind.DEVICE_TYPES),
            "brands": _values(LookupKind.BRANDS),
            "models": _values(LookupKind.MODELS),
            "operating_systems": _values(LookupKind.OPERATING_SYSTEMS),
            "ram_sizes": _values(LookupKind.RAM_SIZES),
            "storage_sizes": _values(LookupKind.STORAGE_SIZES),
            "processors": _values(LookupKind.PROCESSORS),
            "architectures": _distinct(models.Device.architecture),
            "buildings": _distinct(models.Building.name),
        }
