"""Business logic for the device catalog."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Optional, Tuple

from sqlalchemy import func, or_
from sqlalchemy.orm import Session, joinedload

from .. import models, schemas
from .catalog import LookupKind, LookupService
from .errors import ConflictError, NotFoundError, ValidationError, atomic
from .location_resolver import LocationResolver, clean_text

LOGGER = logging.getLogger(__name__)

_UNSET = object()

# (lookup kind, id field, value field) for attributes with no cross-rules.
_PLAIN_ATTRIBUTES = (
    (LookupKind.OPERATING_SYSTEMS, "os_id", "os"),
    (LookupKind.RAM_SIZES, "ram_id", "ram"),
    (LookupKind.STORAGE_SIZES, "storage_id", "storage"),
    (LookupKind.PROCESSORS, "processor_id", "processor"),
)

_TEXT_FIELDS = ("architecture", "serial", "details")

_LOCATION_FIELDS = {"location_id", "location", "area_id", "room_id", "location_details"}


def _device_query(db: Session):
    return db.query(models.Device).options(
        joinedload(models.Device.device_type),
        joinedload(models.Device.brand),
        joinedload(models.Device.model),
        joinedload(models.Device.operating_system),
        joinedload(models.Device.ram),
        joinedload(models.Device.storage),
        joinedload(models.Device.processor),
        joinedload(models.Device.location)
        .joinedload(models.Location.area)
        .joinedload(models.Area.floor)
        .joinedload(models.Floor.building),
        joinedload(models.Device.location).joinedload(models.Location.room),
    )


class DeviceService:
    """Operations to manage devices and their placement."""

    @staticmethod
    def list_devices(
        db: Session,
        *,
        page: int = 1,
        limit: int = 10,
        search: Optional[str] = None,
        device_type_id: Optional[int] = None,
        brand_id: Optional[int] = None,
        model_id: Optional[int] = None,
        os_id: Optional[int] = None,
        ram_id: Optional[int] = None,
        storage_id: Optional[int] = None,
        processor_id: Optional[int] = None,
        building_id: Optional[int] = None,
        floor_id: Optional[int] = None,
        area_id: Optional[int] = None,
        room_id: Optional[int] = None,
        location_id: Optional[int] = None,
    ) -> Tuple[Iterable[models.Device], int]:
        query = (
            _device_query(db)
            .join(models.Location, models.Device.location_id == models.Location.id)
            .join(models.Area, models.Location.area_id == models.Area.id)
            .join(models.Floor, models.Area.floor_id == models.Floor.id)
            .join(models.Building, models.Floor.building_id == models.Building.id)
            .outerjoin(models.Room, models.Location.room_id == models.Room.id)
            .join(models.DeviceType, models.Device.device_type_id == models.DeviceType.id)
            .outerjoin(models.Brand, models.Device.brand_id == models.Brand.id)
            .outerjoin(models.DeviceModel, models.Device.model_id == models.DeviceModel.id)
            .outerjoin(
                models.OperatingSystem, models.Device.os_id == models.OperatingSystem.id
            )
        )

        exact_filters = (
            (models.Device.device_type_id, device_type_id),
            (models.Device.brand_id, brand_id),
            (models.Device.model_id, model_id),
            (models.Device.os_id, os_id),
            (models.Device.ram_id, ram_id),
            (models.Device.storage_id, storage_id),
            (models.Device.processor_id, processor_id),
            (models.Building.id, building_id),
            (models.Floor.id, floor_id),
            (models.Location.area_id, area_id),
            (models.Location.room_id, room_id),
            (models.Device.location_id, location_id),
        )
        for column, value in exact_filters:
            if value is not None:
                query = query.filter(column == value)

        if search:
            normalized = f"%{search.strip().lower()}%"
            query = query.filter(
                or_(
                    func.lower(models.Device.code).like(normalized),
                    func.lower(models.Device.serial).like(normalized),
                    func.lower(models.Device.details).like(normalized),
                    func.lower(models.DeviceType.value).like(normalized),
                    func.lower(models.Brand.value).like(normalized),
                    func.lower(models.DeviceModel.value).like(normalized),
                    func.lower(models.OperatingSystem.value).like(normalized),
                    func.lower(models.Building.name).like(normalized),
                    func.lower(models.Floor.name).like(normalized),
                    func.lower(models.Area.name).like(normalized),
                    func.lower(models.Room.name).like(normalized),
                    func.lower(models.Location.details).like(normalized),
                )
            )

        total = query.count()
        items = (
            query.order_by(models.Device.id.desc())
            .offset((max(page, 1) - 1) * max(limit, 1))
            .limit(max(limit, 1))
            .all()
        )
        return items, total

    @staticmethod
    def get_device(db: Session, device_id: int) -> models.Device:
        device = _device_query(db).filter(models.Device.id == device_id).first()
        if device is None:
            raise NotFoundError("El dispositivo indicado no existe.")
        return device

    @staticmethod
    def create_device(db: Session, data: schemas.DeviceCreate) -> models.Device:
        with atomic(db):
            device = models.Device()
            DeviceService._apply(db, device, data, creating=True)
            db.add(device)
            db.flush()
        LOGGER.info("Registered device %s (code=%s)", device.id, device.code)
        return DeviceService.get_device(db, device.id)

    @staticmethod
    def update_device(
        db: Session, device_id: int, data: schemas.DeviceUpdate
    ) -> models.Device:
        with atomic(db):
            device = (
                db.query(models.Device)
                .filter(models.Device.id == device_id)
                .with_for_update()
                .first()
            )
            if device is None:
                raise NotFoundError("El dispositivo indicado no existe.")
            DeviceService._apply(db, device, data, creating=False)
            db.flush()
        db.refresh(device)
        return DeviceService.get_device(db, device.id)

    @staticmethod
    def delete_device(db: Session, device_id: int) -> None:
        """Delete a device that never went through the workshop."""

        with atomic(db):
            device = (
                db.query(models.Device)
                .filter(models.Device.id == device_id)
                .with_for_update()
                .first()
            )
            if device is None:
                raise NotFoundError("El dispositivo indicado no existe.")
            tickets = (
                db.query(func.count(models.Ticket.id))
                .filter(models.Ticket.device_id == device_id)
                .scalar()
            )
            if tickets:
                raise ConflictError(
                    "El dispositivo tiene historial de tickets y no puede eliminarse.",
                    detail={"tickets": int(tickets)},
                )
            db.delete(device)
        LOGGER.info("Deleted device %s", device_id)

    @staticmethod
    def _apply(
        db: Session,
        device: models.Device,
        data: schemas.DeviceCreate | schemas.DeviceUpdate,
        *,
        creating: bool,
    ) -> None:
        fields = data.model_fields_set

        if "code" in fields or creating:
            code = clean_text(data.code)
            if code is not None:
                clash = (
                    db.query(models.Device.id)
                    .filter(models.Device.code == code, models.Device.id != device.id)
                    .first()
                )
                if clash is not None:
                    raise ConflictError(f"El código '{code}' ya está registrado.")
            device.code = code

        device_type_id = DeviceService._resolve_attribute(
            db, data, LookupKind.DEVICE_TYPES, "device_type_id", "device_type"
        )
        if device_type_id is not _UNSET:
            device.device_type_id = device_type_id
        if device.device_type_id is None:
            raise ValidationError("El tipo de dispositivo es obligatorio.")

        for kind, id_field, value_field in _PLAIN_ATTRIBUTES:
            resolved = DeviceService._resolve_attribute(db, data, kind, id_field, value_field)
            if resolved is not _UNSET:
                setattr(device, id_field, resolved)

        DeviceService._apply_brand_and_model(db, device, data)

        for field in _TEXT_FIELDS:
            if field in fields or creating:
                setattr(device, field, clean_text(getattr(data, field)))

        if creating or fields & _LOCATION_FIELDS:
            device.location_id = DeviceService._resolve_location(db, device, data)

    @staticmethod
    def _apply_brand_and_model(
        db: Session,
        device: models.Device,
        data: schemas.DeviceCreate | schemas.DeviceUpdate,
    ) -> None:
        brand_id = DeviceService._resolve_attribute(
            db, data, LookupKind.BRANDS, "brand_id", "brand"
        )
        if brand_id is not _UNSET:
            device.brand_id = brand_id

        fields = data.model_fields_set
        if data.model_id is not None:
            LookupService.get(db, LookupKind.MODELS, data.model_id)
            device.model_id = data.model_id
        elif "model" in fields and clean_text(data.model) is not None:
            if device.brand_id is None:
                raise ValidationError("El modelo requiere una marca.")
            device.model_id = LookupService.find_or_create_value(
                db, LookupKind.MODELS, data.model, device.brand_id
            ).id
        elif "model_id" in fields or "model" in fields:
            device.model_id = None

        if device.model_id is None:
            return
        if device.brand_id is None:
            raise ValidationError("El modelo requiere una marca.")
        model = db.get(models.DeviceModel, device.model_id)
        if model.brand_id != device.brand_id:
            raise ConflictError(
                "El modelo no pertenece a la marca seleccionada.",
                detail={"model_id": model.id, "model_brand_id": model.brand_id, "brand_id": device.brand_id},
            )

    @staticmethod
    def _resolve_attribute(
        db: Session,
        data: schemas.DeviceCreate | schemas.DeviceUpdate,
        kind: LookupKind,
        id_field: str,
        value_field: str,
    ) -> Any:
        """Lookup id for an attribute given by id or by value.

        Returns ``_UNSET`` when the payload does not mention the attribute.
        """

        fields = data.model_fields_set
        value_id = getattr(data, id_field)
        if value_id is not None:
            return LookupService.get(db, kind, value_id).id
        if value_field in fields:
            value = clean_text(getattr(data, value_field))
            if value is not None:
                return LookupService.find_or_create_value(db, kind, value).id
            return None
        if id_field in fields:
            return None
        return _UNSET

    @staticmethod
    def _resolve_location(
        db: Session,
        device: models.Device,
        data: schemas.DeviceCreate | schemas.DeviceUpdate,
    ) -> int:
        """Location id from, in order: ``location_id``, a path, or area/room ids."""

        if data.location_id is not None:
            location = db.get(models.Location, data.location_id)
            if location is None:
                raise NotFoundError("La ubicación indicada no existe.")
            return location.id

        if data.location is not None:
            path = data.location
            return LocationResolver.resolve(
                db,
                building=path.building,
                floor=path.floor,
                area=path.area,
                room=path.room,
                details=path.details,
            ).location.id

        current = db.get(models.Location, device.location_id) if device.location_id else None
        area_id = data.area_id
        room_id = data.room_id
        fields = data.model_fields_set
        if current is not None:
            if area_id is None:
                area_id = current.area_id
                if "room_id" not in fields:
                    room_id = current.room_id
            details = data.location_details if "location_details" in fields else current.details
        else:
            details = data.location_details

        if area_id is None:
            raise ValidationError("La ubicación es obligatoria.")
        return LocationResolver.resolve_ids(
            db, area_id=area_id, room_id=room_id, details=details
        ).location.id
