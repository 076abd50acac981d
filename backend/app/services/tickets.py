"""Workshop ticket lifecycle: intake, edition, closing and history."""

from __future__ import annotations

import logging
from datetime import date
from typing import Iterable, Optional, Tuple

from sqlalchemy import func, or_
from sqlalchemy.orm import Session, joinedload

from .. import models, schemas
from ..database import read_bool_env
from .errors import ConflictError, NotFoundError, ValidationError, atomic
from .find_or_create import lookup_row
from .location_resolver import clean_text
from .periods import PeriodService

LOGGER = logging.getLogger(__name__)

SINGLE_PENDING_ENV = "TICKET_SINGLE_PENDING_PER_DEVICE"


def single_pending_per_device() -> bool:
    """Whether a device may hold only one pending ticket at a time."""

    return read_bool_env(SINGLE_PENDING_ENV, False)


def _ticket_query(db: Session):
    device = joinedload(models.Ticket.device)
    return db.query(models.Ticket).options(
        device.joinedload(models.Device.device_type),
        device.joinedload(models.Device.brand),
        device.joinedload(models.Device.model),
        device.joinedload(models.Device.location)
        .joinedload(models.Location.area)
        .joinedload(models.Area.floor)
        .joinedload(models.Floor.building),
        device.joinedload(models.Device.location).joinedload(models.Location.room),
    )


class TicketService:
    """Operations over workshop tickets."""

    @staticmethod
    def list_tickets(
        db: Session,
        *,
        page: int = 1,
        limit: int = 10,
        status: Optional[schemas.TicketStatusFilter] = None,
        date_out_from: Optional[date] = None,
        date_out_to: Optional[date] = None,
        search: Optional[str] = None,
        device_id: Optional[int] = None,
        device_type_id: Optional[int] = None,
        brand_id: Optional[int] = None,
        model_id: Optional[int] = None,
        location_id: Optional[int] = None,
        period: Optional[str] = None,
    ) -> Tuple[Iterable[models.Ticket], int]:
        query = (
            _ticket_query(db)
            .join(models.Device, models.Ticket.device_id == models.Device.id)
            .join(models.DeviceType, models.Device.device_type_id == models.DeviceType.id)
            .outerjoin(models.Brand, models.Device.brand_id == models.Brand.id)
            .outerjoin(models.DeviceModel, models.Device.model_id == models.DeviceModel.id)
            .join(models.Location, models.Device.location_id == models.Location.id)
            .join(models.Area, models.Location.area_id == models.Area.id)
            .join(models.Floor, models.Area.floor_id == models.Floor.id)
            .join(models.Building, models.Floor.building_id == models.Building.id)
            .outerjoin(models.Room, models.Location.room_id == models.Room.id)
        )

        if status is schemas.TicketStatusFilter.HISTORY:
            query = query.filter(models.Ticket.status.in_(models.TERMINAL_TICKET_STATUSES))
        elif status is not None:
            query = query.filter(models.Ticket.status == models.TicketStatus(status.value))

        if date_out_from is not None:
            query = query.filter(models.Ticket.date_out >= date_out_from)
        if date_out_to is not None:
            query = query.filter(models.Ticket.date_out <= date_out_to)

        if period:
            academic_period = PeriodService.get_period(db, period)
            query = query.filter(
                models.Ticket.date_in >= academic_period.starts_on,
                models.Ticket.date_in <= academic_period.ends_on,
            )

        exact_filters = (
            (models.Ticket.device_id, device_id),
            (models.Device.device_type_id, device_type_id),
            (models.Device.brand_id, brand_id),
            (models.Device.model_id, model_id),
            (models.Device.location_id, location_id),
        )
        for column, value in exact_filters:
            if value is not None:
                query = query.filter(column == value)

        if search:
            normalized = f"%{search.strip().lower()}%"
            query = query.filter(
                or_(
                    func.lower(models.Ticket.details_in).like(normalized),
                    func.lower(models.Ticket.details_out).like(normalized),
                    func.lower(models.Device.code).like(normalized),
                    func.lower(models.Device.serial).like(normalized),
                    func.lower(models.DeviceType.value).like(normalized),
                    func.lower(models.Brand.value).like(normalized),
                    func.lower(models.DeviceModel.value).like(normalized),
                    func.lower(models.Building.name).like(normalized),
                    func.lower(models.Area.name).like(normalized),
                    func.lower(models.Room.name).like(normalized),
                )
            )

        total = query.count()
        items = (
            query.order_by(models.Ticket.date_in.desc(), models.Ticket.id.desc())
            .offset((max(page, 1) - 1) * max(limit, 1))
            .limit(max(limit, 1))
            .all()
        )
        return items, total

    @staticmethod
    def get_ticket(db: Session, ticket_id: int) -> models.Ticket:
        ticket = _ticket_query(db).filter(models.Ticket.id == ticket_id).first()
        if ticket is None:
            raise NotFoundError("El ticket indicado no existe.")
        return ticket

    @staticmethod
    def open_ticket(
        db: Session, data: schemas.TicketOpen, today: Optional[date] = None
    ) -> models.Ticket:
        """Register a device's intake into the workshop."""

        today = today or date.today()
        details_in = clean_text(data.details_in)
        with atomic(db):
            device = TicketService._resolve_device(db, data)
            if data.date_in > today:
                raise ValidationError("La fecha de ingreso no puede ser futura.")

            duplicate = lookup_row(
                db,
                models.Ticket,
                {
                    "device_id": device.id,
                    "status": models.TicketStatus.PENDING,
                    "date_in": data.date_in,
                    "details_in": details_in,
                },
            )
            if duplicate is not None:
                LOGGER.warning(
                    "Rejected duplicate ticket for device %s (existing %s)",
                    device.id,
                    duplicate.id,
                )
                raise ConflictError(
                    "Ya existe un ticket idéntico para este dispositivo.",
                    detail={"ticket_id": duplicate.id},
                )

            if single_pending_per_device():
                pending = (
                    db.query(models.Ticket.id)
                    .filter(
                        models.Ticket.device_id == device.id,
                        models.Ticket.status == models.TicketStatus.PENDING,
                    )
                    .first()
                )
                if pending is not None:
                    raise ConflictError(
                        "El dispositivo ya tiene un ticket pendiente.",
                        detail={"ticket_id": pending.id},
                    )

            ticket = models.Ticket(
                device_id=device.id,
                status=models.TicketStatus.PENDING,
                date_in=data.date_in,
                details_in=details_in,
            )
            db.add(ticket)
            db.flush()
        LOGGER.info("Opened ticket %s for device %s", ticket.id, ticket.device_id)
        return TicketService.get_ticket(db, ticket.id)

    @staticmethod
    def close_ticket(
        db: Session, ticket_id: int, data: schemas.TicketClose
    ) -> models.Ticket:
        with atomic(db):
            ticket = TicketService._lock(db, ticket_id)
            if ticket.status.is_terminal:
                raise ValidationError("El ticket ya está cerrado.")
            if not data.status.is_terminal:
                raise ValidationError(
                    "Para cerrar un ticket indique un estado final (reparado o no reparado)."
                )
            if data.date_out is None:
                raise ValidationError("La fecha de salida es obligatoria.")
            if data.date_out < ticket.date_in:
                raise ValidationError(
                    "La fecha de salida no puede ser anterior a la de ingreso."
                )
            TicketService._ensure_unique(
                db, ticket, data.status, ticket.date_in, ticket.details_in
            )

            ticket.status = data.status
            ticket.date_out = data.date_out
            ticket.details_out = clean_text(data.details_out)
        LOGGER.info("Closed ticket %s as %s", ticket_id, data.status.value)
        return TicketService.get_ticket(db, ticket_id)

    @staticmethod
    def edit_ticket(
        db: Session,
        ticket_id: int,
        data: schemas.TicketEdit,
        today: Optional[date] = None,
    ) -> models.Ticket:
        today = today or date.today()
        update_data = data.model_dump(exclude_unset=True)
        with atomic(db):
            ticket = TicketService._lock(db, ticket_id)
            if ticket.status is not models.TicketStatus.PENDING:
                raise ValidationError("Solo se pueden editar tickets pendientes.")

            date_in = update_data.get("date_in") or ticket.date_in
            if date_in > today:
                raise ValidationError("La fecha de ingreso no puede ser futura.")
            details_in = (
                clean_text(update_data["details_in"])
                if "details_in" in update_data
                else ticket.details_in
            )
            TicketService._ensure_unique(db, ticket, ticket.status, date_in, details_in)

            ticket.date_in = date_in
            ticket.details_in = details_in
        return TicketService.get_ticket(db, ticket_id)

    @staticmethod
    def delete_ticket(db: Session, ticket_id: int) -> None:
        with atomic(db):
            ticket = TicketService._lock(db, ticket_id)
            db.delete(ticket)
        LOGGER.info("Deleted ticket %s", ticket_id)

    @staticmethod
    def _lock(db: Session, ticket_id: int) -> models.Ticket:
        ticket = (
            db.query(models.Ticket)
            .filter(models.Ticket.id == ticket_id)
            .with_for_update()
            .first()
        )
        if ticket is None:
            raise NotFoundError("El ticket indicado no existe.")
        return ticket

    @staticmethod
    def _ensure_unique(
        db: Session,
        ticket: models.Ticket,
        status: models.TicketStatus,
        date_in: date,
        details_in: Optional[str],
    ) -> None:
        existing = lookup_row(
            db,
            models.Ticket,
            {
                "device_id": ticket.device_id,
                "status": status,
                "date_in": date_in,
                "details_in": details_in,
            },
        )
        if existing is not None and existing.id != ticket.id:
            raise ConflictError(
                "Ya existe un ticket idéntico para este dispositivo.",
                detail={"ticket_id": existing.id},
            )

    @staticmethod
    def _resolve_device(db: Session, data: schemas.TicketOpen) -> models.Device:
        if data.device_id is not None:
            device = db.get(models.Device, data.device_id)
            if device is None:
                raise NotFoundError("El dispositivo indicado no existe.")
            return device
        code = clean_text(data.code)
        if code is None:
            raise ValidationError("Indique el dispositivo (id o código).")
        device = db.query(models.Device).filter(models.Device.code == code).first()
        if device is None:
            raise NotFoundError(f"No existe un dispositivo con el código '{code}'.")
        return device
