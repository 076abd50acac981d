"""Audit queries that surface rows breaking cross-entity invariants.

The write paths reject these states, so anything reported here came from
manual edits, old imports or a bug worth chasing.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from sqlalchemy import func
from sqlalchemy.orm import Session

from .. import models
from .tickets import single_pending_per_device


@dataclass(frozen=True)
class LocationRoomMismatch:
    """A location whose room belongs to a different area."""

    location_id: int
    area_id: int
    room_id: int
    room_area_id: int


@dataclass(frozen=True)
class DeviceModelMismatch:
    """A device whose model is owned by another brand, or has no brand."""

    device_id: int
    brand_id: int | None
    model_id: int
    model_brand_id: int


@dataclass(frozen=True)
class TicketDateMismatch:
    ticket_id: int
    date_in: date
    date_out: date


@dataclass(frozen=True)
class DevicePendingCount:
    device_id: int
    pending_tickets: int


@dataclass(frozen=True)
class InventoryConsistencySnapshot:
    """Aggregated inconsistencies detected across the inventory tables."""

    locations_with_foreign_room: list[LocationRoomMismatch]
    devices_with_mismatched_model: list[DeviceModelMismatch]
    tickets_closed_before_intake: list[TicketDateMismatch]
    devices_with_multiple_pending: list[DevicePendingCount]

    @property
    def issue_count(self) -> int:
        return (
            len(self.locations_with_foreign_room)
            + len(self.devices_with_mismatched_model)
            + len(self.tickets_closed_before_intake)
            + len(self.devices_with_multiple_pending)
        )


class InventoryConsistencyService:
    """Read-only integrity checks over locations, devices and tickets."""

    @staticmethod
    def locations_with_foreign_room(db: Session) -> list[LocationRoomMismatch]:
        rows = (
            db.query(models.Location.id, models.Location.area_id, models.Room.id, models.Room.area_id)
            .join(models.Room, models.Location.room_id == models.Room.id)
            .filter(models.Room.area_id != models.Location.area_id)
            .order_by(models.Location.id)
            .all()
        )
        return [
            LocationRoomMismatch(
                location_id=location_id,
                area_id=area_id,
                room_id=room_id,
                room_area_id=room_area_id,
            )
            for location_id, area_id, room_id, room_area_id in rows
        ]

    @staticmethod
    def devices_with_mismatched_model(db: Session) -> list[DeviceModelMismatch]:
        rows = (
            db.query(
                models.Device.id,
                models.Device.brand_id,
                models.Device.model_id,
                models.DeviceModel.brand_id,
            )
            .join(models.DeviceModel, models.Device.model_id == models.DeviceModel.id)
            .filter(
                (models.Device.brand_id.is_(None))
                | (models.Device.brand_id != models.DeviceModel.brand_id)
            )
            .order_by(models.Device.id)
            .all()
        )
        return [
            DeviceModelMismatch(
                device_id=device_id,
                brand_id=brand_id,
                model_id=model_id,
                model_brand_id=model_brand_id,
            )
            for device_id, brand_id, model_id, model_brand_id in rows
        ]

    @staticmethod
    def tickets_closed_before_intake(db: Session) -> list[TicketDateMismatch]:
        rows = (
            db.query(models.Ticket.id, models.Ticket.date_in, models.Ticket.date_out)
            .filter(
                models.Ticket.date_out.isnot(None),
                models.Ticket.date_out < models.Ticket.date_in,
            )
            .order_by(models.Ticket.id)
            .all()
        )
        return [
            TicketDateMismatch(ticket_id=ticket_id, date_in=date_in, date_out=date_out)
            for ticket_id, date_in, date_out in rows
        ]

    @staticmethod
    def devices_with_multiple_pending(db: Session) -> list[DevicePendingCount]:
        pending = func.count(models.Ticket.id)
        rows = (
            db.query(models.Ticket.device_id, pending)
            .filter(models.Ticket.status == models.TicketStatus.PENDING)
            .group_by(models.Ticket.device_id)
            .having(pending > 1)
            .order_by(models.Ticket.device_id)
            .all()
        )
        return [
            DevicePendingCount(device_id=device_id, pending_tickets=int(count))
            for device_id, count in rows
        ]

    @classmethod
    def snapshot(cls, db: Session) -> InventoryConsistencySnapshot:
        # Several pending tickets per device are valid unless the policy forbids them.
        multiple_pending = (
            cls.devices_with_multiple_pending(db) if single_pending_per_device() else []
        )
        return InventoryConsistencySnapshot(
            locations_with_foreign_room=cls.locations_with_foreign_room(db),
            devices_with_mismatched_model=cls.devices_with_mismatched_model(db),
            tickets_closed_before_intake=cls.tickets_closed_before_intake(db),
            devices_with_multiple_pending=multiple_pending,
        )
