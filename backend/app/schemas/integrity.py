from __future__ import annotations

from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class LocationRoomMismatch(BaseModel):
    location_id: int = Field(..., description="Location whose room belongs to another area")
    area_id: int
    room_id: int
    room_area_id: int

    model_config = ConfigDict(from_attributes=True)


class DeviceModelMismatch(BaseModel):
    device_id: int
    brand_id: Optional[int] = Field(None, description="Brand stored on the device")
    model_id: int
    model_brand_id: int = Field(..., description="Brand that owns the model")

    model_config = ConfigDict(from_attributes=True, protected_namespaces=())


class TicketDateMismatch(BaseModel):
    ticket_id: int
    date_in: date
    date_out: date

    model_config = ConfigDict(from_attributes=True)


class DevicePendingCount(BaseModel):
    device_id: int
    pending_tickets: int

    model_config = ConfigDict(from_attributes=True)


class InventoryConsistencyReport(BaseModel):
    locations_with_foreign_room: list[LocationRoomMismatch]
    devices_with_mismatched_model: list[DeviceModelMismatch]
    tickets_closed_before_intake: list[TicketDateMismatch]
    devices_with_multiple_pending: list[DevicePendingCount]
