"""Derived display data for locations, devices and tickets."""

from __future__ import annotations

from typing import Any, Optional

from .. import models

PATH_SEPARATOR = " > "


def format_location_path(location: models.Location) -> str:
    """Render "Building > Floor > Area > Room" for a location.

    Every screen that shows where a device lives goes through this function.
    """

    area = location.area
    parts = [area.floor.building.name, area.floor.name, area.name]
    if location.room is not None:
        parts.append(location.room.name)
    return PATH_SEPARATOR.join(parts)


def location_view(location: models.Location) -> dict[str, Any]:
    area = location.area
    floor = area.floor
    building = floor.building
    room = location.room
    return {
        "id": location.id,
        "building_id": building.id,
        "building": building.name,
        "floor_id": floor.id,
        "floor": floor.name,
        "area_id": area.id,
        "area": area.name,
        "room_id": room.id if room is not None else None,
        "room": room.name if room is not None else None,
        "details": location.details,
        "path": format_location_path(location),
    }


def _value(row: Optional[Any]) -> Optional[str]:
    return row.value if row is not None else None


def device_view(device: models.Device) -> dict[str, Any]:
    return {
        "id": device.id,
        "code": device.code,
        "device_type_id": device.device_type_id,
        "device_type": _value(device.device_type),
        "brand_id": device.brand_id,
        "brand": _value(device.brand),
        "model_id": device.model_id,
        "model": _value(device.model),
        "os_id": device.os_id,
        "os": _value(device.operating_system),
        "ram_id": device.ram_id,
        "ram": _value(device.ram),
        "storage_id": device.storage_id,
        "storage": _value(device.storage),
        "processor_id": device.processor_id,
        "processor": _value(device.processor),
        "architecture": device.architecture,
        "serial": device.serial,
        "details": device.details,
        "location": location_view(device.location),
        "updated_at": device.updated_at,
    }


def ticket_view(ticket: models.Ticket) -> dict[str, Any]:
    device = ticket.device
    return {
        "id": ticket.id,
        "device_id": ticket.device_id,
        "status": ticket.status,
        "date_in": ticket.date_in,
        "date_out": ticket.date_out,
        "details_in": ticket.details_in,
        "details_out": ticket.details_out,
        "device_code": device.code,
        "device_type": _value(device.device_type),
        "brand": _value(device.brand),
        "model": _value(device.model),
        "serial": device.serial,
        "location": format_location_path(device.location),
        "location_id": device.location_id,
    }
