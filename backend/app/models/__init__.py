"""Expose SQLAlchemy models for convenient imports."""

from .catalog import (
    Brand,
    DeviceModel,
    DeviceType,
    OperatingSystem,
    Processor,
    RamSize,
    StorageSize,
)
from .device import Device
from .location import Area, Building, Floor, Location, Room
from .period import AcademicPeriod
from .ticket import TERMINAL_TICKET_STATUSES, Ticket, TicketStatus

__all__ = [
    "AcademicPeriod",
    "Area",
    "Brand",
    "Building",
    "Device",
    "DeviceModel",
    "DeviceType",
    "Floor",
    "Location",
    "OperatingSystem",
    "Processor",
    "RamSize",
    "Room",
    "StorageSize",
    "TERMINAL_TICKET_STATUSES",
    "Ticket",
    "TicketStatus",
]
