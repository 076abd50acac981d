"""Expose Pydantic schemas for convenient imports."""

from .auth import AdminLoginRequest, TokenResponse
from .catalog import CatalogOptions, LookupCreate, LookupRead, LookupUpdate
from .common import PaginatedResponse
from .device import DeviceCreate, DeviceListResponse, DeviceRead, DeviceUpdate
from .integrity import (
    DeviceModelMismatch,
    DevicePendingCount,
    InventoryConsistencyReport,
    LocationRoomMismatch,
    TicketDateMismatch,
)
from .location import (
    AreaRead,
    BuildingRead,
    FloorRead,
    HierarchyEntityRead,
    HierarchyRename,
    LocationIdsRequest,
    LocationPath,
    LocationRead,
    LocationResolveResponse,
    LocationUpdate,
    RoomRead,
)
from .period import PeriodRead, PeriodUpdate
from .ticket import (
    TicketClose,
    TicketEdit,
    TicketListResponse,
    TicketOpen,
    TicketRead,
    TicketStatusFilter,
)

__all__ = [
    "AdminLoginRequest",
    "AreaRead",
    "BuildingRead",
    "CatalogOptions",
    "DeviceCreate",
    "DeviceListResponse",
    "DeviceModelMismatch",
    "DevicePendingCount",
    "DeviceRead",
    "DeviceUpdate",
    "FloorRead",
    "HierarchyEntityRead",
    "HierarchyRename",
    "InventoryConsistencyReport",
    "LocationIdsRequest",
    "LocationPath",
    "LocationRead",
    "LocationResolveResponse",
    "LocationRoomMismatch",
    "LocationUpdate",
    "LookupCreate",
    "LookupRead",
    "LookupUpdate",
    "PaginatedResponse",
    "PeriodRead",
    "PeriodUpdate",
    "RoomRead",
    "TicketClose",
    "TicketDateMismatch",
    "TicketEdit",
    "TicketListResponse",
    "TicketOpen",
    "TicketRead",
    "TicketStatusFilter",
    "TokenResponse",
]
