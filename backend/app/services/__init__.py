"""Service layer encapsulating business logic for API routers."""

from .catalog import LOOKUP_HANDLERS, LookupHandler, LookupKind, LookupService
from .data_consistency import InventoryConsistencyService, InventoryConsistencySnapshot
from .devices import DeviceService
from .errors import (
    ConflictError,
    HierarchyMismatch,
    InventoryServiceError,
    NotFoundError,
    StorageError,
    ValidationError,
    atomic,
)
from .location_resolver import LocationResolver, ResolvedLocation
from .locations import HierarchyKind, LocationHierarchyService
from .periods import PeriodService
from .tickets import TicketService

__all__ = [
    "ConflictError",
    "DeviceService",
    "HierarchyKind",
    "HierarchyMismatch",
    "InventoryConsistencyService",
    "InventoryConsistencySnapshot",
    "InventoryServiceError",
    "LOOKUP_HANDLERS",
    "LocationHierarchyService",
    "LocationResolver",
    "LookupHandler",
    "LookupKind",
    "LookupService",
    "NotFoundError",
    "PeriodService",
    "ResolvedLocation",
    "StorageError",
    "TicketService",
    "ValidationError",
    "atomic",
]
