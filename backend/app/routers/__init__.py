"""Routers package."""

from .auth import router as auth_router
from .catalog import router as catalog_router
from .devices import router as devices_router
from .integrity import router as integrity_router
from .locations import router as locations_router
from .periods import router as periods_router
from .tickets import router as tickets_router

__all__ = [
    "auth_router",
    "catalog_router",
    "devices_router",
    "integrity_router",
    "locations_router",
    "periods_router",
    "tickets_router",
]
