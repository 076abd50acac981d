"""Expose the inventory backend FastAPI app and enforce local development CORS defaults."""

import logging
import os
import re
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Iterable

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from .database import read_bool_env, session_scope
from .migrations import run_database_migrations
from .routers import (
    auth_router,
    catalog_router,
    devices_router,
    integrity_router,
    locations_router,
    periods_router,
    tickets_router,
)
from .services.periods import PeriodService

LOGGER = logging.getLogger(__name__)

FRONTEND_DIR_ENV = "FRONTEND_DIR"
DEFAULT_FRONTEND_DIR = Path(__file__).resolve().parents[2] / "frontend"
STARTUP_MIGRATIONS_ENV = "ENABLE_STARTUP_MIGRATIONS"

LOCAL_DEVELOPMENT_ORIGINS = {
    "http://localhost:5174",
    "http://localhost:5173",
}
LOCALHOST_ORIGIN_REGEX = r"https?://(localhost|127\.0\.0\.1|0\.0\.0\.0)(:\d+)?$"

DEFAULT_ALLOWED_ORIGINS = {
    "http://localhost:8080",
    "http://127.0.0.1:8080",
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    *LOCAL_DEVELOPMENT_ORIGINS,
    "http://127.0.0.1:5174",
    "http://localhost:4173",
    "http://127.0.0.1:4173",
}


def _normalize_origin(origin: str) -> str | None:
    stripped = origin.strip()
    if not stripped:
        return None
    return stripped.rstrip("/")


def _read_allowed_origins(raw_origins: Iterable[str]) -> list[str]:
    normalized = {_normalize_origin(origin) for origin in raw_origins}
    return sorted({origin for origin in normalized if origin})


def _split_raw_origins(raw_value: str) -> list[str]:
    """Split a raw origin string using commas or whitespace as separators."""

    return [origin for origin in re.split(r"[\s,]+", raw_value) if origin]


def _load_allowed_origins_from_env() -> list[str]:
    raw_value = os.getenv("BACKEND_ALLOWED_ORIGINS")
    if not raw_value:
        return []
    return _read_allowed_origins(_split_raw_origins(raw_value))


def _resolve_allowed_origins() -> list[str]:
    env_origins = _load_allowed_origins_from_env()
    if env_origins:
        origins = list(env_origins)
    else:
        origins = _read_allowed_origins(DEFAULT_ALLOWED_ORIGINS)

    missing_dev_origins = [
        origin for origin in LOCAL_DEVELOPMENT_ORIGINS if origin not in origins
    ]
    if missing_dev_origins:
        # The local frontend dev servers are always allowed.
        origins = _read_allowed_origins([*origins, *missing_dev_origins])

    return origins


def _resolve_frontend_dir() -> Path:
    raw = os.getenv(FRONTEND_DIR_ENV)
    return Path(raw).expanduser().resolve() if raw else DEFAULT_FRONTEND_DIR


@asynccontextmanager
async def lifespan(_: FastAPI):
    if read_bool_env(STARTUP_MIGRATIONS_ENV, True):
        ensure_database_is_ready()
    else:
        LOGGER.info("Startup migrations disabled via %s", STARTUP_MIGRATIONS_ENV)
    yield


app = FastAPI(title="Inventory & Workshop API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_resolve_allowed_origins(),
    allow_origin_regex=LOCALHOST_ORIGIN_REGEX,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth_router)
app.include_router(locations_router, prefix="/locations", tags=["locations"])
app.include_router(catalog_router, prefix="/catalog", tags=["catalog"])
app.include_router(devices_router, prefix="/devices", tags=["devices"])
app.include_router(tickets_router, prefix="/tickets", tags=["tickets"])
app.include_router(periods_router, prefix="/periods", tags=["periods"])
app.include_router(integrity_router, prefix="/integrity", tags=["integrity"])


def ensure_database_is_ready() -> None:
    """Apply pending migrations and seed the academic calendar."""

    LOGGER.info("Ensuring database schema is up to date before serving requests")
    run_database_migrations()
    with session_scope() as session:
        PeriodService.ensure_periods(session)


@app.get("/", tags=["health"])
def read_root() -> dict[str, str]:
    """Return a simple health check response."""
    return {"status": "ok"}


FRONTEND_DIR = _resolve_frontend_dir()
if FRONTEND_DIR.is_dir():
    # Mounted last so API routes take precedence.
    app.mount("/", StaticFiles(directory=str(FRONTEND_DIR), html=True), name="frontend")
else:
    LOGGER.info("Frontend directory %s not found; static files disabled", FRONTEND_DIR)
