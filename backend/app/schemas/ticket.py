from __future__ import annotations

import enum
from datetime import date
from typing import Optional

from pydantic import BaseModel, Field

from ..models.ticket import TicketStatus
from .common import PaginatedResponse


class TicketStatusFilter(str, enum.Enum):
    """Status filter for listings; ``history`` groups both terminal states."""

    PENDING = "pending"
    REPAIRED = "repaired"
    UNREPAIRED = "unrepaired"
    HISTORY = "history"


class TicketOpen(BaseModel):
    device_id: Optional[int] = Field(default=None, ge=1)
    code: Optional[str] = Field(default=None, description="Device code, used when no id is sent")
    date_in: date
    details_in: Optional[str] = Field(default=None, description="Reported issue")


class TicketClose(BaseModel):
    status: TicketStatus
    date_out: Optional[date] = None
    details_out: Optional[str] = Field(default=None, description="Work done or diagnosis")


class TicketEdit(BaseModel):
    date_in: Optional[date] = None
    details_in: Optional[str] = None


class TicketRead(BaseModel):
    id: int
    device_id: int
    status: TicketStatus
    date_in: date
    date_out: Optional[date] = None
    details_in: Optional[str] = None
    details_out: Optional[str] = None
    device_code: Optional[str] = None
    device_type: Optional[str] = None
    brand: Optional[str] = None
    model: Optional[str] = None
    serial: Optional[str] = None
    location: str
    location_id: int


class TicketListResponse(PaginatedResponse[TicketRead]):
    """Paginated ticket listing."""
