from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .common import PaginatedResponse
from .location import LocationPath, LocationRead


class DeviceAttributes(BaseModel):
    """Technical attributes given either by lookup id or by value.

    When both are present the id wins. Values are created in their lookup
    table on first use; a model given by value is created under the brand.
    """

    code: Optional[str] = Field(default=None, description="Internal inventory code")
    device_type_id: Optional[int] = Field(default=None, ge=1)
    device_type: Optional[str] = Field(default=None, description="Device type by value, e.g. 'PC'")
    brand_id: Optional[int] = Field(default=None, ge=1)
    brand: Optional[str] = None
    model_id: Optional[int] = Field(default=None, ge=1)
    model: Optional[str] = None
    os_id: Optional[int] = Field(default=None, ge=1)
    os: Optional[str] = None
    ram_id: Optional[int] = Field(default=None, ge=1)
    ram: Optional[str] = None
    storage_id: Optional[int] = Field(default=None, ge=1)
    storage: Optional[str] = None
    processor_id: Optional[int] = Field(default=None, ge=1)
    processor: Optional[str] = None
    architecture: Optional[str] = Field(default=None, description="e.g. '32 BIT', '64 BIT'")
    serial: Optional[str] = None
    details: Optional[str] = None

    location_id: Optional[int] = Field(default=None, ge=1, description="Existing location")
    location: Optional[LocationPath] = Field(
        default=None, description="Placement by names, resolved or created on save"
    )
    area_id: Optional[int] = Field(default=None, ge=1, description="Placement by hierarchy ids")
    room_id: Optional[int] = Field(default=None, ge=1)
    location_details: Optional[str] = None

    model_config = ConfigDict(protected_namespaces=())


class DeviceCreate(DeviceAttributes):
    """Schema used when registering devices."""

    pass


class DeviceUpdate(DeviceAttributes):
    """Partial update; only the fields sent are changed."""

    pass


class DeviceRead(BaseModel):
    id: int
    code: Optional[str] = None
    device_type_id: int
    device_type: str
    brand_id: Optional[int] = None
    brand: Optional[str] = None
    model_id: Optional[int] = None
    model: Optional[str] = None
    os_id: Optional[int] = None
    os: Optional[str] = None
    ram_id: Optional[int] = None
    ram: Optional[str] = None
    storage_id: Optional[int] = None
    storage: Optional[str] = None
    processor_id: Optional[int] = None
    processor: Optional[str] = None
    architecture: Optional[str] = None
    serial: Optional[str] = None
    details: Optional[str] = None
    location: LocationRead
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(protected_namespaces=())


class DeviceListResponse(PaginatedResponse[DeviceRead]):
    """Paginated device listing."""
