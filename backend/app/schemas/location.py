from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class BuildingRead(BaseModel):
    id: int
    name: str

    model_config = ConfigDict(from_attributes=True)


class FloorRead(BaseModel):
    id: int
    building_id: int
    name: str

    model_config = ConfigDict(from_attributes=True)


class AreaRead(BaseModel):
    id: int
    floor_id: int
    name: str

    model_config = ConfigDict(from_attributes=True)


class RoomRead(BaseModel):
    id: int
    area_id: int
    name: str

    model_config = ConfigDict(from_attributes=True)


class LocationPath(BaseModel):
    """Human-entered placement resolved into a location row."""

    building: str = Field(..., description="Building name, e.g. 'Edificio 01'")
    floor: str = Field(..., description="Floor name within the building")
    area: str = Field(..., description="Area or department within the floor")
    room: Optional[str] = Field(default=None, description="Room inside the area, if any")
    details: Optional[str] = Field(default=None, description="Free-text placement detail")


class LocationIdsRequest(BaseModel):
    area_id: int = Field(..., ge=1)
    room_id: Optional[int] = Field(default=None, ge=1)
    details: Optional[str] = None


class LocationUpdate(BaseModel):
    area_id: Optional[int] = Field(default=None, ge=1)
    room_id: Optional[int] = Field(default=None, ge=1)
    details: Optional[str] = None


class HierarchyRename(BaseModel):
    name: str = Field(..., min_length=1, max_length=120)


class LocationRead(BaseModel):
    id: int
    building_id: int
    building: str
    floor_id: int
    floor: str
    area_id: int
    area: str
    room_id: Optional[int] = None
    room: Optional[str] = None
    details: Optional[str] = None
    path: str = Field(..., description="Display path, e.g. 'Edificio 01 > Piso 01 > Área TIC'")


class LocationResolveResponse(BaseModel):
    status: str = Field(..., description="'ok' when created, 'exists' when reused")
    created: bool
    location: LocationRead


class HierarchyEntityRead(BaseModel):
    """Renamed building, floor, area or room."""

    kind: str
    id: int
    name: str
