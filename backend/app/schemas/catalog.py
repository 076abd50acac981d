from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class LookupCreate(BaseModel):
    value: str = Field(..., min_length=1, max_length=120)
    brand_id: Optional[int] = Field(
        default=None, ge=1, description="Owning brand, required for models"
    )


class LookupUpdate(BaseModel):
    value: str = Field(..., min_length=1, max_length=120)


class LookupRead(BaseModel):
    id: int
    value: str
    brand_id: Optional[int] = None

    model_config = ConfigDict(from_attributes=True)


class CatalogOptions(BaseModel):
    """Values used to populate selectors in the device and ticket forms."""

    codes: list[str]
    device_types: list[LookupRead]
    brands: list[LookupRead]
    models: list[LookupRead]
    operating_systems: list[LookupRead]
    ram_sizes: list[LookupRead]
    storage_sizes: list[LookupRead]
    processors: list[LookupRead]
    architectures: list[str]
    buildings: list[str]
