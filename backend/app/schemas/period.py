from __future__ import annotations

from datetime import date

from pydantic import BaseModel, ConfigDict, Field


class PeriodRead(BaseModel):
    code: str = Field(..., description="Semester code, e.g. 'I-2025' or 'II-2025'")
    starts_on: date
    ends_on: date
    is_current: bool = False

    model_config = ConfigDict(from_attributes=True)


class PeriodUpdate(BaseModel):
    starts_on: date
    ends_on: date
