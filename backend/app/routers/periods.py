"""Router exposing academic periods."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from .. import schemas
from ..database import get_db
from ..security import require_admin
from ..services import InventoryServiceError, NotFoundError, PeriodService
from .errors import as_http_exception

router = APIRouter(dependencies=[Depends(require_admin)])


def _read(period, active_code: str | None) -> schemas.PeriodRead:
    return schemas.PeriodRead(
        code=period.code,
        starts_on=period.starts_on,
        ends_on=period.ends_on,
        is_current=period.code == active_code,
    )


@router.get("", response_model=list[schemas.PeriodRead])
def list_periods(db: Session = Depends(get_db)) -> list[schemas.PeriodRead]:
    active = PeriodService.active_period(db)
    active_code = active.code if active is not None else None
    return [_read(period, active_code) for period in PeriodService.list_periods(db)]


@router.get("/active", response_model=schemas.PeriodRead)
def get_active_period(db: Session = Depends(get_db)) -> schemas.PeriodRead:
    active = PeriodService.active_period(db)
    if active is None:
        raise as_http_exception(NotFoundError("No hay un periodo académico activo."))
    return _read(active, active.code)


@router.put("/{code}", response_model=schemas.PeriodRead)
def update_period(
    code: str,
    payload: schemas.PeriodUpdate,
    db: Session = Depends(get_db),
) -> schemas.PeriodRead:
    try:
        period = PeriodService.update_period(db, code, payload)
    except InventoryServiceError as exc:
        raise as_http_exception(exc) from exc
    return _read(period, period.code)
