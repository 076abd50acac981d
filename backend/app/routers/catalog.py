"""Router exposing CRUD operations for device attribute lookups."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from .. import schemas
from ..database import get_db
from ..security import require_admin
from ..services import InventoryServiceError, LookupKind, LookupService
from .errors import as_http_exception

router = APIRouter(dependencies=[Depends(require_admin)])


@router.get("/options", response_model=schemas.CatalogOptions)
def catalog_options(db: Session = Depends(get_db)) -> schemas.CatalogOptions:
    """Every value used by the device and ticket form selectors."""

    options = LookupService.options(db)
    for key, values in options.items():
        if values and not isinstance(values[0], str):
            options[key] = [schemas.LookupRead.model_validate(row) for row in values]
    return schemas.CatalogOptions(**options)


@router.get("/{kind}", response_model=list[schemas.LookupRead])
def list_lookup_values(
    kind: LookupKind,
    db: Session = Depends(get_db),
    search: Optional[str] = Query(None, description="Case-insensitive value filter"),
    brand_id: Optional[int] = Query(None, ge=1, description="Only models of this brand"),
) -> list[schemas.LookupRead]:
    return LookupService.list_values(db, kind, search=search, brand_id=brand_id)


@router.post("/{kind}", response_model=schemas.LookupRead, status_code=status.HTTP_201_CREATED)
def create_lookup_value(
    kind: LookupKind,
    payload: schemas.LookupCreate,
    db: Session = Depends(get_db),
) -> schemas.LookupRead:
    try:
        return LookupService.create(db, kind, payload.value, payload.brand_id)
    except InventoryServiceError as exc:
        raise as_http_exception(exc) from exc


@router.put("/{kind}/{value_id}", response_model=schemas.LookupRead)
def rename_lookup_value(
    kind: LookupKind,
    value_id: int,
    payload: schemas.LookupUpdate,
    db: Session = Depends(get_db),
) -> schemas.LookupRead:
    try:
        return LookupService.rename(db, kind, value_id, payload.value)
    except InventoryServiceError as exc:
        raise as_http_exception(exc) from exc


@router.delete("/{kind}/{value_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_lookup_value(
    kind: LookupKind,
    value_id: int,
    db: Session = Depends(get_db),
) -> Response:
    try:
        LookupService.delete(db, kind, value_id)
    except InventoryServiceError as exc:
        raise as_http_exception(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)
