"""Router exposing the device catalog."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from .. import schemas
from ..database import get_db
from ..security import require_admin
from ..services import DeviceService, InventoryServiceError
from ..services.read_models import device_view
from .errors import as_http_exception

router = APIRouter(dependencies=[Depends(require_admin)])


@router.get("", response_model=schemas.DeviceListResponse)
def list_devices(
    db: Session = Depends(get_db),
    page: int = Query(1, ge=1, description="1-based page number"),
    limit: int = Query(10, ge=1, le=200, description="Maximum number of devices per page"),
    search: Optional[str] = Query(
        None, description="Search across code, serial, brand, model, type and location"
    ),
    device_type_id: Optional[int] = Query(None, ge=1),
    brand_id: Optional[int] = Query(None, ge=1),
    model_id: Optional[int] = Query(None, ge=1),
    os_id: Optional[int] = Query(None, ge=1),
    ram_id: Optional[int] = Query(None, ge=1),
    storage_id: Optional[int] = Query(None, ge=1),
    processor_id: Optional[int] = Query(None, ge=1),
    building_id: Optional[int] = Query(None, ge=1),
    floor_id: Optional[int] = Query(None, ge=1),
    area_id: Optional[int] = Query(None, ge=1),
    room_id: Optional[int] = Query(None, ge=1),
    location_id: Optional[int] = Query(None, ge=1),
) -> schemas.DeviceListResponse:
    items, total = DeviceService.list_devices(
        db,
        page=page,
        limit=limit,
        search=search,
        device_type_id=device_type_id,
        brand_id=brand_id,
        model_id=model_id,
        os_id=os_id,
        ram_id=ram_id,
        storage_id=storage_id,
        processor_id=processor_id,
        building_id=building_id,
        floor_id=floor_id,
        area_id=area_id,
        room_id=room_id,
        location_id=location_id,
    )
    return schemas.DeviceListResponse(
        items=[device_view(device) for device in items],
        total=total,
        page=page,
        limit=limit,
    )


@router.post("", response_model=schemas.DeviceRead, status_code=status.HTTP_201_CREATED)
def create_device(payload: schemas.DeviceCreate, db: Session = Depends(get_db)) -> schemas.DeviceRead:
    try:
        device = DeviceService.create_device(db, payload)
    except InventoryServiceError as exc:
        raise as_http_exception(exc) from exc
    return device_view(device)


@router.get("/{device_id}", response_model=schemas.DeviceRead)
def get_device(device_id: int, db: Session = Depends(get_db)) -> schemas.DeviceRead:
    try:
        device = DeviceService.get_device(db, device_id)
    except InventoryServiceError as exc:
        raise as_http_exception(exc) from exc
    return device_view(device)


@router.put("/{device_id}", response_model=schemas.DeviceRead)
def update_device(
    device_id: int,
    payload: schemas.DeviceUpdate,
    db: Session = Depends(get_db),
) -> schemas.DeviceRead:
    try:
        device = DeviceService.update_device(db, device_id, payload)
    except InventoryServiceError as exc:
        raise as_http_exception(exc) from exc
    return device_view(device)


@router.delete("/{device_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_device(device_id: int, db: Session = Depends(get_db)) -> Response:
    try:
        DeviceService.delete_device(db, device_id)
    except InventoryServiceError as exc:
        raise as_http_exception(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)
