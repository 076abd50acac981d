"""Router exposing the location hierarchy and its management operations."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from .. import schemas
from ..database import get_db
from ..security import require_admin
from ..services import HierarchyKind, InventoryServiceError, LocationHierarchyService
from ..services.read_models import location_view
from .errors import as_http_exception

router = APIRouter(dependencies=[Depends(require_admin)])


def _resolve_response(resolved) -> schemas.LocationResolveResponse:
    return schemas.LocationResolveResponse(
        status="ok" if resolved.created else "exists",
        created=resolved.created,
        location=location_view(resolved.location),
    )


@router.get("/buildings", response_model=list[schemas.BuildingRead])
def list_buildings(db: Session = Depends(get_db)) -> list[schemas.BuildingRead]:
    return LocationHierarchyService.list_buildings(db)


@router.get("/buildings/{building_id}/floors", response_model=list[schemas.FloorRead])
def list_floors(building_id: int, db: Session = Depends(get_db)) -> list[schemas.FloorRead]:
    try:
        return LocationHierarchyService.list_floors(db, building_id)
    except InventoryServiceError as exc:
        raise as_http_exception(exc) from exc


@router.get("/floors/{floor_id}/areas", response_model=list[schemas.AreaRead])
def list_areas(floor_id: int, db: Session = Depends(get_db)) -> list[schemas.AreaRead]:
    try:
        return LocationHierarchyService.list_areas(db, floor_id)
    except InventoryServiceError as exc:
        raise as_http_exception(exc) from exc


@router.get("/areas/{area_id}/rooms", response_model=list[schemas.RoomRead])
def list_rooms(area_id: int, db: Session = Depends(get_db)) -> list[schemas.RoomRead]:
    try:
        return LocationHierarchyService.list_rooms(db, area_id)
    except InventoryServiceError as exc:
        raise as_http_exception(exc) from exc


@router.get("/floor-names", response_model=list[str])
def list_floor_names(
    building: str = Query(..., min_length=1, description="Building name"),
    db: Session = Depends(get_db),
) -> list[str]:
    return LocationHierarchyService.floor_names(db, building)


@router.get("/area-names", response_model=list[str])
def list_area_names(
    building: str = Query(..., min_length=1, description="Building name"),
    floor: str = Query(..., min_length=1, description="Floor name"),
    db: Session = Depends(get_db),
) -> list[str]:
    return LocationHierarchyService.area_names(db, building, floor)


@router.get("", response_model=list[schemas.LocationRead])
def list_locations(
    db: Session = Depends(get_db),
    building_id: Optional[int] = Query(None, ge=1),
    floor_id: Optional[int] = Query(None, ge=1),
    area_id: Optional[int] = Query(None, ge=1),
    room_id: Optional[int] = Query(None, ge=1),
    search: Optional[str] = Query(None, description="Search across every level and details"),
) -> list[schemas.LocationRead]:
    locations = LocationHierarchyService.list_locations(
        db,
        building_id=building_id,
        floor_id=floor_id,
        area_id=area_id,
        room_id=room_id,
        search=search,
    )
    return [location_view(location) for location in locations]


@router.post("", response_model=schemas.LocationResolveResponse)
def create_location(
    payload: schemas.LocationPath,
    response: Response,
    db: Session = Depends(get_db),
) -> schemas.LocationResolveResponse:
    """Resolve a building/floor/area/room path, creating whatever is missing."""

    try:
        resolved = LocationHierarchyService.create_location(db, payload)
    except InventoryServiceError as exc:
        raise as_http_exception(exc) from exc
    if resolved.created:
        response.status_code = status.HTTP_201_CREATED
    return _resolve_response(resolved)


@router.post("/resolve-ids", response_model=schemas.LocationResolveResponse)
def resolve_location_ids(
    payload: schemas.LocationIdsRequest,
    response: Response,
    db: Session = Depends(get_db),
) -> schemas.LocationResolveResponse:
    try:
        resolved = LocationHierarchyService.resolve_ids(db, payload)
    except InventoryServiceError as exc:
        raise as_http_exception(exc) from exc
    if resolved.created:
        response.status_code = status.HTTP_201_CREATED
    return _resolve_response(resolved)


@router.get("/{location_id}", response_model=schemas.LocationRead)
def get_location(location_id: int, db: Session = Depends(get_db)) -> schemas.LocationRead:
    try:
        return location_view(LocationHierarchyService.get_location(db, location_id))
    except InventoryServiceError as exc:
        raise as_http_exception(exc) from exc


@router.put("/{location_id}", response_model=schemas.LocationRead)
def update_location(
    location_id: int,
    payload: schemas.LocationUpdate,
    db: Session = Depends(get_db),
) -> schemas.LocationRead:
    try:
        location = LocationHierarchyService.update_location(db, location_id, payload)
    except InventoryServiceError as exc:
        raise as_http_exception(exc) from exc
    return location_view(location)


@router.patch("/{kind}/{entity_id}", response_model=schemas.HierarchyEntityRead)
def rename_hierarchy_entity(
    kind: HierarchyKind,
    entity_id: int,
    payload: schemas.HierarchyRename,
    db: Session = Depends(get_db),
) -> schemas.HierarchyEntityRead:
    try:
        entity = LocationHierarchyService.rename(db, kind, entity_id, payload.name)
    except InventoryServiceError as exc:
        raise as_http_exception(exc) from exc
    return schemas.HierarchyEntityRead(kind=kind.value, id=entity.id, name=entity.name)


@router.delete("/{kind}/{entity_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_hierarchy_entity(
    kind: HierarchyKind,
    entity_id: int,
    db: Session = Depends(get_db),
) -> Response:
    try:
        LocationHierarchyService.delete(db, kind, entity_id)
    except InventoryServiceError as exc:
        raise as_http_exception(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)
