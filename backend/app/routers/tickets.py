"""Router exposing the workshop ticket lifecycle."""

from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from .. import schemas
from ..database import get_db
from ..security import require_admin
from ..services import InventoryServiceError, TicketService
from ..services.read_models import ticket_view
from .errors import as_http_exception

router = APIRouter(dependencies=[Depends(require_admin)])


@router.get("", response_model=schemas.TicketListResponse)
def list_tickets(
    db: Session = Depends(get_db),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=200),
    status_filter: Optional[schemas.TicketStatusFilter] = Query(
        None,
        alias="status",
        description="pending, repaired, unrepaired or history (both closed states)",
    ),
    date_out_from: Optional[date] = Query(None),
    date_out_to: Optional[date] = Query(None),
    search: Optional[str] = Query(None),
    device_id: Optional[int] = Query(None, ge=1),
    device_type_id: Optional[int] = Query(None, ge=1),
    brand_id: Optional[int] = Query(None, ge=1),
    model_id: Optional[int] = Query(None, ge=1),
    location_id: Optional[int] = Query(None, ge=1),
    period: Optional[str] = Query(None, description="Academic period code, e.g. I-2025"),
) -> schemas.TicketListResponse:
    try:
        items, total = TicketService.list_tickets(
            db,
            page=page,
            limit=limit,
            status=status_filter,
            date_out_from=date_out_from,
            date_out_to=date_out_to,
            search=search,
            device_id=device_id,
            device_type_id=device_type_id,
            brand_id=brand_id,
            model_id=model_id,
            location_id=location_id,
            period=period,
        )
    except InventoryServiceError as exc:
        raise as_http_exception(exc) from exc
    return schemas.TicketListResponse(
        items=[ticket_view(ticket) for ticket in items],
        total=total,
        page=page,
        limit=limit,
    )


@router.post("", response_model=schemas.TicketRead, status_code=status.HTTP_201_CREATED)
def open_ticket(payload: schemas.TicketOpen, db: Session = Depends(get_db)) -> schemas.TicketRead:
    try:
        ticket = TicketService.open_ticket(db, payload)
    except InventoryServiceError as exc:
        raise as_http_exception(exc) from exc
    return ticket_view(ticket)


@router.get("/{ticket_id}", response_model=schemas.TicketRead)
def get_ticket(ticket_id: int, db: Session = Depends(get_db)) -> schemas.TicketRead:
    try:
        ticket = TicketService.get_ticket(db, ticket_id)
    except InventoryServiceError as exc:
        raise as_http_exception(exc) from exc
    return ticket_view(ticket)


@router.put("/{ticket_id}", response_model=schemas.TicketRead)
def edit_ticket(
    ticket_id: int,
    payload: schemas.TicketEdit,
    db: Session = Depends(get_db),
) -> schemas.TicketRead:
    try:
        ticket = TicketService.edit_ticket(db, ticket_id, payload)
    except InventoryServiceError as exc:
        raise as_http_exception(exc) from exc
    return ticket_view(ticket)


@router.post("/{ticket_id}/close", response_model=schemas.TicketRead)
def close_ticket(
    ticket_id: int,
    payload: schemas.TicketClose,
    db: Session = Depends(get_db),
) -> schemas.TicketRead:
    try:
        ticket = TicketService.close_ticket(db, ticket_id, payload)
    except InventoryServiceError as exc:
        raise as_http_exception(exc) from exc
    return ticket_view(ticket)


@router.delete("/{ticket_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_ticket(ticket_id: int, db: Session = Depends(get_db)) -> Response:
    try:
        TicketService.delete_ticket(db, ticket_id)
    except InventoryServiceError as exc:
        raise as_http_exception(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)
