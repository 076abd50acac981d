"""Router exposing the inventory integrity audit."""

from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from .. import schemas
from ..database import get_db
from ..security import require_admin
from ..services import InventoryConsistencyService

router = APIRouter(dependencies=[Depends(require_admin)])


@router.get("/report", response_model=schemas.InventoryConsistencyReport)
def integrity_report(db: Session = Depends(get_db)) -> schemas.InventoryConsistencyReport:
    snapshot = InventoryConsistencyService.snapshot(db)
    return schemas.InventoryConsistencyReport(**asdict(snapshot))
