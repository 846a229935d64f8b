from __future__ import annotations

from fastapi import APIRouter, Body, Depends, Response
from sqlalchemy.orm import Session

from core.services import admin as admin_service
from core.services.auth import Identity

from ..database import get_db
from ..deps import require_admin
from ..schemas import TimingEntry, WhitelistAddRequest, WhitelistEntry

router = APIRouter(prefix="/api/admin", tags=["admin"])


@router.get("/whitelist", response_model=list[WhitelistEntry])
def list_whitelist(
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_admin),
):
    return admin_service.list_whitelist(db)


@router.post("/whitelist", response_model=WhitelistEntry, status_code=201)
def add_whitelist(
    payload: WhitelistAddRequest,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_admin),
):
    return admin_service.add_admin(db, identity, payload.email, payload.department)


@router.delete("/whitelist/{email}", status_code=204)
def delete_whitelist(
    email: str,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_admin),
):
    admin_service.remove_admin(db, identity, email)
    return Response(status_code=204)


@router.post("/timings", response_model=list[TimingEntry])
def upsert_timings(
    rows: list[TimingEntry] = Body(...),
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_admin),
):
    return admin_service.upsert_timings(db, identity, [r.model_dump() for r in rows])
