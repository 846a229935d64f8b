from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from core.services import admin as admin_service
from core.services import users as user_service
from core.services.auth import Identity

from ..database import get_db
from ..deps import current_identity
from ..schemas import TimingEntry, UserOut, UserUpsertRequest

router = APIRouter(prefix="/api", tags=["users"])


@router.get("/timings/{year}", response_model=list[TimingEntry])
def get_timings(
    year: int,
    db: Session = Depends(get_db),
    identity: Identity = Depends(current_identity),
):
    return admin_service.list_timings(db, year)


@router.get("/user/{user_id}", response_model=UserOut)
def get_user(
    user_id: str,
    db: Session = Depends(get_db),
    identity: Identity = Depends(current_identity),
):
    return user_service.get_profile(db, identity, user_id)


@router.post("/user", response_model=UserOut)
def upsert_user(
    payload: UserUpsertRequest,
    db: Session = Depends(get_db),
    identity: Identity = Depends(current_identity),
):
    return user_service.upsert_profile(db, identity, payload.model_dump(exclude_unset=True))
