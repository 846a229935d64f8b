from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from core.services import od_requests as od_service
from core.services.auth import Identity

from ..database import get_db
from ..deps import current_identity, require_admin, require_user
from ..schemas import ODRequestCreate, ODRequestOut, PendingODRequestOut, ReviewRequest

router = APIRouter(prefix="/api/od", tags=["od"])


@router.post("/request", response_model=ODRequestOut, status_code=201)
def create_od_request(
    payload: ODRequestCreate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_user),
):
    return od_service.create_request(db, identity, payload.model_dump(exclude_unset=True))


@router.get("/history/{user_id}", response_model=list[ODRequestOut])
def od_history(
    user_id: str,
    db: Session = Depends(get_db),
    identity: Identity = Depends(current_identity),
):
    return od_service.history(db, identity, user_id)


@router.get("/pending", response_model=list[PendingODRequestOut])
def od_pending(
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_admin),
):
    out = []
    for od, name, email in od_service.pending(db, identity):
        item = ODRequestOut.model_validate(od).model_dump()
        item["users"] = {"name": name, "email": email}
        out.append(item)
    return out


@router.put("/review/{request_id}", response_model=ODRequestOut)
def review_od_request(
    request_id: int,
    payload: ReviewRequest,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_admin),
):
    return od_service.review(
        db,
        identity,
        request_id,
        status=payload.status,
        remarks=payload.remarks,
        reviewed_by=payload.reviewedBy,
    )
