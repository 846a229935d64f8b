from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse
from sqlalchemy.orm import Session

from core.db import ping
from core.settings import get_settings

from ..database import get_db
from ..schemas import HealthResponse, MetaResponse

router = APIRouter(tags=["health"])


@router.get("/api/health", response_class=PlainTextResponse)
def health():
    return "Server is running"


@router.get("/healthz", response_model=HealthResponse)
def healthz(db: Session = Depends(get_db)):
    ping(db)
    return {"ok": True, "status": "healthy"}


@router.get("/meta", response_model=MetaResponse)
def meta():
    settings = get_settings()
    return {
        "app_version": settings.app_version,
        "git_sha": settings.git_sha or "",
        "build_ts": settings.build_ts or "",
    }
