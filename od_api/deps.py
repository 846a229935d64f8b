from __future__ import annotations

from typing import Optional

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from core.services.auth import ROLE_ADMIN, ROLE_USER, Identity, authenticate, authorize

from .database import get_db


def current_identity(authorization: Optional[str] = Header(None)) -> Identity:
    return authenticate(authorization)


def require_admin(
    identity: Identity = Depends(current_identity),
    db: Session = Depends(get_db),
) -> Identity:
    return authorize(db, identity, ROLE_ADMIN)


def require_user(
    identity: Identity = Depends(current_identity),
    db: Session = Depends(get_db),
) -> Identity:
    return authorize(db, identity, ROLE_USER)
