from __future__ import annotations

from typing import Any

from sqlalchemy.orm import Session

from core.errors import Forbidden, NotFound
from core.models import User
from core.repositories import users as users_repo
from core.services.auth import Identity, is_admin


def get_profile(session: Session, identity: Identity, user_id: str) -> User:
    if user_id != identity.user_id and not is_admin(session, identity):
        raise Forbidden("You can only view your own profile")
    user = users_repo.get_by_id(session, user_id)
    if user is None:
        raise NotFound("User not found")
    return user


def upsert_profile(session: Session, identity: Identity, values: dict[str, Any]) -> User:
    user_id = str(values.get("id") or "")
    if user_id != identity.user_id:
        raise Forbidden("You can only update your own profile")
    return users_repo.upsert(session, user_id, values)
