from __future__ import annotations

from typing import Any

from sqlalchemy.orm import Session

from core.models import User

USER_FIELDS = ("name", "email", "department", "year", "reg_number")


def get_by_id(session: Session, user_id: str) -> User | None:
    return session.get(User, user_id)


def upsert(session: Session, user_id: str, values: dict[str, Any]) -> User:
    user = session.get(User, user_id)
    if user is None:
        user = User(id=user_id)
        session.add(user)
    for key in USER_FIELDS:
        if key in values:
            setattr(user, key, values[key])
    session.commit()
    session.refresh(user)
    return user
