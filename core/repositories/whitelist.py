from __future__ import annotations

from typing import Optional

from sqlalchemy.orm import Session

from core.models import AdminWhitelist


def find_by_email(session: Session, email: str) -> AdminWhitelist | None:
    return session.get(AdminWhitelist, (email or "").strip().lower())


def list_entries(session: Session) -> list[AdminWhitelist]:
    return session.query(AdminWhitelist).order_by(AdminWhitelist.email.asc()).all()


def add(session: Session, email: str, department: Optional[str]) -> AdminWhitelist:
    entry = AdminWhitelist(email=email.strip().lower(), department=department)
    session.add(entry)
    session.commit()
    session.refresh(entry)
    return entry


def delete(session: Session, entry: AdminWhitelist) -> None:
    session.delete(entry)
    session.commit()
