from __future__ import annotations

import datetime as dt
from typing import Any, Optional

from sqlalchemy import update
from sqlalchemy.orm import Session

from core.models import ODRequest, User


def get_by_id(session: Session, request_id: int) -> ODRequest | None:
    return session.get(ODRequest, request_id)


def insert(session: Session, values: dict[str, Any]) -> ODRequest:
    od = ODRequest(**values)
    session.add(od)
    session.commit()
    session.refresh(od)
    return od


def list_for_user(session: Session, user_id: str) -> list[ODRequest]:
    return (
        session.query(ODRequest)
        .filter(ODRequest.user_id == user_id)
        .order_by(ODRequest.submitted_at.desc(), ODRequest.id.desc())
        .all()
    )


def list_pending_with_user(
    session: Session, department: Optional[str] = None
) -> list[tuple[ODRequest, Optional[str], Optional[str]]]:
    query = (
        session.query(ODRequest, User.name, User.email)
        .outerjoin(User, ODRequest.user_id == User.id)
        .filter(ODRequest.status == "pending")
    )
    if department:
        query = query.filter(ODRequest.department == department)
    return [tuple(r) for r in query.order_by(ODRequest.submitted_at.asc(), ODRequest.id.asc()).all()]


def list_for_report(session: Session, department: Optional[str] = None) -> list[ODRequest]:
    query = session.query(ODRequest)
    if department:
        query = query.filter(ODRequest.department == department)
    return query.order_by(ODRequest.submitted_at.desc(), ODRequest.id.desc()).all()


def apply_review(
    session: Session,
    request_id: int,
    *,
    status: str,
    remarks: Optional[str],
    reviewed_by: str,
    reviewed_at: dt.datetime,
    expected_status: Optional[str] = None,
) -> int:
    """Write the review columns; returns the number of rows updated.

    With ``expected_status`` the update only matches a row still in that
    status, so two concurrent reviews cannot both succeed.
    """
    stmt = (
        update(ODRequest)
        .where(ODRequest.id == request_id)
        .values(status=status, remarks=remarks, reviewed_by=reviewed_by, reviewed_at=reviewed_at)
    )
    if expected_status is not None:
        stmt = stmt.where(ODRequest.status == expected_status)
    result = session.execute(stmt.execution_options(synchronize_session=False))
    session.commit()
    return int(result.rowcount or 0)
