from __future__ import annotations

from typing import Iterable, Optional

from sqlalchemy.orm import Session

from core.errors import Conflict, NotFound
from core.models import AdminWhitelist, YearPeriodTiming
from core.repositories import timings as timings_repo
from core.repositories import whitelist as whitelist_repo
from core.services.audit import record_event
from core.services.auth import Identity


def list_whitelist(session: Session) -> list[AdminWhitelist]:
    return whitelist_repo.list_entries(session)


def add_admin(session: Session, identity: Identity, email: str, department: Optional[str]) -> AdminWhitelist:
    if whitelist_repo.find_by_email(session, email) is not None:
        raise Conflict("Email is already whitelisted")
    entry = whitelist_repo.add(session, email, (department or "").strip() or None)
    record_event(
        session,
        actor=identity.email,
        action="whitelist_add",
        resource=entry.email,
        meta={"department": entry.department},
    )
    return entry


def remove_admin(session: Session, identity: Identity, email: str) -> None:
    entry = whitelist_repo.find_by_email(session, email)
    if entry is None:
        raise NotFound("Whitelist entry not found")
    whitelist_repo.delete(session, entry)
    record_event(session, actor=identity.email, action="whitelist_remove", resource=email.strip().lower())


def list_timings(session: Session, year: int) -> list[YearPeriodTiming]:
    return timings_repo.list_for_year(session, year)


def upsert_timings(session: Session, identity: Identity, rows: Iterable[dict]) -> list[YearPeriodTiming]:
    stored = timings_repo.upsert_many(session, rows)
    record_event(
        session,
        actor=identity.email,
        action="timings_upsert",
        resource="/api/admin/timings",
        meta={"rows": [[t.year, t.period_number] for t in stored]},
    )
    return stored
