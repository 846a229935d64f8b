from __future__ import annotations

from typing import Iterable

from sqlalchemy.orm import Session

from core.models import YearPeriodTiming


def list_for_year(session: Session, year: int) -> list[YearPeriodTiming]:
    return (
        session.query(YearPeriodTiming)
        .filter(YearPeriodTiming.year == year)
        .order_by(YearPeriodTiming.period_number.asc())
        .all()
    )


def find_for_periods(session: Session, year: int, periods: Iterable[int]) -> list[YearPeriodTiming]:
    wanted = sorted({int(p) for p in periods})
    if not wanted:
        return []
    return (
        session.query(YearPeriodTiming)
        .filter(YearPeriodTiming.year == year, YearPeriodTiming.period_number.in_(wanted))
        .all()
    )


def upsert_many(session: Session, rows: Iterable[dict]) -> list[YearPeriodTiming]:
    """Insert or update timings; a key repeated in one batch keeps its last row."""
    latest: dict[tuple[int, int], dict] = {}
    for row in rows:
        latest[(int(row["year"]), int(row["period_number"]))] = row

    stored: list[YearPeriodTiming] = []
    for key, row in latest.items():
        timing = session.get(YearPeriodTiming, key)
        if timing is None:
            timing = YearPeriodTiming(year=key[0], period_number=key[1])
            session.add(timing)
        timing.start_time = row["start_time"]
        timing.end_time = row["end_time"]
        stored.append(timing)
    session.commit()
    for timing in stored:
        session.refresh(timing)
    return stored
