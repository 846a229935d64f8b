from __future__ import annotations

import datetime as dt
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Ensure project root is importable as a module path
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from core.models import AdminWhitelist, Base, ODRequest, User, YearPeriodTiming
from core.settings import reset_settings_cache

SECRET = "test-secret"
DOMAIN = "college.edu"


@pytest.fixture(autouse=True)
def env(monkeypatch):
    monkeypatch.setenv("JWT_SECRET", SECRET)
    monkeypatch.setenv("TRUSTED_EMAIL_DOMAIN", DOMAIN)
    monkeypatch.setenv("DATABASE_URL", "sqlite:///:memory:")
    monkeypatch.delenv("JWT_AUDIENCE", raising=False)
    monkeypatch.delenv("OD_REVIEW_REQUIRE_PENDING", raising=False)
    monkeypatch.delenv("OD_ENFORCE_PERIOD_TIMINGS", raising=False)
    reset_settings_cache()
    yield
    reset_settings_cache()


@pytest.fixture()
def SessionLocal():
    """One in-memory SQLite database shared by every session in the test."""
    engine = create_engine(
        "sqlite://",
        future=True,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(engine)
    yield sessionmaker(bind=engine, autoflush=False, future=True)
    engine.dispose()


@pytest.fixture()
def session(SessionLocal):
    with SessionLocal() as s:
        yield s


@pytest.fixture()
def client(SessionLocal):
    from od_api.database import get_db
    from od_api.main import create_app

    app = create_app()

    def _get_db():
        s = SessionLocal()
        try:
            yield s
        finally:
            s.close()

    app.dependency_overrides[get_db] = _get_db
    return TestClient(app)


def make_token(sub: str, email: str, **kwargs) -> str:
    from core.auth import make_access_token

    return make_access_token(SECRET, sub, email, **kwargs)


def bearer(sub: str, email: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token(sub, email)}"}


def seed_user(SessionLocal, user_id: str, *, email: str | None = None, name: str = "Student", department: str = "CSE") -> None:
    with SessionLocal() as s:
        s.add(User(id=user_id, name=name, email=email or f"{user_id}@{DOMAIN}", department=department, year=2, reg_number=f"REG-{user_id}"))
        s.commit()


def seed_admin(SessionLocal, email: str, department: str | None = None) -> None:
    with SessionLocal() as s:
        s.add(AdminWhitelist(email=email, department=department))
        s.commit()


def seed_timings(SessionLocal, year: int, periods: list[int]) -> None:
    with SessionLocal() as s:
        for p in periods:
            s.add(YearPeriodTiming(year=year, period_number=p, start_time=f"{8 + p:02d}:00", end_time=f"{8 + p:02d}:50"))
        s.commit()


def seed_od(SessionLocal, user_id: str, *, department: str = "CSE", status: str = "pending", category: str = "Symposium", date: dt.date | None = None) -> int:
    with SessionLocal() as s:
        od = ODRequest(
            user_id=user_id,
            reg_number=f"REG-{user_id}",
            year=2,
            periods=[1, 2],
            date=date or dt.date(2099, 1, 1),
            department=department,
            od_category=category,
            status=status,
        )
        s.add(od)
        s.commit()
        return od.id
