from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Generator, Optional

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import URL, Engine, make_url
from sqlalchemy.orm import Session, sessionmaker

from .alembic_utils import ensure_up_to_date
from .models import Base
from .settings import get_settings

logger = logging.getLogger("od_core.db")

_engine: Optional[Engine] = None
_SessionLocal: Optional[sessionmaker] = None


def _resolve_database_url() -> str:
    settings = get_settings()
    if settings.database_url:
        return settings.database_url
    root = Path(__file__).resolve().parents[1]
    return f"sqlite:///{(root / 'od_portal.db').resolve()}"


def _engine_options(url: URL) -> Dict[str, Any]:
    if url.get_backend_name() == "sqlite":
        return {"connect_args": {"check_same_thread": False}}
    # Hosted Postgres drops idle connections
    return {"pool_pre_ping": True}


def _enable_sqlite_foreign_keys(engine: Engine) -> None:
    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):  # type: ignore[unused-argument]
        cursor = dbapi_connection.cursor()
        try:
            cursor.execute("PRAGMA foreign_keys=ON;")
        finally:
            cursor.close()


def get_engine(echo: bool = False) -> Engine:
    """Return the process-wide engine, creating it from DATABASE_URL on first use."""
    global _engine
    if _engine is None:
        url = make_url(_resolve_database_url())
        _engine = create_engine(url, echo=echo, future=True, **_engine_options(url))
        if url.get_backend_name() == "sqlite":
            _enable_sqlite_foreign_keys(_engine)
            logger.warning("OD store is SQLite at %s; use PostgreSQL for shared deployments.", url.database)
    return _engine


def get_sessionmaker() -> sessionmaker:
    global _SessionLocal
    if _SessionLocal is None:
        _SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=get_engine(), future=True)
    return _SessionLocal


def reset_engine() -> None:
    """Dispose the cached engine so the next call re-reads DATABASE_URL."""
    global _engine, _SessionLocal
    if _engine is not None:
        _engine.dispose()
    _engine = None
    _SessionLocal = None


def ping(session: Session) -> None:
    """Round-trip a trivial query; raises the driver error when the store is unreachable."""
    session.execute(text("SELECT 1"))


@contextmanager
def session_scope() -> Generator[Session, None, None]:
    """Commit on success, roll back and re-raise on error."""
    session = get_sessionmaker()()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def fastapi_session() -> Generator[Session, None, None]:
    session = get_sessionmaker()()
    try:
        yield session
    finally:
        session.close()


def init_database(auto_apply_ddl: Optional[bool] = None, enforce_alembic: Optional[bool] = None) -> Engine:
    """Prepare the OD tables and return the engine.

    With OD_AUTO_APPLY_DDL the tables are created in place. Otherwise, when
    OD_ENFORCE_ALEMBIC is set, startup fails unless the schema is at head.
    """
    engine = get_engine()
    settings = get_settings()

    auto = settings.auto_apply_ddl if auto_apply_ddl is None else auto_apply_ddl
    enforce = settings.enforce_alembic_migrations if enforce_alembic is None else enforce_alembic

    if auto:
        Base.metadata.create_all(bind=engine)
    elif enforce:
        ensure_up_to_date(engine)
    else:
        logger.info("Automatic DDL disabled; expecting od_requests and friends to exist already.")
    return engine
