from __future__ import annotations

from pathlib import Path
from typing import Optional, Set

from alembic.config import Config
from alembic.runtime.migration import MigrationContext
from alembic.script import ScriptDirectory
from sqlalchemy.engine import Engine

ALEMBIC_INI = Path(__file__).resolve().parent.parent / "alembic.ini"


def head_revisions(ini_path: Optional[Path] = None) -> Set[str]:
    path = ini_path or ALEMBIC_INI
    if not path.exists():
        raise RuntimeError(f"Alembic config not found at {path}")
    return set(ScriptDirectory.from_config(Config(str(path))).get_heads())


def current_revisions(engine: Engine) -> Set[str]:
    with engine.connect() as conn:
        return set(MigrationContext.configure(conn).get_current_heads() or ())


def ensure_up_to_date(engine: Engine) -> None:
    """Refuse to serve OD traffic against a schema that is behind the migrations."""
    have = current_revisions(engine)
    want = head_revisions()
    if have != want:
        raise RuntimeError(
            f"OD schema revision {sorted(have) or 'none'} does not match migration head {sorted(want)}; "
            "run 'python -m scripts.manage migrate' first."
        )
