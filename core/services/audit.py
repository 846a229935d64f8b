from __future__ import annotations

import json
import logging
from typing import Any, Optional

from sqlalchemy.orm import Session

from core.models import AuditEvent

logger = logging.getLogger("od_core.audit")


def record_event(
    db: Session,
    *,
    actor: str,
    action: str,
    resource: str = "",
    result: str = "ok",
    meta: Optional[dict[str, Any]] = None,
) -> None:
    """Persist an audit event in an independent short-lived session.

    The session shares the caller's engine but not its transaction. If the
    write fails the event is emitted as an application log instead.
    """
    payload = {
        "actor": str(actor or "unknown")[:120],
        "action": str(action or "event")[:80],
        "resource": str(resource or "")[:255],
        "result": str(result or "ok")[:40],
        "meta_json": json.dumps(meta or {}, ensure_ascii=False, default=str),
    }
    try:
        with Session(bind=db.get_bind()) as s:
            try:
                s.add(AuditEvent(**payload))
                s.commit()
            except Exception:
                s.rollback()
                raise
    except Exception:
        logger.warning(
            "audit_fallback",
            extra={
                "event": payload["action"],
                "actor": payload["actor"],
                "resource": payload["resource"],
                "result": payload["result"],
                "meta": meta or {},
            },
            exc_info=True,
        )
