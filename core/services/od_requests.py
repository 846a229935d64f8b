from __future__ import annotations

import datetime as dt
import logging
from typing import Any, Optional

from sqlalchemy.orm import Session

from core.errors import Conflict, Forbidden, NotFound, ValidationFailed
from core.models import ODRequest, utc_now
from core.repositories import od_requests as od_repo
from core.services.audit import record_event
from core.services.auth import Identity, is_admin
from core.services.validation import validate_periods
from core.settings import get_settings

logger = logging.getLogger("od_core.od_requests")

REVIEW_STATUSES = ("approved", "rejected")

# Columns a requester may set; status and review columns stay with the store/admin
_CREATE_FIELDS = ("user_id", "reg_number", "year", "periods", "date", "department", "od_category", "reason")


def create_request(session: Session, identity: Identity, values: dict[str, Any]) -> ODRequest:
    if str(values.get("user_id") or "") != identity.user_id:
        raise Forbidden("You can only submit requests for yourself")
    request_date = validate_periods(session, int(values["year"]), values.get("periods") or [], values.get("date"))
    row = {k: values[k] for k in _CREATE_FIELDS if k in values}
    row["periods"] = sorted({int(p) for p in row.get("periods") or []})
    row["date"] = request_date
    od = od_repo.insert(session, row)
    logger.info("od_request_created", extra={"od_id": od.id, "user_id": od.user_id})
    return od


def history(session: Session, identity: Identity, user_id: str) -> list[ODRequest]:
    if user_id != identity.user_id and not is_admin(session, identity):
        raise Forbidden("You can only view your own requests")
    return od_repo.list_for_user(session, user_id)


def pending(session: Session, identity: Identity) -> list[tuple[ODRequest, Optional[str], Optional[str]]]:
    return od_repo.list_pending_with_user(session, identity.department)


def review(
    session: Session,
    identity: Identity,
    request_id: int,
    *,
    status: str,
    remarks: Optional[str],
    reviewed_by: str,
    now: Optional[dt.datetime] = None,
) -> ODRequest:
    """Stamp an admin decision on an OD request.

    By default the last write wins. With OD_REVIEW_REQUIRE_PENDING on, only a
    pending row is updated and a second review raises Conflict.
    """
    if reviewed_by != identity.user_id:
        raise Forbidden("reviewedBy must match the authenticated administrator")
    if status not in REVIEW_STATUSES:
        raise ValidationFailed(f"Invalid status: {status}")

    require_pending = get_settings().review_require_pending
    updated = od_repo.apply_review(
        session,
        request_id,
        status=status,
        remarks=remarks,
        reviewed_by=reviewed_by,
        reviewed_at=now or utc_now(),
        expected_status="pending" if require_pending else None,
    )
    od = od_repo.get_by_id(session, request_id)
    if od is None:
        raise NotFound("OD request not found")
    if updated == 0:
        raise Conflict("OD request has already been reviewed")
    session.refresh(od)

    record_event(
        session,
        actor=identity.email or identity.user_id,
        action=f"od_{status}",
        resource=f"/api/od/review/{request_id}",
        meta={"user_id": od.user_id, "remarks": remarks},
    )
    return od
