from __future__ import annotations

import datetime as dt
from typing import Optional


def parse_request_date(value) -> Optional[dt.date]:
    """Parse an ISO date or datetime string into a calendar date.

    Aware datetimes are converted to local time first so the calendar day
    matches what the requester sees.
    """
    if not value:
        return None
    if isinstance(value, dt.datetime):
        parsed = value
    elif isinstance(value, dt.date):
        return value
    else:
        s = str(value).strip()
        if not s:
            return None
        try:
            return dt.date.fromisoformat(s)
        except ValueError:
            pass
        try:
            parsed = dt.datetime.fromisoformat(s.replace("Z", "+00:00"))
        except ValueError:
            return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone()
    return parsed.date()


def local_today() -> dt.date:
    return dt.datetime.now().date()
