from __future__ import annotations

import datetime as dt
import logging
from typing import Iterable, Optional

from sqlalchemy.orm import Session

from core.errors import ValidationFailed
from core.repositories import timings as timings_repo
from core.settings import get_settings
from core.utils.dates import local_today, parse_request_date

logger = logging.getLogger("od_core.validation")

PAST_DATE_MESSAGE = "Cannot apply for OD on past dates."


def validate_periods(
    session: Session,
    year: int,
    periods: Iterable[int],
    date_str,
    *,
    today: Optional[dt.date] = None,
) -> dt.date:
    """Check an OD request's date (and optionally its periods); return the parsed date.

    Timings for the requested periods are fetched on every call. They are only
    enforced when OD_ENFORCE_PERIOD_TIMINGS is on; otherwise a year with no
    configured timings is accepted.
    """
    periods = [int(p) for p in periods]
    timings = timings_repo.find_for_periods(session, year, periods)

    request_date = parse_request_date(date_str)
    if request_date is None:
        raise ValidationFailed(f"Invalid date: {date_str!r}")
    if request_date < (today or local_today()):
        raise ValidationFailed(PAST_DATE_MESSAGE)

    if get_settings().enforce_period_timings:
        known = {t.period_number for t in timings}
        missing = sorted(set(periods) - known)
        if missing:
            raise ValidationFailed(
                f"No timing configured for period(s) {', '.join(str(p) for p in missing)} in year {year}."
            )
    elif len(timings) < len(set(periods)):
        logger.debug("periods without timings accepted", extra={"year": year, "periods": periods})

    return request_date
