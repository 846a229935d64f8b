from __future__ import annotations

import datetime as dt

import pytest

from core.errors import ValidationFailed
from core.models import YearPeriodTiming
from core.services.validation import PAST_DATE_MESSAGE, validate_periods
from core.settings import reset_settings_cache
from core.utils.dates import parse_request_date

TODAY = dt.date(2026, 10, 19)


def test_past_date_rejected(session):
    with pytest.raises(ValidationFailed) as exc:
        validate_periods(session, 2, [1, 2], "2026-10-18", today=TODAY)
    assert exc.value.message == PAST_DATE_MESSAGE
    assert exc.value.status_code == 400


def test_today_accepted(session):
    assert validate_periods(session, 2, [1], "2026-10-19", today=TODAY) == TODAY


def test_future_accepted_without_any_timings(session):
    # No year_period_timings rows exist at all
    assert validate_periods(session, 3, [7, 8], "2099-01-01", today=TODAY) == dt.date(2099, 1, 1)


def test_datetime_strings_use_calendar_day(session):
    assert validate_periods(session, 2, [1], "2026-10-19T23:30:00", today=TODAY) == TODAY


def test_unparseable_date_rejected(session):
    with pytest.raises(ValidationFailed):
        validate_periods(session, 2, [1], "next tuesday", today=TODAY)
    with pytest.raises(ValidationFailed):
        validate_periods(session, 2, [1], "", today=TODAY)


def test_enforced_timings_reject_unknown_periods(session, monkeypatch):
    monkeypatch.setenv("OD_ENFORCE_PERIOD_TIMINGS", "1")
    reset_settings_cache()
    session.add(YearPeriodTiming(year=2, period_number=1, start_time="09:00", end_time="09:50"))
    session.commit()
    assert validate_periods(session, 2, [1], "2099-01-01", today=TODAY) == dt.date(2099, 1, 1)
    with pytest.raises(ValidationFailed) as exc:
        validate_periods(session, 2, [1, 4], "2099-01-01", today=TODAY)
    assert "4" in exc.value.message


def test_past_date_checked_before_timings(session, monkeypatch):
    monkeypatch.setenv("OD_ENFORCE_PERIOD_TIMINGS", "1")
    reset_settings_cache()
    with pytest.raises(ValidationFailed) as exc:
        validate_periods(session, 2, [9], "2000-01-01", today=TODAY)
    assert exc.value.message == PAST_DATE_MESSAGE


@pytest.mark.parametrize(
    "value,expected",
    [
        ("2026-10-19", dt.date(2026, 10, 19)),
        ("2026-10-19T08:00:00", dt.date(2026, 10, 19)),
        (dt.date(2026, 1, 2), dt.date(2026, 1, 2)),
        (None, None),
        ("19/10/2026", None),
    ],
)
def test_parse_request_date(value, expected):
    assert parse_request_date(value) == expected
