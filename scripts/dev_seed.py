from __future__ import annotations

from sqlalchemy.orm import Session

from core.auth import make_access_token
from core.db import init_database, session_scope
from core.models import AdminWhitelist, User, YearPeriodTiming
from core.settings import get_settings

# Default college timetable: seven 50-minute periods from 09:00 with a lunch gap
DEFAULT_PERIODS = [
    (1, "09:00", "09:50"),
    (2, "09:50", "10:40"),
    (3, "10:55", "11:45"),
    (4, "11:45", "12:35"),
    (5, "13:25", "14:15"),
    (6, "14:15", "15:05"),
    (7, "15:15", "16:05"),
]


def main() -> None:
    init_database(auto_apply_ddl=True)
    settings = get_settings()
    domain = settings.trusted_email_domain or "college.edu"
    admin_email = f"hod.cse@{domain}"
    student_email = f"student1@{domain}"
    with session_scope() as session:
        _seed_timings(session)
        _seed_admin(session, admin_email, "CSE")
        _seed_student(session, "student-1", student_email)
    print("Admin token:  ", make_access_token(settings.jwt_secret, "admin-1", admin_email, ttl_seconds=7 * 24 * 3600))
    print("Student token:", make_access_token(settings.jwt_secret, "student-1", student_email, ttl_seconds=7 * 24 * 3600))
    if not settings.trusted_email_domain:
        print("TRUSTED_EMAIL_DOMAIN is empty; set it to 'college.edu' for the student token to pass.")


def _seed_timings(session: Session) -> None:
    for year in (1, 2, 3, 4):
        for number, start, end in DEFAULT_PERIODS:
            if session.get(YearPeriodTiming, (year, number)) is None:
                session.add(YearPeriodTiming(year=year, period_number=number, start_time=start, end_time=end))
    print("Seeded period timings for years 1-4")


def _seed_admin(session: Session, email: str, department: str) -> None:
    if session.get(AdminWhitelist, email) is not None:
        print(f"Admin already whitelisted: {email}")
        return
    session.add(AdminWhitelist(email=email, department=department))
    print(f"Whitelisted admin: {email} ({department})")


def _seed_student(session: Session, user_id: str, email: str) -> None:
    if session.get(User, user_id) is not None:
        return
    session.add(User(id=user_id, name="Demo Student", email=email, department="CSE", year=2, reg_number="21CSE001"))
    print(f"Created student: {email}")


if __name__ == "__main__":
    main()
