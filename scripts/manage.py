from __future__ import annotations

import argparse
import subprocess
import sys

from sqlalchemy import text

from core.alembic_utils import current_revisions, head_revisions
from core.auth import make_access_token
from core.db import init_database, ping, session_scope
from core.models import AdminWhitelist, AuditEvent, ODRequest, User, YearPeriodTiming
from core.settings import get_settings


def _run(cmd: list[str]) -> int:
    print("$", " ".join(cmd))
    return subprocess.call(cmd)


def cmd_migrate(_: argparse.Namespace) -> int:
    return _run(["alembic", "upgrade", "head"])


def cmd_downgrade(args: argparse.Namespace) -> int:
    target = args.to or "base"
    return _run(["alembic", "downgrade", target])


def cmd_seed_demo(_: argparse.Namespace) -> int:
    from scripts import dev_seed

    dev_seed.main()
    return 0


def cmd_db_check(_: argparse.Namespace) -> int:
    engine = init_database(auto_apply_ddl=False, enforce_alembic=False)
    with session_scope() as session:
        ping(session)
    have, want = current_revisions(engine), head_revisions()
    print("DB OK")
    print("Revision:", ", ".join(sorted(have)) or "none", "(head:", ", ".join(sorted(want)) + ")")
    return 0 if have == want else 1


def cmd_check_schema(_: argparse.Namespace) -> int:
    """Print one admin_whitelist row and the columns the live table exposes."""
    engine = init_database(auto_apply_ddl=False)
    with engine.connect() as conn:
        result = conn.execute(text("SELECT * FROM admin_whitelist LIMIT 1"))
        columns = list(result.keys())
        row = result.mappings().first()
    print("Sample row from admin_whitelist:", dict(row) if row else None)
    print("Columns found:", columns)
    return 0


def cmd_token(args: argparse.Namespace) -> int:
    settings = get_settings()
    print(
        make_access_token(
            settings.jwt_secret,
            args.sub,
            args.email,
            ttl_seconds=args.ttl,
            audience=settings.jwt_audience or None,
        )
    )
    return 0


def cmd_add_admin(args: argparse.Namespace) -> int:
    email = args.email.strip().lower()
    with session_scope() as session:
        if session.get(AdminWhitelist, email) is not None:
            print("Already whitelisted")
            return 0
        session.add(AdminWhitelist(email=email, department=args.department or None))
        session.add(AuditEvent(actor="manage", action="whitelist_add", resource=email, meta_json="{}"))
    print(f"Whitelisted {email}")
    return 0


def cmd_health(args: argparse.Namespace) -> int:
    import urllib.request

    url = f"http://{args.host}:{args.port}/api/health"
    try:
        with urllib.request.urlopen(url, timeout=3) as resp:  # nosec - local
            ok = resp.getcode() == 200
            print("HEALTH:", "OK" if ok else "FAIL", url)
            return 0 if ok else 1
    except Exception as e:
        print("HEALTH: ERROR", e)
        return 1


def cmd_stats(_: argparse.Namespace) -> int:
    init_database()
    with session_scope() as session:
        stats = {
            "users": session.query(User).count(),
            "admin_whitelist": session.query(AdminWhitelist).count(),
            "year_period_timings": session.query(YearPeriodTiming).count(),
            "od_requests": session.query(ODRequest).count(),
            "od_requests_pending": session.query(ODRequest).filter(ODRequest.status == "pending").count(),
            "audit_events": session.query(AuditEvent).count(),
        }
        for k, v in stats.items():
            print(f"{k}: {v}")
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(prog="manage", description="Dev management CLI")
    sub = parser.add_subparsers(dest="cmd", required=True)

    sub.add_parser("migrate", help="Upgrade DB to head").set_defaults(func=cmd_migrate)

    p_down = sub.add_parser("downgrade", help="Downgrade DB to target (default base)")
    p_down.add_argument("to", nargs="?", default="base")
    p_down.set_defaults(func=cmd_downgrade)

    sub.add_parser("seed-demo", help="Seed timings, a CSE admin and a student; print tokens").set_defaults(func=cmd_seed_demo)
    sub.add_parser("db-check", help="Run a simple DB connectivity check").set_defaults(func=cmd_db_check)
    sub.add_parser("check-schema", help="Show a sample admin_whitelist row and its columns").set_defaults(func=cmd_check_schema)

    p_tok = sub.add_parser("token", help="Issue a signed access token for local testing")
    p_tok.add_argument("--sub", required=True)
    p_tok.add_argument("--email", required=True)
    p_tok.add_argument("--ttl", type=int, default=3600)
    p_tok.set_defaults(func=cmd_token)

    p_admin = sub.add_parser("add-admin", help="Whitelist an administrator e-mail")
    p_admin.add_argument("--email", required=True)
    p_admin.add_argument("--department")
    p_admin.set_defaults(func=cmd_add_admin)

    p_health = sub.add_parser("health", help="Call /api/health on host:port")
    p_health.add_argument("--host", default="127.0.0.1")
    p_health.add_argument("--port", type=int, default=get_settings().port)
    p_health.set_defaults(func=cmd_health)

    sub.add_parser("stats", help="Print table counts").set_defaults(func=cmd_stats)

    args = parser.parse_args()
    return int(args.func(args))


if __name__ == "__main__":
    raise SystemExit(main())
