from __future__ import annotations

import io

from conftest import bearer, seed_admin, seed_od, seed_user
from openpyxl import load_workbook

from core.models import ODRequest
from core.services.reporting import export_csv, summarize


def _seed_mix(SessionLocal) -> None:
    seed_user(SessionLocal, "u1", department="CSE")
    seed_user(SessionLocal, "u2", department="ECE")
    seed_od(SessionLocal, "u1", department="CSE", status="approved", category="Sports")
    seed_od(SessionLocal, "u1", department="CSE", status="pending", category="Symposium")
    seed_od(SessionLocal, "u1", department="CSE", status="rejected", category="Symposium")
    seed_od(SessionLocal, "u2", department="ECE", status="approved", category="Hackathon")


def test_summary_scoped_to_admin_department(client, SessionLocal):
    _seed_mix(SessionLocal)
    seed_admin(SessionLocal, "hod@college.edu", "CSE")
    r = client.get("/api/reports/summary", headers=bearer("a1", "hod@college.edu"))
    assert r.status_code == 200
    assert r.json() == {
        "total": 3,
        "approved": 1,
        "pending": 1,
        "rejected": 1,
        "deptDistribution": {"CSE": 3},
        "categoryUsage": {"Sports": 1, "Symposium": 2},
    }


def test_summary_unscoped_admin_sees_everything(client, SessionLocal):
    _seed_mix(SessionLocal)
    seed_admin(SessionLocal, "dean@college.edu")
    data = client.get("/api/reports/summary", headers=bearer("a2", "dean@college.edu")).json()
    assert data["total"] == 4
    assert data["approved"] == 2
    assert data["deptDistribution"] == {"CSE": 3, "ECE": 1}


def test_reports_require_admin(client, SessionLocal):
    _seed_mix(SessionLocal)
    headers = bearer("u1", "u1@college.edu")
    assert client.get("/api/reports/summary", headers=headers).status_code == 403
    assert client.get("/api/reports/export", headers=headers).status_code == 403
    assert client.get("/api/reports/summary").status_code == 401


def test_export_csv_attachment(client, SessionLocal):
    _seed_mix(SessionLocal)
    seed_admin(SessionLocal, "hod@college.edu", "ECE")
    r = client.get("/api/reports/export", headers=bearer("a1", "hod@college.edu"))
    assert r.status_code == 200
    assert r.headers["content-type"].startswith("text/csv")
    assert r.headers["content-disposition"] == "attachment; filename=od_reports.csv"
    lines = r.text.strip().split("\n")
    assert lines[0] == "Reg Number,Dept,Year,Category,Date,Status"
    assert lines[1:] == ["REG-u2,ECE,2,Hackathon,2099-01-01,approved"]


def test_export_xlsx(client, SessionLocal):
    _seed_mix(SessionLocal)
    seed_admin(SessionLocal, "dean@college.edu")
    r = client.get("/api/reports/export?format=xlsx", headers=bearer("a1", "dean@college.edu"))
    assert r.status_code == 200
    assert r.headers["content-disposition"] == "attachment; filename=od_reports.xlsx"
    assert r.content[:2] == b"PK"
    ws = load_workbook(io.BytesIO(r.content)).active
    rows = list(ws.iter_rows(values_only=True))
    assert rows[0] == ("Reg Number", "Dept", "Year", "Category", "Date", "Status")
    assert len(rows) == 5


def test_export_rejects_unknown_format(client, SessionLocal):
    seed_admin(SessionLocal, "dean@college.edu")
    r = client.get("/api/reports/export?format=pdf", headers=bearer("a1", "dean@college.edu"))
    assert r.status_code == 422


def test_summarize_counts_missing_labels_as_unknown():
    rows = [
        ODRequest(status="pending", department=None, od_category="Sports"),
        ODRequest(status="approved", department="CSE", od_category=None),
    ]
    stats = summarize(rows)
    assert stats["total"] == 2
    assert stats["deptDistribution"] == {"Unknown": 1, "CSE": 1}
    assert stats["categoryUsage"] == {"Sports": 1, "Unknown": 1}


def test_export_csv_quotes_commas():
    import datetime as dt

    row = ODRequest(reg_number="R1", department="CSE, AI", year=3, od_category="Sports", date=dt.date(2099, 2, 1), status="pending")
    assert export_csv([row]).split("\n")[1] == 'R1,"CSE, AI",3,Sports,2099-02-01,pending'
