from __future__ import annotations

from typing import Literal

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response, StreamingResponse
from sqlalchemy.orm import Session

from core.services import reporting
from core.services.auth import Identity

from ..database import get_db
from ..deps import require_admin
from ..schemas import ReportSummary

router = APIRouter(prefix="/api/reports", tags=["reports"])

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


@router.get("/summary", response_model=ReportSummary)
def report_summary(
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_admin),
):
    return reporting.summarize(reporting.report_rows(db, identity.department))


@router.get("/export")
def report_export(
    format: Literal["csv", "xlsx"] = Query("csv"),
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_admin),
):
    rows = reporting.report_rows(db, identity.department)
    if format == "xlsx":
        return StreamingResponse(
            reporting.export_xlsx(rows),
            media_type=XLSX_MEDIA_TYPE,
            headers={"Content-Disposition": "attachment; filename=od_reports.xlsx"},
        )
    return Response(
        content=reporting.export_csv(rows),
        media_type="text/csv",
        headers={"Content-Disposition": "attachment; filename=od_reports.csv"},
    )
