from __future__ import annotations

import csv
import io
from typing import Any, Dict, Iterable, Optional

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter
from sqlalchemy.orm import Session

from core.models import OD_STATUSES, ODRequest
from core.repositories import od_requests as od_repo

EXPORT_COLUMNS = [
    ("Reg Number", "reg_number"),
    ("Dept", "department"),
    ("Year", "year"),
    ("Category", "od_category"),
    ("Date", "date"),
    ("Status", "status"),
]


def report_rows(session: Session, department: Optional[str] = None) -> list[ODRequest]:
    return od_repo.list_for_report(session, department)


def summarize(rows: Iterable[ODRequest]) -> Dict[str, Any]:
    """Count rows by status, department and category in a single pass."""
    stats: Dict[str, Any] = {
        "total": 0,
        "approved": 0,
        "pending": 0,
        "rejected": 0,
        "deptDistribution": {},
        "categoryUsage": {},
    }
    for r in rows:
        stats["total"] += 1
        if r.status in OD_STATUSES:
            stats[r.status] += 1
        dept = r.department or "Unknown"
        cat = r.od_category or "Unknown"
        stats["deptDistribution"][dept] = stats["deptDistribution"].get(dept, 0) + 1
        stats["categoryUsage"][cat] = stats["categoryUsage"].get(cat, 0) + 1
    return stats


def _export_values(r: ODRequest) -> list[Any]:
    out = []
    for _, attr in EXPORT_COLUMNS:
        val = getattr(r, attr)
        out.append(val.isoformat() if hasattr(val, "isoformat") else val)
    return out


def export_csv(rows: Iterable[ODRequest]) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow([label for label, _ in EXPORT_COLUMNS])
    for r in rows:
        writer.writerow(["" if v is None else v for v in _export_values(r)])
    return buf.getvalue()


def export_xlsx(rows: Iterable[ODRequest]) -> io.BytesIO:
    wb = Workbook()
    ws = wb.active
    ws.title = "OD Requests"

    head_fill = PatternFill("solid", fgColor="F2F3F5")
    bold = Font(bold=True)
    center = Alignment(horizontal="center", vertical="center")
    thin = Side(style="thin", color="DDDDDD")
    border = Border(top=thin, left=thin, right=thin, bottom=thin)

    ws.append([label for label, _ in EXPORT_COLUMNS])
    for c in range(1, len(EXPORT_COLUMNS) + 1):
        cell = ws.cell(row=1, column=c)
        cell.fill = head_fill
        cell.font = bold
        cell.alignment = center
        cell.border = border
    for r in rows:
        ws.append(_export_values(r))
    ws.freeze_panes = "A2"

    for col_idx in range(1, ws.max_column + 1):
        max_len = 0
        for row_idx in range(1, ws.max_row + 1):
            val = ws.cell(row=row_idx, column=col_idx).value
            max_len = max(max_len, len(str(val)) if val is not None else 0)
        ws.column_dimensions[get_column_letter(col_idx)].width = min(32, max(8, max_len + 2))

    bio = io.BytesIO()
    wb.save(bio)
    bio.seek(0)
    return bio
