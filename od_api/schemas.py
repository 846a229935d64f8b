from __future__ import annotations

import datetime as dt
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class HealthResponse(BaseModel):
    ok: bool
    status: Optional[str] = None
    error: Optional[str] = None


class MetaResponse(BaseModel):
    app_version: str
    git_sha: str = ""
    build_ts: str = ""


class ErrorResponse(BaseModel):
    ok: bool = False
    error: str
    code: Optional[str] = None
    request_id: str = ""


class _OrmModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)


# ------------------------------
# Users
# ------------------------------

class UserUpsertRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    name: Optional[str] = None
    email: Optional[str] = None
    department: Optional[str] = None
    year: Optional[int] = None
    reg_number: Optional[str] = None


class UserOut(_OrmModel):
    id: str
    name: Optional[str] = None
    email: Optional[str] = None
    department: Optional[str] = None
    year: Optional[int] = None
    reg_number: Optional[str] = None
    created_at: Optional[dt.datetime] = None
    updated_at: Optional[dt.datetime] = None


class UserBrief(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None


# ------------------------------
# Period timings
# ------------------------------

class TimingEntry(_OrmModel):
    year: int = Field(..., ge=1)
    period_number: int = Field(..., ge=1)
    start_time: str = Field(..., pattern=r"^\d{2}:\d{2}(:\d{2})?$")
    end_time: str = Field(..., pattern=r"^\d{2}:\d{2}(:\d{2})?$")


# ------------------------------
# OD requests
# ------------------------------

class ODRequestCreate(BaseModel):
    # Unknown keys (status, reviewed_by, ...) are dropped, never persisted
    model_config = ConfigDict(extra="ignore")

    user_id: str
    year: int
    periods: list[int] = Field(..., min_length=1)
    date: str
    department: Optional[str] = None
    od_category: Optional[str] = None
    reason: Optional[str] = None
    reg_number: Optional[str] = None


class ODRequestOut(_OrmModel):
    id: int
    user_id: str
    reg_number: Optional[str] = None
    year: int
    periods: list[int]
    date: dt.date
    department: Optional[str] = None
    od_category: Optional[str] = None
    reason: Optional[str] = None
    status: str
    remarks: Optional[str] = None
    reviewed_by: Optional[str] = None
    reviewed_at: Optional[dt.datetime] = None
    submitted_at: Optional[dt.datetime] = None


class PendingODRequestOut(ODRequestOut):
    users: Optional[UserBrief] = None


class ReviewRequest(BaseModel):
    status: Literal["approved", "rejected"]
    remarks: Optional[str] = None
    reviewedBy: str


# ------------------------------
# Reports
# ------------------------------

class ReportSummary(BaseModel):
    total: int
    approved: int
    pending: int
    rejected: int
    deptDistribution: dict[str, int]
    categoryUsage: dict[str, int]


# ------------------------------
# Admin whitelist
# ------------------------------

class WhitelistAddRequest(BaseModel):
    email: str
    department: Optional[str] = None

    @field_validator("email")
    @classmethod
    def _normalize_email(cls, value: str) -> str:
        val = (value or "").strip().lower()
        if "@" not in val:
            raise ValueError("email must contain '@'")
        return val


class WhitelistEntry(_OrmModel):
    email: str
    department: Optional[str] = None
    created_at: Optional[dt.datetime] = None
