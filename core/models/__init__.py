from __future__ import annotations

import datetime as dt
from typing import Optional

from sqlalchemy import JSON, CheckConstraint, Date, DateTime, ForeignKey, Index, Integer, String, Text, text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    pass


def utc_now() -> dt.datetime:
    return dt.datetime.now(dt.UTC)


OD_STATUSES = ("pending", "approved", "rejected")


class User(Base):
    __tablename__ = "users"
    # Matches the identity provider's subject claim
    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[Optional[str]] = mapped_column(String(200))
    email: Mapped[Optional[str]] = mapped_column(String(255), index=True)
    department: Mapped[Optional[str]] = mapped_column(String(80))
    year: Mapped[Optional[int]] = mapped_column(Integer)
    reg_number: Mapped[Optional[str]] = mapped_column(String(40))
    created_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), default=utc_now)
    updated_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), default=utc_now, onupdate=utc_now)

    od_requests: Mapped[list["ODRequest"]] = relationship(back_populates="user")


class AdminWhitelist(Base):
    __tablename__ = "admin_whitelist"
    email: Mapped[str] = mapped_column(String(255), primary_key=True)
    # NULL means the admin sees every department
    department: Mapped[Optional[str]] = mapped_column(String(80))
    created_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), default=utc_now)


class YearPeriodTiming(Base):
    __tablename__ = "year_period_timings"
    year: Mapped[int] = mapped_column(Integer, primary_key=True)
    period_number: Mapped[int] = mapped_column(Integer, primary_key=True)
    start_time: Mapped[str] = mapped_column(String(8), nullable=False)  # HH:MM
    end_time: Mapped[str] = mapped_column(String(8), nullable=False)


class ODRequest(Base):
    __tablename__ = "od_requests"
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[str] = mapped_column(ForeignKey("users.id", name="od_requests_user_id_fkey"), nullable=False, index=True)
    reg_number: Mapped[Optional[str]] = mapped_column(String(40))
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    periods: Mapped[list[int]] = mapped_column(JSON, nullable=False, default=list)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    department: Mapped[Optional[str]] = mapped_column(String(80))
    od_category: Mapped[Optional[str]] = mapped_column(String(80))
    reason: Mapped[Optional[str]] = mapped_column(Text)
    # Left to the store default on insert
    status: Mapped[str] = mapped_column(String(20), nullable=False, server_default=text("'pending'"))
    remarks: Mapped[Optional[str]] = mapped_column(Text)
    reviewed_by: Mapped[Optional[str]] = mapped_column(String(64))
    reviewed_at: Mapped[Optional[dt.datetime]] = mapped_column(DateTime(timezone=True))
    submitted_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), default=utc_now)

    user: Mapped[User] = relationship(back_populates="od_requests")

    __table_args__ = (
        Index("ix_od_requests_status_submitted", "status", "submitted_at"),
        Index("ix_od_requests_department", "department"),
        CheckConstraint("status IN ('pending', 'approved', 'rejected')", name="ck_od_requests_status"),
    )


class AuditEvent(Base):
    __tablename__ = "audit_events"
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    ts: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), default=utc_now, index=True)
    actor: Mapped[str] = mapped_column(String(120), nullable=False)
    action: Mapped[str] = mapped_column(String(80), nullable=False)
    resource: Mapped[str] = mapped_column(String(255), default="")
    result: Mapped[str] = mapped_column(String(40), default="ok")
    meta_json: Mapped[str] = mapped_column(Text, default="{}")
