"""initial schema

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19 00:00:00

"""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '0001_initial'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # users
    op.create_table(
        'users',
        sa.Column('id', sa.String(length=64), primary_key=True),
        sa.Column('name', sa.String(length=200), nullable=True),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('department', sa.String(length=80), nullable=True),
        sa.Column('year', sa.Integer(), nullable=True),
        sa.Column('reg_number', sa.String(length=40), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('ix_users_email', 'users', ['email'])

    # admin_whitelist
    op.create_table(
        'admin_whitelist',
        sa.Column('email', sa.String(length=255), primary_key=True),
        sa.Column('department', sa.String(length=80), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
    )

    # year_period_timings
    op.create_table(
        'year_period_timings',
        sa.Column('year', sa.Integer(), primary_key=True),
        sa.Column('period_number', sa.Integer(), primary_key=True),
        sa.Column('start_time', sa.String(length=8), nullable=False),
        sa.Column('end_time', sa.String(length=8), nullable=False),
    )

    # od_requests
    op.create_table(
        'od_requests',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.String(length=64), nullable=False),
        sa.Column('reg_number', sa.String(length=40), nullable=True),
        sa.Column('year', sa.Integer(), nullable=False),
        sa.Column('periods', sa.JSON(), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('department', sa.String(length=80), nullable=True),
        sa.Column('od_category', sa.String(length=80), nullable=True),
        sa.Column('reason', sa.Text(), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False, server_default=sa.text("'pending'")),
        sa.Column('remarks', sa.Text(), nullable=True),
        sa.Column('reviewed_by', sa.String(length=64), nullable=True),
        sa.Column('reviewed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('submitted_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], name='od_requests_user_id_fkey'),
        sa.CheckConstraint("status IN ('pending', 'approved', 'rejected')", name='ck_od_requests_status'),
    )
    op.create_index('ix_od_requests_user_id', 'od_requests', ['user_id'])
    op.create_index('ix_od_requests_status_submitted', 'od_requests', ['status', 'submitted_at'])
    op.create_index('ix_od_requests_department', 'od_requests', ['department'])

    # audit_events
    op.create_table(
        'audit_events',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('ts', sa.DateTime(timezone=True), nullable=True),
        sa.Column('actor', sa.String(length=120), nullable=False),
        sa.Column('action', sa.String(length=80), nullable=False),
        sa.Column('resource', sa.String(length=255), nullable=False, server_default=''),
        sa.Column('result', sa.String(length=40), nullable=False, server_default='ok'),
        sa.Column('meta_json', sa.Text(), nullable=False, server_default='{}'),
    )
    op.create_index('ix_audit_events_ts', 'audit_events', ['ts'])


def downgrade() -> None:
    op.drop_index('ix_audit_events_ts', table_name='audit_events')
    op.drop_table('audit_events')
    op.drop_index('ix_od_requests_department', table_name='od_requests')
    op.drop_index('ix_od_requests_status_submitted', table_name='od_requests')
    op.drop_index('ix_od_requests_user_id', table_name='od_requests')
    op.drop_table('od_requests')
    op.drop_table('year_period_timings')
    op.drop_table('admin_whitelist')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')
