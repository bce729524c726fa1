"""create trips table

Revision ID: 20260101_1010_create_trips
Revises: 20260101_1000_create_users_and_roles
Create Date: 2026-01-01 10:10:00
"""
from alembic import op
import sqlalchemy as sa

revision = '20260101_1010_create_trips'
down_revision = '20260101_1000_create_users_and_roles'
branch_labels = None
depends_on = None

def upgrade() -> None:
    op.create_table(
        'trips',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('start_date', sa.Date(), nullable=False, index=True),
        sa.Column('end_date', sa.Date(), nullable=False),
        sa.Column('cover_photo_url', sa.String(1024), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint('start_date <= end_date', name='ck_trips_date_order'),
    )

def downgrade() -> None:
    op.drop_table('trips')
