"""create itinerary_days table

Revision ID: 20260101_1020_create_itinerary_days
Revises: 20260101_1010_create_trips
Create Date: 2026-01-01 10:20:00
"""
from alembic import op
import sqlalchemy as sa

revision = '20260101_1020_create_itinerary_days'
down_revision = '20260101_1010_create_trips'
branch_labels = None
depends_on = None

def upgrade() -> None:
    op.create_table(
        'itinerary_days',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('trip_id', sa.Integer(), sa.ForeignKey('trips.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('day_number', sa.Integer(), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('city', sa.String(100), nullable=True),
        sa.Column('country', sa.String(100), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )

def downgrade() -> None:
    op.drop_table('itinerary_days')
