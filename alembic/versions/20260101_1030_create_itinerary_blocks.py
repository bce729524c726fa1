"""create itinerary_blocks table

Revision ID: 20260101_1030_create_itinerary_blocks
Revises: 20260101_1020_create_itinerary_days
Create Date: 2026-01-01 10:30:00
"""
from alembic import op
import sqlalchemy as sa

revision = '20260101_1030_create_itinerary_blocks'
down_revision = '20260101_1020_create_itinerary_days'
branch_labels = None
depends_on = None

block_type = sa.Enum('ACTIVITY', 'REST', 'SLEEP', 'GAP', name='block_type')

def upgrade() -> None:
    op.create_table(
        'itinerary_blocks',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('itinerary_day_id', sa.Integer(), sa.ForeignKey('itinerary_days.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('block_type', block_type, nullable=False),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('start_time', sa.Time(), nullable=False),
        sa.Column('end_time', sa.Time(), nullable=False),
        sa.Column('estimated_cost', sa.Numeric(10, 2), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint('start_time < end_time', name='ck_itinerary_blocks_time_order'),
        sa.CheckConstraint('estimated_cost IS NULL OR estimated_cost >= 0', name='ck_itinerary_blocks_cost'),
    )

def downgrade() -> None:
    op.drop_table('itinerary_blocks')
    block_type.drop(op.get_bind(), checkfirst=True)
