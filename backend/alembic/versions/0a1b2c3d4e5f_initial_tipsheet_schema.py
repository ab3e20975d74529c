"""initial tipsheet schema: venues, reviews, reports, admin_users

Revision ID: 0a1b2c3d4e5f
Revises:
Create Date: 2026-10-18

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = '0a1b2c3d4e5f'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'venues',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('city', sa.String(length=120), nullable=False),
        sa.Column('state', sa.String(length=8), nullable=False),
        sa.Column('venue_type', sa.String(length=80), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('google_place_id', sa.String(length=255), nullable=True),
        sa.Column('formatted_address', sa.String(length=500), nullable=True),
        sa.Column('lat', sa.Float(), nullable=True),
        sa.Column('lng', sa.Float(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('google_place_id'),
    )
    op.create_index(op.f('ix_venues_city'), 'venues', ['city'], unique=False)
    op.create_index(op.f('ix_venues_state'), 'venues', ['state'], unique=False)
    op.create_index(
        'uq_venues_name_city_state',
        'venues',
        [sa.text('lower(name)'), sa.text('lower(city)'), 'state'],
        unique=True,
    )

    op.create_table(
        'reviews',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('venue_id', sa.String(length=36), nullable=False),
        sa.Column('role', sa.String(length=80), nullable=False),
        sa.Column('tips_weekly', sa.Float(), nullable=True),
        sa.Column('hours_weekly', sa.Float(), nullable=True),
        sa.Column('tip_pool', sa.Boolean(), nullable=True),
        sa.Column('busy_season', sa.String(length=200), nullable=True),
        sa.Column('recommended', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('comment', sa.String(length=4000), nullable=True),
        sa.Column('earnings_label', sa.String(length=16), nullable=False, server_default='pre-tax'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('is_hidden', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('submitter_token', sa.String(length=64), nullable=True),
        sa.ForeignKeyConstraint(['venue_id'], ['venues.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('venue_id', 'submitter_token', name='uq_reviews_venue_submitter'),
    )
    op.create_index(op.f('ix_reviews_venue_id'), 'reviews', ['venue_id'], unique=False)

    op.create_table(
        'reports',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('target_type', sa.String(length=16), nullable=False),
        sa.Column('target_id', sa.String(length=36), nullable=False),
        sa.Column('reason', sa.String(length=2000), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('resolved_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('resolved_by', sa.String(length=36), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_reports_target', 'reports', ['target_type', 'target_id'], unique=False)

    op.create_table(
        'admin_users',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.String(length=128), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_admin_users_email'), 'admin_users', ['email'], unique=True)


def downgrade() -> None:
    op.drop_index(op.f('ix_admin_users_email'), table_name='admin_users')
    op.drop_table('admin_users')

    op.drop_index('ix_reports_target', table_name='reports')
    op.drop_table('reports')

    op.drop_index(op.f('ix_reviews_venue_id'), table_name='reviews')
    op.drop_table('reviews')

    op.drop_index('uq_venues_name_city_state', table_name='venues')
    op.drop_index(op.f('ix_venues_state'), table_name='venues')
    op.drop_index(op.f('ix_venues_city'), table_name='venues')
    op.drop_table('venues')
