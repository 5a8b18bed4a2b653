"""initial schema

Revision ID: 001
Revises:
Create Date: 2025-06-12 23:15:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Create distributors table
    op.create_table(
        'distributors',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_distributors_name'), 'distributors', ['name'], unique=True)

    # Create tv_shows table
    op.create_table(
        'tv_shows',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('external_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=500), nullable=False),
        sa.Column('show_type', sa.String(length=100), nullable=True),
        sa.Column('language', sa.String(length=100), nullable=True),
        sa.Column('status', sa.String(length=100), nullable=True),
        sa.Column('runtime', sa.Integer(), nullable=True),
        sa.Column('premiered', sa.Date(), nullable=True),
        sa.Column('summary', sa.Text(), nullable=True),
        sa.Column('official_site', sa.String(length=1000), nullable=True),
        sa.Column('image_url', sa.String(length=1000), nullable=True),
        sa.Column('rating', sa.Numeric(precision=3, scale=1), nullable=True),
        sa.Column('distributor_id', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.CheckConstraint('rating >= 0 AND rating <= 10', name='ck_tv_shows_rating_range'),
        sa.CheckConstraint('runtime > 0', name='ck_tv_shows_runtime_positive'),
        sa.ForeignKeyConstraint(['distributor_id'], ['distributors.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_tv_shows_external_id'), 'tv_shows', ['external_id'], unique=True)
    op.create_index(op.f('ix_tv_shows_name'), 'tv_shows', ['name'], unique=False)
    op.create_index(op.f('ix_tv_shows_language'), 'tv_shows', ['language'], unique=False)
    op.create_index(op.f('ix_tv_shows_status'), 'tv_shows', ['status'], unique=False)
    op.create_index(op.f('ix_tv_shows_premiered'), 'tv_shows', ['premiered'], unique=False)
    op.create_index(op.f('ix_tv_shows_rating'), 'tv_shows', ['rating'], unique=False)
    op.create_index(op.f('ix_tv_shows_distributor_id'), 'tv_shows', ['distributor_id'], unique=False)

    # Partial indexes for rating filters
    op.create_index(
        'ix_tv_shows_status_rating',
        'tv_shows',
        ['status', 'rating'],
        unique=False,
        postgresql_where=sa.text('rating IS NOT NULL'),
    )
    op.create_index(
        'ix_tv_shows_distributor_rating',
        'tv_shows',
        ['distributor_id', 'rating'],
        unique=False,
        postgresql_where=sa.text('rating IS NOT NULL'),
    )

    # Create release_dates table
    op.create_table(
        'release_dates',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('tv_show_id', sa.Integer(), nullable=False),
        sa.Column('country', sa.String(length=10), nullable=False),
        sa.Column('release_date', sa.Date(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.ForeignKeyConstraint(['tv_show_id'], ['tv_shows.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('tv_show_id', 'country', name='uq_release_dates_tv_show_country')
    )
    op.create_index(op.f('ix_release_dates_tv_show_id'), 'release_dates', ['tv_show_id'], unique=False)
    op.create_index(op.f('ix_release_dates_country'), 'release_dates', ['country'], unique=False)
    op.create_index(op.f('ix_release_dates_release_date'), 'release_dates', ['release_date'], unique=False)
    op.create_index(
        'ix_release_dates_country_release_date',
        'release_dates',
        ['country', 'release_date'],
        unique=False,
    )


def downgrade() -> None:
    op.drop_table('release_dates')
    op.drop_table('tv_shows')
    op.drop_table('distributors')
