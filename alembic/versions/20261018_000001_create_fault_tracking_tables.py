"""Create fault tracking tables

Revision ID: 20261018_000001
Revises: None
Create Date: 2026-10-18

This migration creates users, sites, faults with their comments and
resolutions, guard duty checks and revoked session tokens.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '20261018_000001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

ROLES = ('technician', 'engineer', 'manager', 'customer', 'guard')
FAULT_STATUSES = ('open', 'in-progress', 'pending', 'resolved')
FAULT_PRIORITIES = ('low', 'medium', 'high', 'urgent')
CHECK_STATUSES = ('normal', 'abnormal')


def upgrade() -> None:
    """Create every table."""
    op.create_table(
        'kullanicilar',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('role', sa.Enum(*ROLES, name='kullanici_rolu'), nullable=False),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('photo_url', sa.String(500), nullable=True),
        sa.Column('phone', sa.String(50), nullable=True),
        sa.Column('company', sa.String(255), nullable=True),
        sa.Column('address', sa.String(500), nullable=True),
        sa.Column('site_ids', sa.JSON(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_kullanicilar_email', 'kullanicilar', ['email'], unique=True)
    op.create_index('ix_kullanicilar_role', 'kullanicilar', ['role'])

    op.create_table(
        'sahalar',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_sahalar_name', 'sahalar', ['name'])

    op.create_table(
        'arizalar',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('location', sa.String(500), nullable=False),
        sa.Column('site_id', sa.String(36), nullable=False),
        sa.Column(
            'status',
            sa.Enum(*FAULT_STATUSES, name='ariza_durumu'),
            nullable=False,
            server_default='open'
        ),
        sa.Column(
            'priority',
            sa.Enum(*FAULT_PRIORITIES, name='ariza_onceligi'),
            nullable=False,
            server_default='medium'
        ),
        sa.Column('created_by', sa.String(36), nullable=False),
        sa.Column('assigned_to', sa.String(36), nullable=True),
        sa.Column('photos', sa.JSON(), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(
            ['site_id'],
            ['sahalar.id'],
            name='fk_arizalar_site_id',
            ondelete='NO ACTION'
        ),
    )
    op.create_index('ix_arizalar_site_id', 'arizalar', ['site_id'])
    op.create_index('ix_arizalar_status', 'arizalar', ['status'])
    op.create_index('ix_arizalar_assigned_to', 'arizalar', ['assigned_to'])
    op.create_index('ix_arizalar_created_at', 'arizalar', ['created_at'])

    op.create_table(
        'ariza_yorumlari',
        sa.Column('seq', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('fault_id', sa.String(36), nullable=False),
        sa.Column('author_id', sa.String(36), nullable=False),
        sa.Column('author_name', sa.String(200), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('seq'),
        sa.UniqueConstraint('id', name='uq_ariza_yorumlari_id'),
        sa.ForeignKeyConstraint(
            ['fault_id'],
            ['arizalar.id'],
            name='fk_ariza_yorumlari_fault_id',
            ondelete='CASCADE'
        ),
    )
    op.create_index('ix_ariza_yorumlari_fault_id', 'ariza_yorumlari', ['fault_id'])

    op.create_table(
        'ariza_cozumleri',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('fault_id', sa.String(36), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('materials', sa.JSON(), nullable=False),
        sa.Column('completed_at', sa.DateTime(), nullable=False),
        sa.Column('completed_by', sa.String(36), nullable=False),
        sa.Column('photos', sa.JSON(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(
            ['fault_id'],
            ['arizalar.id'],
            name='fk_ariza_cozumleri_fault_id',
            ondelete='CASCADE'
        ),
    )
    op.create_index('ix_ariza_cozumleri_fault_id', 'ariza_cozumleri', ['fault_id'], unique=True)

    op.create_table(
        'kontroller',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('guard_id', sa.String(36), nullable=False),
        sa.Column('guard_name', sa.String(200), nullable=False),
        sa.Column('site_id', sa.String(36), nullable=False),
        sa.Column('site_name', sa.String(255), nullable=False),
        sa.Column('checked_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('slot', sa.String(5), nullable=False),
        sa.Column(
            'status',
            sa.Enum(*CHECK_STATUSES, name='kontrol_durumu'),
            nullable=False,
            server_default='normal'
        ),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('photos', sa.JSON(), nullable=False),
        sa.Column('latitude', sa.Float(), nullable=False),
        sa.Column('longitude', sa.Float(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(
            ['site_id'],
            ['sahalar.id'],
            name='fk_kontroller_site_id',
            ondelete='NO ACTION'
        ),
    )
    op.create_index('ix_kontroller_guard_id', 'kontroller', ['guard_id'])
    op.create_index('ix_kontroller_site_id', 'kontroller', ['site_id'])
    op.create_index('ix_kontroller_checked_at', 'kontroller', ['checked_at'])

    op.create_table(
        'iptal_edilen_oturumlar',
        sa.Column('jti', sa.String(36), nullable=False),
        sa.Column('user_id', sa.String(36), nullable=False),
        sa.Column('expires_at', sa.DateTime(), nullable=False),
        sa.Column('revoked_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('jti'),
    )
    op.create_index('ix_iptal_edilen_oturumlar_user_id', 'iptal_edilen_oturumlar', ['user_id'])


def downgrade() -> None:
    """Drop every table."""
    op.drop_table('iptal_edilen_oturumlar')
    op.drop_table('kontroller')
    op.drop_table('ariza_cozumleri')
    op.drop_table('ariza_yorumlari')
    op.drop_table('arizalar')
    op.drop_table('sahalar')
    op.drop_table('kullanicilar')
