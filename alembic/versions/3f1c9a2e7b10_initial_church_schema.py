"""initial_church_schema

Revision ID: 3f1c9a2e7b10
Revises:
Create Date: 2026-10-19 09:12:41.503218

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1c9a2e7b10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
    ]


def _church_fk() -> sa.Column:
    return sa.Column(
        'church_id', sa.Integer(), sa.ForeignKey('churches.id', ondelete='CASCADE'), nullable=False
    )


def upgrade() -> None:
    """
    Create the church administration schema.

    Creates:
    - churches (tenants) and profiles (principals)
    - auth_credentials and revoked_tokens (auth provider)
    - role_permissions (per-church permission matrix)
    - rooms, members, financial_transactions, attendance_sessions, visitors
    """
    # 1. Tenants
    op.create_table(
        'churches',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('slug', sa.String(length=100), nullable=False),
        sa.Column('cnpj', sa.String(length=18), nullable=True),
        sa.Column('city', sa.String(length=120), nullable=True),
        sa.Column('state', sa.String(length=2), nullable=True),
        sa.Column('address', sa.String(length=255), nullable=True),
        sa.Column('phone', sa.String(length=20), nullable=True),
        sa.Column('pastor', sa.String(length=255), nullable=True),
        sa.Column('admin_name', sa.String(length=255), nullable=True),
        sa.Column('admin_email', sa.String(length=255), nullable=True),
        sa.Column('logo', sa.String(length=500), nullable=True),
        sa.Column('plan', sa.String(length=10), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_churches_slug', 'churches', ['slug'], unique=True)

    # 2. Auth provider
    op.create_table(
        'auth_credentials',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('auth_user_id', sa.String(length=64), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_auth_credentials_auth_user_id', 'auth_credentials', ['auth_user_id'], unique=True)
    op.create_index('ix_auth_credentials_email', 'auth_credentials', ['email'], unique=True)

    op.create_table(
        'revoked_tokens',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('jti', sa.String(length=64), nullable=False),
        sa.Column('auth_user_id', sa.String(length=64), nullable=False),
        sa.Column('expires_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_revoked_tokens_jti', 'revoked_tokens', ['jti'], unique=True)

    # 3. Principals (church_id NULL only for super_admin)
    op.create_table(
        'profiles',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('auth_user_id', sa.String(length=64), nullable=False),
        sa.Column(
            'church_id', sa.Integer(), sa.ForeignKey('churches.id', ondelete='CASCADE'), nullable=True
        ),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('role', sa.String(length=11), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('avatar', sa.String(length=500), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_profiles_auth_user_id', 'profiles', ['auth_user_id'], unique=True)
    op.create_index('ix_profiles_church_id', 'profiles', ['church_id'])

    # 4. Permission matrix rows
    op.create_table(
        'role_permissions',
        sa.Column('id', sa.Integer(), nullable=False),
        _church_fk(),
        sa.Column('role', sa.String(length=11), nullable=False),
        sa.Column('label', sa.String(length=100), nullable=False),
        sa.Column('modules', sa.JSON(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('church_id', 'role', name='uq_role_permission_church_role'),
    )
    op.create_index('ix_role_permissions_church_id', 'role_permissions', ['church_id'])

    # 5. Tenant-scoped records
    op.create_table(
        'rooms',
        sa.Column('id', sa.Integer(), nullable=False),
        _church_fk(),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('age_group', sa.String(length=50), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_rooms_church_id', 'rooms', ['church_id'])

    op.create_table(
        'members',
        sa.Column('id', sa.Integer(), nullable=False),
        _church_fk(),
        sa.Column('room_id', sa.Integer(), sa.ForeignKey('rooms.id', ondelete='SET NULL'), nullable=True),
        sa.Column('full_name', sa.String(length=255), nullable=False),
        sa.Column('photo', sa.String(length=500), nullable=True),
        sa.Column('cpf', sa.String(length=14), nullable=True),
        sa.Column('birth_date', sa.Date(), nullable=True),
        sa.Column('phone', sa.String(length=20), nullable=True),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('address', sa.String(length=255), nullable=True),
        sa.Column('baptism_date', sa.Date(), nullable=True),
        sa.Column('join_date', sa.Date(), nullable=True),
        sa.Column('age_group', sa.String(length=50), nullable=False),
        sa.Column('status', sa.String(length=11), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_members_church_id', 'members', ['church_id'])
    op.create_index('ix_members_room_id', 'members', ['room_id'])
    op.create_index('ix_members_church_status', 'members', ['church_id', 'status'])

    op.create_table(
        'financial_transactions',
        sa.Column('id', sa.Integer(), nullable=False),
        _church_fk(),
        sa.Column('member_id', sa.Integer(), sa.ForeignKey('members.id', ondelete='SET NULL'), nullable=True),
        sa.Column('member_name', sa.String(length=255), nullable=True),
        sa.Column('type', sa.String(length=7), nullable=False),
        sa.Column('category', sa.String(length=100), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('amount', sa.Numeric(precision=15, scale=2), nullable=False),
        sa.Column('transaction_date', sa.Date(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_financial_transactions_church_id', 'financial_transactions', ['church_id'])
    op.create_index('ix_financial_transactions_category', 'financial_transactions', ['category'])
    op.create_index('ix_financial_transactions_transaction_date', 'financial_transactions', ['transaction_date'])
    op.create_index('ix_financial_transactions_church_date', 'financial_transactions', ['church_id', 'transaction_date'])
    op.create_index('ix_financial_transactions_church_type', 'financial_transactions', ['church_id', 'type'])

    op.create_table(
        'attendance_sessions',
        sa.Column('id', sa.Integer(), nullable=False),
        _church_fk(),
        sa.Column('room_id', sa.Integer(), sa.ForeignKey('rooms.id', ondelete='SET NULL'), nullable=True),
        sa.Column('room_name', sa.String(length=255), nullable=True),
        sa.Column('session_date', sa.Date(), nullable=False),
        sa.Column('present_member_ids', sa.JSON(), nullable=False),
        sa.Column('absent_member_ids', sa.JSON(), nullable=False),
        sa.Column('total_present', sa.Integer(), nullable=False),
        sa.Column('total_absent', sa.Integer(), nullable=False),
        sa.Column('finalized', sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_attendance_sessions_church_id', 'attendance_sessions', ['church_id'])
    op.create_index('ix_attendance_sessions_church_date', 'attendance_sessions', ['church_id', 'session_date'])

    op.create_table(
        'visitors',
        sa.Column('id', sa.Integer(), nullable=False),
        _church_fk(),
        sa.Column('room_id', sa.Integer(), sa.ForeignKey('rooms.id', ondelete='SET NULL'), nullable=True),
        sa.Column('room_name', sa.String(length=255), nullable=True),
        sa.Column('session_date', sa.Date(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('address', sa.String(length=255), nullable=True),
        sa.Column('phone', sa.String(length=20), nullable=True),
        sa.Column('registered_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_visitors_church_id', 'visitors', ['church_id'])
    op.create_index('ix_visitors_session_date', 'visitors', ['session_date'])


def downgrade() -> None:
    """
    Drop the whole schema.

    WARNING: This deletes every church and all of its data.
    """
    op.drop_table('visitors')
    op.drop_table('attendance_sessions')
    op.drop_table('financial_transactions')
    op.drop_table('members')
    op.drop_table('rooms')
    op.drop_table('role_permissions')
    op.drop_table('profiles')
    op.drop_table('revoked_tokens')
    op.drop_table('auth_credentials')
    op.drop_table('churches')
