"""create_account_tables

Revision ID: 5b1e2f7c9a04
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = '5b1e2f7c9a04'
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

LIVE_ROWS = sa.text('deleted_at IS NULL')
LIVE_ROWS_WITH_NATIONAL_ID = sa.text('deleted_at IS NULL AND national_id IS NOT NULL')


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table('accounts',
        sa.Column('id', sa.String(length=36), nullable=False, comment='Account ID (UUID)'),
        sa.Column('username', sa.String(length=50), nullable=False, comment='Login name'),
        sa.Column('email', sa.String(length=255), nullable=False, comment='Email address'),
        sa.Column('national_id', sa.String(length=20), nullable=True, comment='National ID number'),
        sa.Column('password_hash', sa.String(length=255), nullable=False, comment='Argon2 password hash'),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('phone', sa.String(length=20), nullable=False),
        sa.Column('email_verified', sa.Boolean(), nullable=False, comment='Whether the email address has been confirmed'),
        sa.Column('avatar_url', sa.String(length=500), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True, comment='Soft-delete marker'),
        sa.PrimaryKeyConstraint('id')
    )
    with op.batch_alter_table('accounts', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_accounts_deleted_at'), ['deleted_at'], unique=False)
        batch_op.create_index('uq_accounts_username', ['username'], unique=True,
                              sqlite_where=LIVE_ROWS, postgresql_where=LIVE_ROWS)
        batch_op.create_index('uq_accounts_email', ['email'], unique=True,
                              sqlite_where=LIVE_ROWS, postgresql_where=LIVE_ROWS)
        batch_op.create_index('uq_accounts_national_id', ['national_id'], unique=True,
                              sqlite_where=LIVE_ROWS_WITH_NATIONAL_ID,
                              postgresql_where=LIVE_ROWS_WITH_NATIONAL_ID)

    op.create_table('verification_tokens',
        sa.Column('id', sa.String(length=36), nullable=False, comment='Token ID (UUID)'),
        sa.Column('account_id', sa.String(length=36), nullable=False, comment='Account the token was issued to'),
        sa.Column('token_hash', sa.String(length=64), nullable=False, comment='SHA-256 hash of the verification token'),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['account_id'], ['accounts.id']),
        sa.PrimaryKeyConstraint('id')
    )
    with op.batch_alter_table('verification_tokens', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_verification_tokens_account_id'), ['account_id'], unique=False)
        batch_op.create_index(batch_op.f('ix_verification_tokens_expires_at'), ['expires_at'], unique=False)
        batch_op.create_index(batch_op.f('ix_verification_tokens_token_hash'), ['token_hash'], unique=True)

    op.create_table('password_reset_tokens',
        sa.Column('id', sa.String(length=36), nullable=False, comment='Token ID (UUID)'),
        sa.Column('account_id', sa.String(length=36), nullable=False, comment='Account the token was issued to'),
        sa.Column('token_hash', sa.String(length=64), nullable=False, comment='SHA-256 hash of the reset token'),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['account_id'], ['accounts.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('account_id')
    )
    with op.batch_alter_table('password_reset_tokens', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_password_reset_tokens_expires_at'), ['expires_at'], unique=False)
        batch_op.create_index(batch_op.f('ix_password_reset_tokens_token_hash'), ['token_hash'], unique=True)

    op.create_table('blacklisted_tokens',
        sa.Column('id', sa.String(length=36), nullable=False, comment='Row ID (UUID)'),
        sa.Column('token_id', sa.String(length=64), nullable=False, comment='jti claim of the revoked session token'),
        sa.Column('account_id', sa.String(length=36), nullable=False, comment='Subject of the revoked token'),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=False, comment='Expiry of the revoked token'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    with op.batch_alter_table('blacklisted_tokens', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_blacklisted_tokens_account_id'), ['account_id'], unique=False)
        batch_op.create_index(batch_op.f('ix_blacklisted_tokens_expires_at'), ['expires_at'], unique=False)
        batch_op.create_index(batch_op.f('ix_blacklisted_tokens_token_id'), ['token_id'], unique=True)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table('blacklisted_tokens')
    op.drop_table('password_reset_tokens')
    op.drop_table('verification_tokens')
    with op.batch_alter_table('accounts', schema=None) as batch_op:
        batch_op.drop_index('uq_accounts_national_id')
        batch_op.drop_index('uq_accounts_email')
        batch_op.drop_index('uq_accounts_username')
        batch_op.drop_index(batch_op.f('ix_accounts_deleted_at'))
    op.drop_table('accounts')
