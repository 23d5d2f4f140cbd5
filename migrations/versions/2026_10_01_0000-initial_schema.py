"""Initial schema

Revision ID: 001_initial
Revises:
Create Date: 2026-10-01 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect

# revision identifiers, used by Alembic.
revision: str = '001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """
    Create initial database schema:
    - redirects table: identifier -> URL mappings with moderation/audit data
    - domains_blacklist table: blacklisted hostnames
    - words_blacklist table: substrings forbidden inside identifiers
    """
    bind = op.get_bind()
    existing_tables = inspect(bind).get_table_names()

    if 'redirects' not in existing_tables:
        op.create_table(
            'redirects',
            sa.Column('id', sa.String(length=5), nullable=False),
            sa.Column('url', sa.Text(), nullable=False),
            sa.Column('enabled', sa.Boolean(), nullable=False, server_default=sa.true()),
            sa.Column('ip', sa.String(length=255), nullable=False),
            sa.Column('creation_timestamp', sa.BigInteger(), nullable=False),
            sa.Column('access_count', sa.Integer(), nullable=False, server_default='0'),
            sa.Column('last_access_timestamp', sa.BigInteger(), nullable=True),
            sa.PrimaryKeyConstraint('id'),
            sa.UniqueConstraint('url'),
        )
        op.create_index('ix_redirects_enabled', 'redirects', ['enabled'])

    if 'domains_blacklist' not in existing_tables:
        op.create_table(
            'domains_blacklist',
            sa.Column('domain', sa.String(length=253), nullable=False),
            sa.Column('blacklisted_timestamp', sa.BigInteger(), nullable=False),
            sa.PrimaryKeyConstraint('domain'),
        )

    if 'words_blacklist' not in existing_tables:
        op.create_table(
            'words_blacklist',
            sa.Column('word', sa.String(length=255), nullable=False),
            sa.Column('blacklisted_timestamp', sa.BigInteger(), nullable=False),
            sa.PrimaryKeyConstraint('word'),
        )


def downgrade() -> None:
    op.drop_table('words_blacklist')
    op.drop_table('domains_blacklist')
    op.drop_index('ix_redirects_enabled', table_name='redirects')
    op.drop_table('redirects')
