"""Initial schema - keyed records table

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-17 00:00:00.000000

Creates the EDU360 event store table:
- records: one row per entity, keyed by (kind, id), with the entity's
  JSON payload
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers
revision: str = '001_initial_schema'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'records',
        sa.Column('kind', sa.String(64), nullable=False),
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('payload', postgresql.JSONB(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('kind', 'id'),
    )
    op.create_index('ix_records_kind_created_at', 'records', ['kind', 'created_at'])


def downgrade() -> None:
    op.drop_index('ix_records_kind_created_at', table_name='records')
    op.drop_table('records')
