"""Crear tabla schema_definitions

Revision ID: 001_schema_definitions
Revises:
Create Date: 2026-10-19

Cambios:
- Tabla espejo de metafield definitions por tienda y owner type
- UNIQUE (shop, owner_type, key): target de conflicto del upsert
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = '001_schema_definitions'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    bind = op.get_bind()
    inspector = sa.inspect(bind)

    if not inspector.has_table('schema_definitions'):
        op.create_table('schema_definitions',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('shop', sa.String(length=255), nullable=False),
        sa.Column('owner_type', sa.String(length=64), nullable=False),
        sa.Column('key', sa.String(length=512), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('type', sa.String(length=128), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('last_audited', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('shop', 'owner_type', 'key', name='uq_schema_definitions_shop_owner_key')
        )
        op.create_index(op.f('ix_schema_definitions_shop'), 'schema_definitions', ['shop'], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    bind = op.get_bind()
    inspector = sa.inspect(bind)

    if inspector.has_table('schema_definitions'):
        op.drop_index(op.f('ix_schema_definitions_shop'), table_name='schema_definitions')
        op.drop_table('schema_definitions')
