"""Initial schema.

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-17
"""

from __future__ import annotations

from alembic import op

from gameshelf.adapters.sqlalchemy.mappings import mapper_registry

revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    mapper_registry.metadata.create_all(bind=op.get_bind())


def downgrade() -> None:
    mapper_registry.metadata.drop_all(bind=op.get_bind())
