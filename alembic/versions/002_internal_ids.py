"""Per-project internal id counters.

Nodes running below this revision derive iids from existing rows instead.

Revision ID: 002
Revises: 001
Create Date: 2025-03-12
"""

from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "internal_ids",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "project_id",
            sa.Integer,
            sa.ForeignKey("projects.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("usage", sa.String(50), nullable=False),
        sa.Column("last_value", sa.Integer, nullable=True),
        sa.UniqueConstraint(
            "project_id", "usage", name="uq_internal_ids_project_usage"
        ),
    )


def downgrade() -> None:
    op.drop_table("internal_ids")
