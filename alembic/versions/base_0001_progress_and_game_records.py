"""progress and game records

Revision ID: base_0001
Revises:
Create Date: 2026-10-19 10:12:41.118204

"""

from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "base_0001"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "progress",
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column("level", sa.Integer(), nullable=False),
        sa.Column("score", sa.Integer(), nullable=False),
        sa.Column("xp", sa.Integer(), nullable=False),
        sa.Column("problems_completed", sa.Integer(), nullable=False),
        sa.Column("day_streak", sa.Integer(), nullable=False),
        sa.Column("last_played_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("user_id", name="pk_progress"),
    )
    op.create_table(
        "game_records",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column("game_type", sa.String(length=32), nullable=False),
        sa.Column("score", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_game_records_user_id", "game_records", ["user_id"])
    op.create_index("ix_game_records_created_at", "game_records", ["created_at"])


def downgrade() -> None:
    op.drop_index("ix_game_records_created_at", table_name="game_records")
    op.drop_index("ix_game_records_user_id", table_name="game_records")
    op.drop_table("game_records")
    op.drop_table("progress")
