"""insight reactions

Revision ID: 5c1e9a7d2b40
Revises:
Create Date: 2026-10-18 09:12:41.220315

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "5c1e9a7d2b40"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

# Frozen at reaction schema version 1.
REACTION_KINDS = ("like", "love", "insightful", "celebrate", "fire")


def upgrade() -> None:
    """Create the insight aggregate and the per-actor reaction table."""
    op.create_table(
        "insight",
        sa.Column("id", sa.String(length=64), nullable=False),
        sa.Column("text", sa.Text(), nullable=False, server_default=""),
        sa.Column("insight_type", sa.String(length=64), nullable=False, server_default="Other"),
        sa.Column("sentiment", sa.String(length=16), nullable=False, server_default="Neutral"),
        sa.Column("priority", sa.String(length=16), nullable=False, server_default="Medium"),
        sa.Column("event_id", sa.String(length=64), nullable=True),
        sa.Column("author_actor_id", sa.String(length=64), nullable=True),
        sa.Column("author_display_name", sa.Text(), nullable=False, server_default="Unknown"),
        sa.Column("captured_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        *(
            sa.Column(f"{kind}_count", sa.Integer(), nullable=False, server_default="0")
            for kind in REACTION_KINDS
        ),
        sa.Column("reaction_total", sa.Integer(), nullable=False, server_default="0"),
        sa.CheckConstraint(
            " AND ".join(f"{kind}_count >= 0" for kind in REACTION_KINDS)
            + " AND reaction_total >= 0",
            name="ck_insight_counts_non_negative",
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_insight_reaction_total_captured", "insight", ["reaction_total", "captured_at"]
    )
    op.create_index("ix_insight_author_captured", "insight", ["author_actor_id", "captured_at"])
    for kind in REACTION_KINDS:
        op.create_index(f"ix_insight_{kind}_count", "insight", [f"{kind}_count", "reaction_total"])

    op.create_table(
        "reaction",
        sa.Column("insight_id", sa.String(length=64), nullable=False),
        sa.Column("actor_id", sa.String(length=64), nullable=False),
        sa.Column("type", sa.String(length=16), nullable=False),
        sa.Column("actor_display_name", sa.Text(), nullable=False, server_default="Unknown"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint(
            "type IN ({})".format(", ".join(f"'{kind}'" for kind in REACTION_KINDS)),
            name="ck_reaction_type",
        ),
        sa.ForeignKeyConstraint(["insight_id"], ["insight.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("insight_id", "actor_id"),
    )
    op.create_index("ix_reaction_insight_created", "reaction", ["insight_id", "created_at"])
    op.create_index("ix_reaction_actor_created", "reaction", ["actor_id", "created_at"])
    op.create_index("ix_reaction_type", "reaction", ["type"])


def downgrade() -> None:
    """Drop both tables; reactions go first because they reference insights."""
    op.drop_index("ix_reaction_type", table_name="reaction")
    op.drop_index("ix_reaction_actor_created", table_name="reaction")
    op.drop_index("ix_reaction_insight_created", table_name="reaction")
    op.drop_table("reaction")

    for kind in REACTION_KINDS:
        op.drop_index(f"ix_insight_{kind}_count", table_name="insight")
    op.drop_index("ix_insight_author_captured", table_name="insight")
    op.drop_index("ix_insight_reaction_total_captured", table_name="insight")
    op.drop_table("insight")
