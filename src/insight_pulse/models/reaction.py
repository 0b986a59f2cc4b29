# src/insight_pulse/models/reaction.py
"""Models capturing typed reactions on insights."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column

from insight_pulse.db.session import Base
from insight_pulse.db.time import utcnow

# Bump together with a migration whenever a reaction kind is added or removed.
REACTION_SCHEMA_VERSION = 1


class ReactionType(str, Enum):
    """Closed set of reaction kinds, in their canonical display order."""

    LIKE = "like"
    LOVE = "love"
    INSIGHTFUL = "insightful"
    CELEBRATE = "celebrate"
    FIRE = "fire"

    @property
    def emoji(self) -> str:
        """Return the display glyph for this reaction kind."""
        return REACTION_EMOJI[self]

    @property
    def position(self) -> int:
        """Return the stable ordinal used for tie-breaking."""
        return REACTION_TYPES.index(self)


REACTION_TYPES: tuple[ReactionType, ...] = tuple(ReactionType)

REACTION_EMOJI: dict[ReactionType, str] = {
    ReactionType.LIKE: "\N{THUMBS UP SIGN}",
    ReactionType.LOVE: "\N{HEAVY BLACK HEART}\N{VARIATION SELECTOR-16}",
    ReactionType.INSIGHTFUL: "\N{ELECTRIC LIGHT BULB}",
    ReactionType.CELEBRATE: "\N{CLAPPING HANDS SIGN}",
    ReactionType.FIRE: "\N{FIRE}",
}

_TYPE_CHECK = "type IN ({})".format(", ".join(f"'{rt.value}'" for rt in REACTION_TYPES))


class Reaction(Base):
    """Per-actor reaction on an insight.

    This table is the source of truth; the counters on ``insight`` are a
    rebuildable projection of it.
    """

    __tablename__ = "reaction"
    __table_args__ = (
        CheckConstraint(_TYPE_CHECK, name="ck_reaction_type"),
        Index("ix_reaction_insight_created", "insight_id", "created_at"),
        Index("ix_reaction_actor_created", "actor_id", "created_at"),
        Index("ix_reaction_type", "type"),
    )

    # Composite primary key prevents two reactions from the same actor.
    insight_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("insight.id", ondelete="CASCADE"),
        primary_key=True,
    )
    actor_id: Mapped[str] = mapped_column(String(64), primary_key=True)

    type: Mapped[str] = mapped_column(String(16), nullable=False)
    actor_display_name: Mapped[str] = mapped_column(Text, nullable=False, default="Unknown")

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    @property
    def reaction_type(self) -> ReactionType:
        """Return the stored type as the enumeration member."""
        return ReactionType(self.type)
