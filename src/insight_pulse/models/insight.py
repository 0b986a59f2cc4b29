# src/insight_pulse/models/insight.py
"""SQLAlchemy model for insights and their embedded reaction aggregate."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, Index, Integer, String, Text
from sqlalchemy.orm import InstrumentedAttribute, Mapped, mapped_column

from insight_pulse.db.session import Base
from insight_pulse.db.time import utcnow
from insight_pulse.models.reaction import REACTION_TYPES, ReactionType

SENTIMENT_POSITIVE = "Positive"
SENTIMENT_NEUTRAL = "Neutral"
SENTIMENT_NEGATIVE = "Negative"

PRIORITY_LOW = "Low"
PRIORITY_MEDIUM = "Medium"
PRIORITY_HIGH = "High"
PRIORITY_CRITICAL = "Critical"

INSIGHT_TYPE_FEATURE_REQUEST = "Feature Request"
INSIGHT_TYPE_BUG_REPORT = "Bug Report"
INSIGHT_TYPE_USE_CASE = "Use Case"


def _new_insight_id() -> str:
    return uuid.uuid4().hex


class Insight(Base):
    """Feedback item captured by an advocate.

    Everything except the reaction counters belongs to the insight CRUD
    collaborator. The counters are written only by the reaction toggle service
    and by reconciliation.
    """

    __tablename__ = "insight"
    __table_args__ = (
        Index("ix_insight_reaction_total_captured", "reaction_total", "captured_at"),
        Index("ix_insight_author_captured", "author_actor_id", "captured_at"),
        *(
            Index(f"ix_insight_{rt.value}_count", f"{rt.value}_count", "reaction_total")
            for rt in REACTION_TYPES
        ),
        CheckConstraint(
            " AND ".join(f"{rt.value}_count >= 0" for rt in REACTION_TYPES)
            + " AND reaction_total >= 0",
            name="ck_insight_counts_non_negative",
        ),
    )

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=_new_insight_id)
    text: Mapped[str] = mapped_column(Text, nullable=False, default="")

    # Classification fields consumed by the leaderboard.
    insight_type: Mapped[str] = mapped_column(String(64), nullable=False, default="Other")
    sentiment: Mapped[str] = mapped_column(String(16), nullable=False, default=SENTIMENT_NEUTRAL)
    priority: Mapped[str] = mapped_column(String(16), nullable=False, default=PRIORITY_MEDIUM)
    event_id: Mapped[str | None] = mapped_column(String(64), nullable=True)

    author_actor_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    author_display_name: Mapped[str] = mapped_column(Text, nullable=False, default="Unknown")

    captured_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
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

    # Reaction aggregate: one counter per kind plus their sum.
    like_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    love_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    insightful_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    celebrate_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    fire_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    reaction_total: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    @classmethod
    def count_column(cls, reaction_type: ReactionType) -> InstrumentedAttribute[int]:
        """Return the mapped counter column for ``reaction_type``."""
        return getattr(cls, f"{reaction_type.value}_count")

    @property
    def reaction_counts(self) -> dict[str, int]:
        """Return every reaction kind's counter, zeros included."""
        return {rt.value: getattr(self, f"{rt.value}_count") or 0 for rt in REACTION_TYPES}
