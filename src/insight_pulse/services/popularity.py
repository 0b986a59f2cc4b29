"""Popularity feed and reaction statistics over the insight aggregate.

Read-only. Rankings come straight from the denormalized counters, so a page
costs one indexed query plus at most one batched lookup of the viewer's own
reactions.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from insight_pulse.core.errors import InvalidArgumentError
from insight_pulse.models.insight import Insight
from insight_pulse.models.reaction import REACTION_TYPES, ReactionType
from insight_pulse.repositories.reaction_repo import ReactionRepository
from insight_pulse.services.periods import period_start

POPULAR_PERIODS = ("day", "week", "month", "all")

SORT_TOTAL = "total"
# Ranked exactly like SORT_TOTAL; there is no time-decay weighting.
SORT_TRENDING = "trending"


@dataclass(frozen=True)
class SortStrategy:
    """Ordering for the feed: by total, or by one reaction kind's count."""

    name: str
    reaction_type: ReactionType | None = None

    @classmethod
    def parse(cls, value: str) -> SortStrategy:
        if value in (SORT_TOTAL, SORT_TRENDING):
            return cls(value)
        try:
            return cls(value, ReactionType(value))
        except ValueError as err:
            allowed = [SORT_TOTAL, SORT_TRENDING, *(rt.value for rt in REACTION_TYPES)]
            raise InvalidArgumentError(
                f"Invalid sort. Must be one of: {', '.join(allowed)}"
            ) from err

    def order_by(self) -> list:
        if self.reaction_type is None:
            return [Insight.reaction_total.desc(), Insight.captured_at.desc(), Insight.id]
        return [
            Insight.count_column(self.reaction_type).desc(),
            Insight.reaction_total.desc(),
            Insight.id,
        ]


@dataclass(frozen=True)
class PopularInsight:
    insight: Insight
    counts: dict[str, int]
    summary: str
    viewer_type: str | None


@dataclass(frozen=True)
class PopularPage:
    items: list[PopularInsight]
    total: int
    limit: int
    offset: int
    period: str
    sort: str


@dataclass(frozen=True)
class ReactionStats:
    top_reactors: list[tuple[str, str, int]]
    top_receivers: list[tuple[str, str, int, int]]
    type_distribution: list[tuple[str, int]]
    total_reactions: int
    insights_with_reactions: int


def reaction_summary(counts: Mapping[str, int]) -> str:
    """Render non-zero counts as ``"<glyph> <count>"`` pairs, busiest kind first.

    Ties fall back to the canonical enumeration order, never to map order.
    """
    present = [rt for rt in REACTION_TYPES if counts.get(rt.value, 0) > 0]
    present.sort(key=lambda rt: (-counts[rt.value], rt.position))
    return "  ".join(f"{rt.emoji} {counts[rt.value]}" for rt in present)


def list_popular(
    db: Session,
    *,
    period: str = "week",
    sort: str = SORT_TOTAL,
    limit: int = 20,
    offset: int = 0,
    viewer_id: str | None = None,
    now: datetime | None = None,
) -> PopularPage:
    """Return one page of insights that have at least one reaction.

    Raises:
        InvalidArgumentError: On an unknown period or sort.
    """
    strategy = SortStrategy.parse(sort)
    since = period_start(period, allowed=POPULAR_PERIODS, now=now)

    conditions = [Insight.reaction_total > 0]
    if since is not None:
        conditions.append(Insight.captured_at >= since)

    insights = list(
        db.execute(
            select(Insight)
            .where(*conditions)
            .order_by(*strategy.order_by())
            .offset(offset)
            .limit(limit)
        ).scalars()
    )
    total = int(
        db.execute(select(func.count()).select_from(Insight).where(*conditions)).scalar_one()
    )

    viewer_types: dict[str, str] = {}
    if viewer_id and insights:
        viewer_types = ReactionRepository(db).types_for_actor(
            (insight.id for insight in insights), viewer_id
        )

    items = []
    for insight in insights:
        counts = insight.reaction_counts
        items.append(
            PopularInsight(
                insight=insight,
                counts=counts,
                summary=reaction_summary(counts),
                viewer_type=viewer_types.get(insight.id),
            )
        )

    return PopularPage(
        items=items,
        total=total,
        limit=limit,
        offset=offset,
        period=period,
        sort=strategy.name,
    )


def reaction_stats(db: Session, *, limit: int = 10) -> ReactionStats:
    """Return who reacts most, whose insights draw most reactions, and the type mix."""
    reactions = ReactionRepository(db)

    received = func.sum(Insight.reaction_total).label("received")
    receivers = db.execute(
        select(
            Insight.author_actor_id,
            func.max(Insight.author_display_name),
            received,
            func.count(),
        )
        .where(Insight.reaction_total > 0, Insight.author_actor_id.is_not(None))
        .group_by(Insight.author_actor_id)
        .order_by(received.desc(), Insight.author_actor_id)
        .limit(limit)
    )
    insights_with_reactions = db.execute(
        select(func.count()).select_from(Insight).where(Insight.reaction_total > 0)
    ).scalar_one()

    return ReactionStats(
        top_reactors=reactions.top_reactors(limit),
        top_receivers=[
            (actor_id, name, int(total), int(count))
            for actor_id, name, total, count in receivers
        ],
        type_distribution=reactions.type_distribution(),
        total_reactions=reactions.count_all(),
        insights_with_reactions=int(insights_with_reactions),
    )
