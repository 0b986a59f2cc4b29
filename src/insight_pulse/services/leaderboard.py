"""Contributor leaderboard built from insight authorship and classification.

This never reads the reaction table: ranking is by how many insights an actor
captured, and the impact score is an informational weighting of what kind of
insights they were.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Final

from sqlalchemy import case, func, select
from sqlalchemy.orm import Session

from insight_pulse.models.insight import (
    INSIGHT_TYPE_BUG_REPORT,
    INSIGHT_TYPE_FEATURE_REQUEST,
    INSIGHT_TYPE_USE_CASE,
    PRIORITY_CRITICAL,
    PRIORITY_HIGH,
    SENTIMENT_NEGATIVE,
    SENTIMENT_NEUTRAL,
    SENTIMENT_POSITIVE,
    Insight,
)
from insight_pulse.services.periods import period_start

LEADERBOARD_PERIODS = ("day", "week", "month", "year", "all")

IMPACT_WEIGHTS: Final[dict[str, Decimal]] = {
    "total_insights": Decimal("1"),
    "critical_count": Decimal("3"),
    "high_count": Decimal("2"),
    "feature_request_count": Decimal("1.5"),
    "bug_report_count": Decimal("1.5"),
    "use_case_count": Decimal("2"),
}


@dataclass(frozen=True)
class LeaderboardEntry:
    actor_id: str
    display_name: str
    total_insights: int
    positive_count: int
    negative_count: int
    neutral_count: int
    critical_count: int
    high_count: int
    feature_request_count: int
    bug_report_count: int
    use_case_count: int
    distinct_event_count: int
    impact_score: int
    last_activity_at: datetime | None


@dataclass(frozen=True)
class Leaderboard:
    entries: list[LeaderboardEntry]
    period: str
    total_insights: int
    total_actors: int


def impact_score(
    *,
    total_insights: int,
    critical_count: int = 0,
    high_count: int = 0,
    feature_request_count: int = 0,
    bug_report_count: int = 0,
    use_case_count: int = 0,
) -> int:
    """Return the weighted impact score rounded half-up to an integer.

    ``total + 3*critical + 2*high + 1.5*feature + 1.5*bug + 2*use_case``;
    Decimal arithmetic keeps ``.5`` results exact so 25.5 rounds to 26 and
    2.5 rounds to 3.
    """
    raw = (
        IMPACT_WEIGHTS["total_insights"] * total_insights
        + IMPACT_WEIGHTS["critical_count"] * critical_count
        + IMPACT_WEIGHTS["high_count"] * high_count
        + IMPACT_WEIGHTS["feature_request_count"] * feature_request_count
        + IMPACT_WEIGHTS["bug_report_count"] * bug_report_count
        + IMPACT_WEIGHTS["use_case_count"] * use_case_count
    )
    return int(raw.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def _count_where(condition):
    return func.sum(case((condition, 1), else_=0))


def compute_leaderboard(
    db: Session,
    *,
    period: str = "all",
    limit: int = 10,
    now: datetime | None = None,
) -> Leaderboard:
    """Rank authors by insight volume within ``period``.

    Ties on ``total_insights`` break by actor id ascending.

    Raises:
        InvalidArgumentError: On an unknown period.
    """
    since = period_start(period, allowed=LEADERBOARD_PERIODS, now=now)
    window = [] if since is None else [Insight.captured_at >= since]
    authored = [Insight.author_actor_id.is_not(None), *window]

    total_insights = func.count().label("total_insights")
    stmt = (
        select(
            Insight.author_actor_id,
            func.max(Insight.author_display_name),
            total_insights,
            _count_where(Insight.sentiment == SENTIMENT_POSITIVE),
            _count_where(Insight.sentiment == SENTIMENT_NEGATIVE),
            _count_where(Insight.sentiment == SENTIMENT_NEUTRAL),
            _count_where(Insight.priority == PRIORITY_CRITICAL),
            _count_where(Insight.priority == PRIORITY_HIGH),
            _count_where(Insight.insight_type == INSIGHT_TYPE_FEATURE_REQUEST),
            _count_where(Insight.insight_type == INSIGHT_TYPE_BUG_REPORT),
            _count_where(Insight.insight_type == INSIGHT_TYPE_USE_CASE),
            # COUNT(DISTINCT ...) skips NULL event ids.
            func.count(func.distinct(Insight.event_id)),
            func.max(Insight.captured_at),
        )
        .where(*authored)
        .group_by(Insight.author_actor_id)
        .order_by(total_insights.desc(), Insight.author_actor_id)
        .limit(limit)
    )

    entries = []
    for row in db.execute(stmt):
        (
            actor_id,
            display_name,
            total,
            positive,
            negative,
            neutral,
            critical,
            high,
            feature_requests,
            bug_reports,
            use_cases,
            event_count,
            last_captured,
        ) = row
        entries.append(
            LeaderboardEntry(
                actor_id=actor_id,
                display_name=display_name,
                total_insights=int(total),
                positive_count=int(positive or 0),
                negative_count=int(negative or 0),
                neutral_count=int(neutral or 0),
                critical_count=int(critical or 0),
                high_count=int(high or 0),
                feature_request_count=int(feature_requests or 0),
                bug_report_count=int(bug_reports or 0),
                use_case_count=int(use_cases or 0),
                distinct_event_count=int(event_count),
                impact_score=impact_score(
                    total_insights=int(total),
                    critical_count=int(critical or 0),
                    high_count=int(high or 0),
                    feature_request_count=int(feature_requests or 0),
                    bug_report_count=int(bug_reports or 0),
                    use_case_count=int(use_cases or 0),
                ),
                last_activity_at=last_captured,
            )
        )

    period_total = db.execute(
        select(func.count()).select_from(Insight).where(*window)
    ).scalar_one()
    actor_total = db.execute(
        select(func.count(func.distinct(Insight.author_actor_id))).where(*authored)
    ).scalar_one()

    return Leaderboard(
        entries=entries,
        period=period,
        total_insights=int(period_total),
        total_actors=int(actor_total),
    )
