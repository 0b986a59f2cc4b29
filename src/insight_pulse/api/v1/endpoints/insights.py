# src/insight_pulse/api/v1/endpoints/insights.py
"""Popularity feed, reaction stats and leaderboard endpoints."""

from fastapi import APIRouter, Query

from insight_pulse.core.settings import settings
from insight_pulse.models.reaction import ReactionType
from insight_pulse.schemas.insight import (
    LeaderboardEntryResponse,
    LeaderboardResponse,
    PopularFeedResponse,
    PopularInsightResponse,
    ReactionStatsResponse,
    ReactionTotals,
    TopReactor,
    TopReceiver,
    TypeDistribution,
)
from insight_pulse.services.leaderboard import compute_leaderboard
from insight_pulse.services.popularity import list_popular, reaction_stats

from ..dependencies import SessionDep

router = APIRouter(prefix="/insights", tags=["insights"])


@router.get("/popular", response_model=PopularFeedResponse)
def get_popular_insights(
    db: SessionDep,
    period: str = Query("week", description="day, week, month or all"),
    limit: int = Query(settings.popular_default_limit, ge=1),
    offset: int = Query(0, ge=0),
    sort: str = Query("total", description="total, trending or a reaction type"),
    actor_id: str | None = Query(None, alias="actorId", description="Annotate with this actor's reactions"),
) -> PopularFeedResponse:
    """Return insights with at least one reaction, most reacted first.

    ``trending`` currently ranks exactly like ``total``.
    """
    page = list_popular(
        db,
        period=period,
        sort=sort,
        limit=min(limit, settings.popular_max_limit),
        offset=offset,
        viewer_id=actor_id,
    )
    return PopularFeedResponse(
        insights=[
            PopularInsightResponse(
                id=item.insight.id,
                text=item.insight.text,
                insight_type=item.insight.insight_type,
                sentiment=item.insight.sentiment,
                priority=item.insight.priority,
                event_id=item.insight.event_id,
                author_actor_id=item.insight.author_actor_id,
                author_display_name=item.insight.author_display_name,
                captured_at=item.insight.captured_at,
                reaction_counts=item.counts,
                reaction_total=item.insight.reaction_total,
                reaction_summary=item.summary,
                user_reaction=item.viewer_type,
            )
            for item in page.items
        ],
        total=page.total,
        limit=page.limit,
        offset=page.offset,
        period=page.period,
        sort=page.sort,
    )


@router.get("/popular/stats", response_model=ReactionStatsResponse)
def get_reaction_stats(
    db: SessionDep,
    limit: int = Query(10, ge=1, le=100),
) -> ReactionStatsResponse:
    """Return top reactors, top receivers and the reaction type distribution."""
    stats = reaction_stats(db, limit=limit)
    return ReactionStatsResponse(
        top_reactors=[
            TopReactor(actor_id=actor_id, name=name, count=count)
            for actor_id, name, count in stats.top_reactors
        ],
        top_receivers=[
            TopReceiver(
                actor_id=actor_id,
                name=name,
                total_reactions=total,
                insight_count=insight_count,
            )
            for actor_id, name, total, insight_count in stats.top_receivers
        ],
        type_distribution={
            reaction_type: TypeDistribution(count=count, emoji=ReactionType(reaction_type).emoji)
            for reaction_type, count in stats.type_distribution
        },
        totals=ReactionTotals(
            reactions=stats.total_reactions,
            insights_with_reactions=stats.insights_with_reactions,
        ),
    )


@router.get("/leaderboard", response_model=LeaderboardResponse)
def get_leaderboard(
    db: SessionDep,
    limit: int = Query(settings.leaderboard_default_limit, ge=1, le=100),
    period: str = Query("all", description="day, week, month, year or all"),
) -> LeaderboardResponse:
    """Rank contributors by number of insights captured.

    ``impactScore`` is informational and does not affect the order.
    """
    board = compute_leaderboard(db, period=period, limit=limit)
    return LeaderboardResponse(
        leaderboard=[
            LeaderboardEntryResponse(
                actor_id=entry.actor_id,
                display_name=entry.display_name,
                total_insights=entry.total_insights,
                positive_count=entry.positive_count,
                negative_count=entry.negative_count,
                neutral_count=entry.neutral_count,
                critical_count=entry.critical_count,
                high_count=entry.high_count,
                feature_request_count=entry.feature_request_count,
                bug_report_count=entry.bug_report_count,
                use_case_count=entry.use_case_count,
                distinct_event_count=entry.distinct_event_count,
                impact_score=entry.impact_score,
                last_activity_at=entry.last_activity_at,
            )
            for entry in board.entries
        ],
        period=board.period,
        total_insights=board.total_insights,
        total_actors=board.total_actors,
    )
