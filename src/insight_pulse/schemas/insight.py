# src/insight_pulse/schemas/insight.py
"""Schemas for the popularity feed, reaction stats and the leaderboard."""

from datetime import datetime

from pydantic import Field

from .reaction import CamelModel


class PopularInsightResponse(CamelModel):
    """Insight enriched with its reaction summary and the viewer's reaction."""

    id: str
    text: str
    insight_type: str
    sentiment: str
    priority: str
    event_id: str | None
    author_actor_id: str | None
    author_display_name: str
    captured_at: datetime
    reaction_counts: dict[str, int]
    reaction_total: int
    reaction_summary: str = Field(..., description='e.g. "👍 12  ❤️ 5  💡 3"')
    user_reaction: str | None = None


class PopularFeedResponse(CamelModel):
    insights: list[PopularInsightResponse]
    total: int
    limit: int
    offset: int
    period: str
    sort: str


class TopReactor(CamelModel):
    actor_id: str
    name: str
    count: int


class TopReceiver(CamelModel):
    actor_id: str
    name: str
    total_reactions: int
    insight_count: int


class TypeDistribution(CamelModel):
    count: int
    emoji: str


class ReactionTotals(CamelModel):
    reactions: int
    insights_with_reactions: int


class ReactionStatsResponse(CamelModel):
    top_reactors: list[TopReactor]
    top_receivers: list[TopReceiver]
    type_distribution: dict[str, TypeDistribution]
    totals: ReactionTotals


class LeaderboardEntryResponse(CamelModel):
    """One author's contribution breakdown."""

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


class LeaderboardResponse(CamelModel):
    leaderboard: list[LeaderboardEntryResponse]
    period: str
    total_insights: int
    total_actors: int
