# src/insight_pulse/schemas/__init__.py
"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .insight import (
    LeaderboardEntryResponse,
    LeaderboardResponse,
    PopularFeedResponse,
    PopularInsightResponse,
    ReactionStatsResponse,
)
from .reaction import (
    ActorReaction,
    InsightReactionsResponse,
    ReactionRemove,
    ReactionSubmit,
    ReactionToggleResponse,
    RecentReaction,
)

__all__ = [
    "ActorReaction", "InsightReactionsResponse", "ReactionRemove",
    "ReactionSubmit", "ReactionToggleResponse", "RecentReaction",
    "LeaderboardEntryResponse", "LeaderboardResponse",
    "PopularFeedResponse", "PopularInsightResponse", "ReactionStatsResponse",
]
