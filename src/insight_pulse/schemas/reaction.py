# src/insight_pulse/schemas/reaction.py
"""Reaction-related Pydantic schemas."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base schema exposing camelCase JSON keys while accepting snake_case too."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ReactionSubmit(CamelModel):
    """Schema for submitting (toggling) a reaction.

    Fields are validated by the service so that a missing actor or an unknown
    type is reported as 400 rather than a schema error.
    """

    actor_id: Any = Field(None, description="Reacting actor's identifier")
    actor_display_name: Any = Field(None, description="Actor name shown to others")
    type: Any = Field(None, description="One of: like, love, insightful, celebrate, fire")


class ReactionRemove(CamelModel):
    """Schema for explicitly removing a reaction."""

    actor_id: Any = Field(None, description="Reacting actor's identifier")


class ReactionToggleResponse(CamelModel):
    """Committed aggregate state after a toggle."""

    action: str
    user_reaction: str | None
    reaction_counts: dict[str, int]
    reaction_total: int


class RecentReaction(CamelModel):
    actor_id: str
    display_name: str
    type: str
    created_at: datetime


class InsightReactionsResponse(CamelModel):
    """Counters, the caller's own reaction and the latest reactors for an insight."""

    insight_id: str
    reaction_counts: dict[str, int]
    reaction_total: int
    user_reaction: str | None
    recent_reactions: list[RecentReaction]


class ActorReaction(CamelModel):
    insight_id: str
    type: str
    created_at: datetime
    updated_at: datetime
