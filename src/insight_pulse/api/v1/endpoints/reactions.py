# src/insight_pulse/api/v1/endpoints/reactions.py
"""Reaction toggle endpoints for the Insight Pulse API."""

from fastapi import APIRouter, Query

from insight_pulse.schemas.reaction import (
    ActorReaction,
    InsightReactionsResponse,
    ReactionRemove,
    ReactionSubmit,
    ReactionToggleResponse,
    RecentReaction,
)
from insight_pulse.services.reaction_service import ToggleResult

from ..dependencies import ReactionServiceDep

router = APIRouter(tags=["reactions"])


def _to_toggle_response(result: ToggleResult) -> ReactionToggleResponse:
    return ReactionToggleResponse(
        action=result.action.value,
        user_reaction=result.resulting_type.value if result.resulting_type else None,
        reaction_counts=result.counts,
        reaction_total=result.total,
    )


@router.post("/insights/{insight_id}/react", response_model=ReactionToggleResponse)
def submit_reaction(
    insight_id: str,
    payload: ReactionSubmit,
    service: ReactionServiceDep,
) -> ReactionToggleResponse:
    """Add, change or remove the caller's reaction on an insight.

    Submitting the type the actor already holds removes it; submitting a
    different type changes it. The response is the committed aggregate, so
    clients should render it instead of predicting the outcome.
    """
    result = service.submit_reaction(
        insight_id,
        payload.actor_id,
        payload.actor_display_name,
        payload.type,
    )
    return _to_toggle_response(result)


@router.delete("/insights/{insight_id}/react", response_model=ReactionToggleResponse)
def remove_reaction(
    insight_id: str,
    payload: ReactionRemove,
    service: ReactionServiceDep,
) -> ReactionToggleResponse:
    """Remove the caller's reaction; 404 if there is none."""
    result = service.remove_reaction(insight_id, payload.actor_id)
    return _to_toggle_response(result)


@router.get("/insights/{insight_id}/react", response_model=InsightReactionsResponse)
def get_reactions(
    insight_id: str,
    service: ReactionServiceDep,
    actor_id: str | None = Query(None, alias="actorId", description="Include this actor's reaction"),
) -> InsightReactionsResponse:
    """Return counters, the caller's reaction and up to 10 most recent reactors."""
    view = service.get_reactions(insight_id, actor_id)
    return InsightReactionsResponse(
        insight_id=view.insight_id,
        reaction_counts=view.counts,
        reaction_total=view.total,
        user_reaction=view.viewer_type.value if view.viewer_type else None,
        recent_reactions=[
            RecentReaction(
                actor_id=r.actor_id,
                display_name=r.actor_display_name,
                type=r.type,
                created_at=r.created_at,
            )
            for r in view.recent
        ],
    )


@router.get("/actors/{actor_id}/reactions", response_model=list[ActorReaction])
def get_actor_reactions(
    actor_id: str,
    service: ReactionServiceDep,
    limit: int = Query(20, ge=1, le=100),
) -> list[ActorReaction]:
    """Return an actor's reaction history, newest first."""
    return [
        ActorReaction(
            insight_id=r.insight_id,
            type=r.type,
            created_at=r.created_at,
            updated_at=r.updated_at,
        )
        for r in service.actor_history(actor_id, limit)
    ]
