"""Reaction toggle service: the only writer of reactions and insight counters.

The reaction row and the insight counter delta are written in the same
database transaction, so they commit or roll back together. Counter deltas
are applied with in-database arithmetic; reaction writes are guarded by the
state the plan was computed from and re-planned if another request got there
first.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy.exc import DBAPIError
from sqlalchemy.orm import Session

from insight_pulse.core.errors import (
    ConflictError,
    InvalidArgumentError,
    NotFoundError,
    UnavailableError,
)
from insight_pulse.core.settings import settings
from insight_pulse.db.time import utcnow
from insight_pulse.models.reaction import Reaction, ReactionType
from insight_pulse.repositories.insight_repo import InsightRepository
from insight_pulse.repositories.reaction_repo import ReactionRepository
from insight_pulse.services.toggle import (
    ReactionState,
    ToggleAction,
    Transition,
    parse_reaction_type,
    removal,
    transition,
)

logger = logging.getLogger(__name__)

DEFAULT_DISPLAY_NAME = "Unknown"

Planner = Callable[[ReactionState], Transition]


@dataclass(frozen=True)
class ToggleResult:
    """Committed outcome of a toggle."""

    action: ToggleAction
    resulting_type: ReactionType | None
    counts: dict[str, int]
    total: int


@dataclass(frozen=True)
class InsightReactions:
    """Read-side view of one insight's reactions."""

    insight_id: str
    counts: dict[str, int]
    total: int
    viewer_type: ReactionType | None
    recent: list[Reaction]


class _StaleState(Exception):
    """A guarded write found the reaction in a different state than planned."""


def _require_actor(actor_id: object) -> str:
    if not isinstance(actor_id, str) or not actor_id:
        raise InvalidArgumentError("actorId required")
    return actor_id


class ReactionService:
    """Apply reaction toggles and keep the insight aggregate in lockstep."""

    def __init__(self, session: Session, *, max_attempts: int | None = None) -> None:
        self.session = session
        self.reactions = ReactionRepository(session)
        self.insights = InsightRepository(session)
        self.max_attempts = max(1, max_attempts or settings.reaction_toggle_max_attempts)

    def submit_reaction(
        self,
        insight_id: str,
        actor_id: object,
        actor_display_name: object,
        reaction_type: object,
    ) -> ToggleResult:
        """Add, change or remove the actor's reaction on an insight.

        Raises:
            InvalidArgumentError: If ``actor_id`` is missing or the type is unknown.
            NotFoundError: If the insight does not exist.
            UnavailableError: If the store fails; nothing has been committed.
        """
        actor_id = _require_actor(actor_id)
        requested = parse_reaction_type(reaction_type)
        display_name = (
            actor_display_name
            if isinstance(actor_display_name, str) and actor_display_name
            else DEFAULT_DISPLAY_NAME
        )

        def plan(current: ReactionState) -> Transition:
            return transition(current, requested)

        return self._run(insight_id, actor_id, display_name, plan)

    def remove_reaction(self, insight_id: str, actor_id: object) -> ToggleResult:
        """Remove the actor's reaction explicitly.

        Raises:
            InvalidArgumentError: If ``actor_id`` is missing.
            NotFoundError: If the insight or the reaction does not exist.
        """
        actor_id = _require_actor(actor_id)
        return self._run(insight_id, actor_id, DEFAULT_DISPLAY_NAME, removal)

    def get_reactions(
        self,
        insight_id: str,
        actor_id: str | None = None,
        limit: int | None = None,
    ) -> InsightReactions:
        """Return counters, the viewer's reaction and the most recent reactors.

        This is the idempotent read callers should use to learn the real state
        after a toggle timed out.
        """
        limit = limit or settings.recent_reactors_limit
        try:
            aggregate = self.insights.read_aggregate(insight_id)
            if aggregate is None:
                raise NotFoundError("Insight not found")
            viewer_type = (
                self.reactions.current_type(insight_id, actor_id) if actor_id else None
            )
            recent = self.reactions.recent_for_insight(insight_id, limit)
        except DBAPIError as err:
            raise UnavailableError("Reaction store unavailable") from err

        counts, total = aggregate
        return InsightReactions(
            insight_id=insight_id,
            counts=counts,
            total=total,
            viewer_type=viewer_type,
            recent=recent,
        )

    def actor_history(self, actor_id: str, limit: int) -> list[Reaction]:
        """Return the actor's reactions, newest first."""
        try:
            return self.reactions.for_actor(actor_id, limit)
        except DBAPIError as err:
            raise UnavailableError("Reaction store unavailable") from err

    def _run(
        self, insight_id: str, actor_id: str, display_name: str, plan: Planner
    ) -> ToggleResult:
        try:
            result = self._toggle(insight_id, actor_id, display_name, plan)
            self.session.commit()
        except DBAPIError as err:
            self.session.rollback()
            logger.warning(
                "Reaction toggle on insight %s by %s failed in the store: %s",
                insight_id,
                actor_id,
                err,
            )
            raise UnavailableError(
                "Reaction store unavailable; re-read the current reaction before retrying"
            ) from err
        except Exception:
            self.session.rollback()
            raise
        return result

    def _toggle(
        self, insight_id: str, actor_id: str, display_name: str, plan: Planner
    ) -> ToggleResult:
        if not self.insights.exists(insight_id):
            raise NotFoundError("Insight not found")

        for attempt in range(1, self.max_attempts + 1):
            current = ReactionState(self.reactions.current_type(insight_id, actor_id))
            step = plan(current)
            now = utcnow()
            try:
                self._write_reaction(insight_id, actor_id, display_name, step, now)
            except (ConflictError, _StaleState):
                logger.debug(
                    "Reaction on insight %s by %s moved under attempt %d; re-planning",
                    insight_id,
                    actor_id,
                    attempt,
                )
                continue

            if not self.insights.apply_delta(
                insight_id, step.delta.counts, step.delta.total, now
            ):
                raise NotFoundError("Insight not found")
            counts, total = self.insights.read_aggregate(insight_id) or ({}, 0)
            return ToggleResult(
                action=step.action,
                resulting_type=step.new_state.reaction_type,
                counts=counts,
                total=total,
            )

        raise UnavailableError(
            "Reaction kept changing concurrently; re-read the current reaction before retrying"
        )

    def _write_reaction(
        self,
        insight_id: str,
        actor_id: str,
        display_name: str,
        step: Transition,
        now: datetime,
    ) -> None:
        previous = step.previous.reaction_type
        target = step.new_state.reaction_type

        if previous is None:
            # ConflictError here means a racing request created the pair first.
            self.reactions.insert(
                insight_id=insight_id,
                actor_id=actor_id,
                actor_display_name=display_name,
                reaction_type=target,
                now=now,
            )
            return

        if target is None:
            written = self.reactions.delete(
                insight_id=insight_id, actor_id=actor_id, expected=previous
            )
        else:
            written = self.reactions.update_type(
                insight_id=insight_id,
                actor_id=actor_id,
                expected=previous,
                new_type=target,
                now=now,
            )
        if not written:
            raise _StaleState
