"""Pure reaction toggle state machine.

Each (insight, actor) pair is either ``NONE`` or ``REACTED(type)``. Submitting
a type moves the pair through the table below and yields the counter delta
that must be applied to the insight aggregate:

=============  ==================  =============  ==============================
current        request             new state      delta
=============  ==================  =============  ==============================
NONE           submit(t)           REACTED(t)     +1 counts[t], +1 total
REACTED(t)     submit(t)           NONE           -1 counts[t], -1 total
REACTED(t)     submit(u != t)      REACTED(u)     -1 counts[t], +1 counts[u]
=============  ==================  =============  ==============================

Nothing in this module touches storage.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum

from insight_pulse.core.errors import InvalidArgumentError, NotFoundError
from insight_pulse.models.reaction import REACTION_TYPES, ReactionType


class ToggleAction(str, Enum):
    """Outcome reported to callers for a toggle."""

    ADDED = "added"
    CHANGED = "changed"
    REMOVED = "removed"


@dataclass(frozen=True)
class ReactionState:
    """Current reaction of one actor on one insight; ``None`` means no reaction."""

    reaction_type: ReactionType | None = None


NONE = ReactionState()


def reacted(reaction_type: ReactionType) -> ReactionState:
    """Return the ``REACTED(reaction_type)`` state."""
    return ReactionState(reaction_type)


@dataclass(frozen=True)
class CounterDelta:
    """Signed adjustments to apply to an insight's reaction counters."""

    counts: Mapping[ReactionType, int] = field(default_factory=dict)
    total: int = 0


@dataclass(frozen=True)
class Transition:
    """Result of feeding a request into the state machine."""

    action: ToggleAction
    previous: ReactionState
    new_state: ReactionState
    delta: CounterDelta


def parse_reaction_type(value: object) -> ReactionType:
    """Return the ``ReactionType`` named by ``value``.

    Raises:
        InvalidArgumentError: If ``value`` is missing or not a recognized kind.
    """
    if isinstance(value, ReactionType):
        return value
    try:
        return ReactionType(value)
    except (ValueError, TypeError) as err:
        allowed = ", ".join(rt.value for rt in REACTION_TYPES)
        raise InvalidArgumentError(
            f"Invalid reaction type. Must be one of: {allowed}"
        ) from err


def transition(current: ReactionState, requested: ReactionType) -> Transition:
    """Return the transition for submitting ``requested`` from ``current``."""
    if current.reaction_type is None:
        return Transition(
            action=ToggleAction.ADDED,
            previous=current,
            new_state=reacted(requested),
            delta=CounterDelta(counts={requested: 1}, total=1),
        )

    if current.reaction_type == requested:
        return Transition(
            action=ToggleAction.REMOVED,
            previous=current,
            new_state=NONE,
            delta=CounterDelta(counts={requested: -1}, total=-1),
        )

    return Transition(
        action=ToggleAction.CHANGED,
        previous=current,
        new_state=reacted(requested),
        delta=CounterDelta(counts={current.reaction_type: -1, requested: 1}, total=0),
    )


def removal(current: ReactionState) -> Transition:
    """Return the transition for an explicit remove.

    Raises:
        NotFoundError: If there is no reaction to remove.
    """
    if current.reaction_type is None:
        raise NotFoundError("No reaction found")
    return transition(current, current.reaction_type)
