# tests/test_toggle.py
"""Tests for the pure reaction state machine."""

import pytest

from insight_pulse.core.errors import InvalidArgumentError, NotFoundError
from insight_pulse.models.reaction import REACTION_TYPES, ReactionType
from insight_pulse.services.toggle import (
    NONE,
    ToggleAction,
    parse_reaction_type,
    reacted,
    removal,
    transition,
)


def test_submit_from_none_adds() -> None:
    step = transition(NONE, ReactionType.LIKE)

    assert step.action is ToggleAction.ADDED
    assert step.new_state == reacted(ReactionType.LIKE)
    assert step.delta.counts == {ReactionType.LIKE: 1}
    assert step.delta.total == 1


def test_submit_same_type_removes() -> None:
    step = transition(reacted(ReactionType.FIRE), ReactionType.FIRE)

    assert step.action is ToggleAction.REMOVED
    assert step.new_state.reaction_type is None
    assert step.delta.counts == {ReactionType.FIRE: -1}
    assert step.delta.total == -1


def test_submit_other_type_changes_without_touching_total() -> None:
    step = transition(reacted(ReactionType.LIKE), ReactionType.LOVE)

    assert step.action is ToggleAction.CHANGED
    assert step.previous == reacted(ReactionType.LIKE)
    assert step.new_state == reacted(ReactionType.LOVE)
    assert step.delta.counts == {ReactionType.LIKE: -1, ReactionType.LOVE: 1}
    assert step.delta.total == 0


@pytest.mark.parametrize("current", [NONE, *(reacted(rt) for rt in REACTION_TYPES)])
@pytest.mark.parametrize("requested", REACTION_TYPES)
def test_every_delta_keeps_total_equal_to_sum(current, requested) -> None:
    step = transition(current, requested)
    assert sum(step.delta.counts.values()) == step.delta.total


def test_removal_requires_existing_reaction() -> None:
    with pytest.raises(NotFoundError, match="No reaction found"):
        removal(NONE)

    step = removal(reacted(ReactionType.CELEBRATE))
    assert step.action is ToggleAction.REMOVED
    assert step.delta.total == -1


@pytest.mark.parametrize("value", ["like", ReactionType.LIKE])
def test_parse_reaction_type_accepts_names_and_members(value) -> None:
    assert parse_reaction_type(value) is ReactionType.LIKE


@pytest.mark.parametrize("value", ["angry", "LIKE", "", None, 3])
def test_parse_reaction_type_rejects_unknown(value) -> None:
    with pytest.raises(InvalidArgumentError, match="Must be one of: like, love, insightful, celebrate, fire"):
        parse_reaction_type(value)


def test_reaction_order_and_glyphs_are_stable() -> None:
    assert [rt.value for rt in REACTION_TYPES] == ["like", "love", "insightful", "celebrate", "fire"]
    assert [rt.emoji for rt in REACTION_TYPES] == [
        "\U0001F44D", "\u2764\uFE0F", "\U0001F4A1", "\U0001F44F", "\U0001F525",
    ]
    assert [rt.position for rt in REACTION_TYPES] == [0, 1, 2, 3, 4]
