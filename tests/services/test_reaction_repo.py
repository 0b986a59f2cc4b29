# tests/services/test_reaction_repo.py
"""Tests for guarded reaction writes."""

import pytest
from sqlalchemy import update
from sqlalchemy.exc import IntegrityError

from insight_pulse.core.errors import ConflictError
from insight_pulse.models import Insight
from insight_pulse.models.reaction import ReactionType
from insight_pulse.repositories.insight_repo import InsightRepository
from insight_pulse.repositories.reaction_repo import ReactionRepository


@pytest.fixture()
def repo(db_session) -> ReactionRepository:
    return ReactionRepository(db_session)


def insert_like(repo, insight_id, actor_id="alice") -> None:
    repo.insert(
        insight_id=insight_id,
        actor_id=actor_id,
        actor_display_name=actor_id.title(),
        reaction_type=ReactionType.LIKE,
    )


def test_one_reaction_per_actor_and_insight(repo, insight, db_session) -> None:
    insert_like(repo, insight.id)

    with pytest.raises(ConflictError):
        insert_like(repo, insight.id)

    insert_like(repo, insight.id, actor_id="bob")
    db_session.commit()
    assert repo.count_all() == 2
    assert repo.current_type(insight.id, "alice") is ReactionType.LIKE


def test_update_only_from_expected_type(repo, insight) -> None:
    insert_like(repo, insight.id)

    assert not repo.update_type(
        insight_id=insight.id, actor_id="alice",
        expected=ReactionType.LOVE, new_type=ReactionType.FIRE,
    )
    assert repo.update_type(
        insight_id=insight.id, actor_id="alice",
        expected=ReactionType.LIKE, new_type=ReactionType.FIRE,
    )
    assert repo.current_type(insight.id, "alice") is ReactionType.FIRE


def test_delete_only_from_expected_type(repo, insight) -> None:
    insert_like(repo, insight.id)

    assert not repo.delete(insight_id=insight.id, actor_id="alice", expected=ReactionType.FIRE)
    assert repo.delete(insight_id=insight.id, actor_id="alice", expected=ReactionType.LIKE)
    assert repo.current_type(insight.id, "alice") is None
    assert not repo.delete(insight_id=insight.id, actor_id="alice", expected=ReactionType.LIKE)


def test_types_for_actor_batches_lookup(repo, make_insight) -> None:
    first, second, third = make_insight(), make_insight(), make_insight()
    insert_like(repo, first.id)
    insert_like(repo, third.id)
    insert_like(repo, second.id, actor_id="bob")

    assert repo.types_for_actor([first.id, second.id, third.id], "alice") == {
        first.id: "like",
        third.id: "like",
    }
    assert repo.types_for_actor([], "alice") == {}


def test_apply_delta_adds_signed_counts(insight, db_session) -> None:
    insights = InsightRepository(db_session)

    assert insights.apply_delta(insight.id, {ReactionType.LIKE: 1, ReactionType.FIRE: 2}, 3)
    assert insights.apply_delta(insight.id, {ReactionType.LIKE: -1, ReactionType.LOVE: 1}, 0)
    db_session.commit()
    db_session.expire_all()

    stored = db_session.get(Insight, insight.id)
    assert stored.reaction_counts == {
        "like": 0, "love": 1, "insightful": 0, "celebrate": 0, "fire": 2,
    }
    assert stored.reaction_total == 3
    assert not insights.apply_delta("does-not-exist", {ReactionType.LIKE: 1}, 1)


def test_counters_cannot_go_negative(insight, db_session) -> None:
    with pytest.raises(IntegrityError):
        db_session.execute(update(Insight).where(Insight.id == insight.id).values(like_count=-1))
    db_session.rollback()

    with pytest.raises(IntegrityError):
        InsightRepository(db_session).apply_delta(insight.id, {ReactionType.FIRE: -1}, -1)
    db_session.rollback()

    assert db_session.get(Insight, insight.id).reaction_total == 0
