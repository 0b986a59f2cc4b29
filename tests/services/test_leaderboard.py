# tests/services/test_leaderboard.py
"""Tests for the contributor leaderboard."""

from datetime import timedelta

import pytest

from insight_pulse.core.errors import InvalidArgumentError
from insight_pulse.db.time import utcnow
from insight_pulse.models.insight import (
    INSIGHT_TYPE_BUG_REPORT,
    INSIGHT_TYPE_FEATURE_REQUEST,
    INSIGHT_TYPE_USE_CASE,
    PRIORITY_CRITICAL,
    PRIORITY_HIGH,
    SENTIMENT_NEGATIVE,
    SENTIMENT_POSITIVE,
)
from insight_pulse.services.leaderboard import compute_leaderboard, impact_score


def test_impact_score_rounds_half_up() -> None:
    score = impact_score(
        total_insights=10,
        critical_count=2,
        high_count=3,
        feature_request_count=1,
        bug_report_count=0,
        use_case_count=1,
    )
    assert score == 26


@pytest.mark.parametrize(
    ("kwargs", "expected"),
    [
        ({"total_insights": 1, "feature_request_count": 1}, 3),  # 2.5
        ({"total_insights": 2, "bug_report_count": 1}, 4),  # 3.5
        ({"total_insights": 3, "feature_request_count": 2}, 6),
        ({"total_insights": 0}, 0),
    ],
)
def test_impact_score_values(kwargs, expected) -> None:
    assert impact_score(**kwargs) == expected


def test_entry_breakdown(db_session, make_insight) -> None:
    author = {"author_actor_id": "ada", "author_display_name": "Ada"}
    make_insight(**author, sentiment=SENTIMENT_POSITIVE, priority=PRIORITY_CRITICAL,
                 insight_type=INSIGHT_TYPE_FEATURE_REQUEST, event_id="kubecon")
    make_insight(**author, sentiment=SENTIMENT_NEGATIVE, priority=PRIORITY_HIGH,
                 insight_type=INSIGHT_TYPE_BUG_REPORT, event_id="kubecon")
    make_insight(**author, insight_type=INSIGHT_TYPE_USE_CASE, event_id="devoxx")
    make_insight(**author)

    board = compute_leaderboard(db_session)

    assert len(board.entries) == 1
    entry = board.entries[0]
    assert entry.actor_id == "ada"
    assert entry.display_name == "Ada"
    assert entry.total_insights == 4
    assert (entry.positive_count, entry.negative_count, entry.neutral_count) == (1, 1, 2)
    assert (entry.critical_count, entry.high_count) == (1, 1)
    assert (entry.feature_request_count, entry.bug_report_count, entry.use_case_count) == (1, 1, 1)
    assert entry.distinct_event_count == 2
    # 4 + 3 + 2 + 1.5 + 1.5 + 2
    assert entry.impact_score == 14
    assert entry.last_activity_at is not None


def test_ranked_by_volume_not_impact(db_session, make_insight) -> None:
    for _ in range(3):
        make_insight(author_actor_id="prolific")
    for _ in range(2):
        make_insight(author_actor_id="impactful", priority=PRIORITY_CRITICAL)

    board = compute_leaderboard(db_session)

    assert [entry.actor_id for entry in board.entries] == ["prolific", "impactful"]
    assert board.entries[1].impact_score > board.entries[0].impact_score


def test_ties_break_by_actor_id(db_session, make_insight) -> None:
    for actor_id in ("zed", "amy", "mo"):
        make_insight(author_actor_id=actor_id)

    board = compute_leaderboard(db_session)

    assert [entry.actor_id for entry in board.entries] == ["amy", "mo", "zed"]


def test_period_and_limit(db_session, make_insight) -> None:
    make_insight(author_actor_id="recent", captured_at=utcnow() - timedelta(hours=2))
    make_insight(author_actor_id="last-quarter", captured_at=utcnow() - timedelta(days=90))
    make_insight(author_actor_id="last-quarter", captured_at=utcnow() - timedelta(days=100))
    make_insight(author_actor_id=None, captured_at=utcnow() - timedelta(hours=1))

    week = compute_leaderboard(db_session, period="week")
    assert [entry.actor_id for entry in week.entries] == ["recent"]
    assert week.total_insights == 2
    assert week.total_actors == 1

    year = compute_leaderboard(db_session, period="year", limit=1)
    assert [entry.actor_id for entry in year.entries] == ["last-quarter"]
    assert year.total_actors == 2
    assert year.period == "year"


def test_invalid_period(db_session) -> None:
    with pytest.raises(InvalidArgumentError, match="Invalid period"):
        compute_leaderboard(db_session, period="quarter")
