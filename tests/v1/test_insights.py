# tests/v1/test_insights.py
"""Tests for the popularity feed, stats and leaderboard endpoints."""

from fastapi import status

from insight_pulse.models.insight import PRIORITY_CRITICAL, PRIORITY_HIGH


def react(client, insight_id, actor_id, reaction_type, name=None):
    return client.post(
        f"/api/v1/insights/{insight_id}/react",
        json={"actorId": actor_id, "actorDisplayName": name or actor_id, "type": reaction_type},
    )


def test_popular_feed(client, make_insight) -> None:
    quiet = make_insight(text="Needs dark mode")
    loud = make_insight(text="SSO is a blocker")
    make_insight(text="No reactions yet")
    react(client, quiet.id, "alice", "like")
    for actor_id in ("alice", "bob", "carol"):
        react(client, loud.id, actor_id, "fire")
    react(client, loud.id, "dave", "love")

    response = client.get("/api/v1/insights/popular", params={"actorId": "alice"})

    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert body["total"] == 2
    assert (body["limit"], body["offset"], body["period"], body["sort"]) == (20, 0, "week", "total")
    first, second = body["insights"]
    assert first["id"] == loud.id
    assert first["reactionTotal"] == 4
    assert first["reactionCounts"]["fire"] == 3
    assert first["reactionSummary"] == "\U0001F525 3  \u2764\uFE0F 1"
    assert first["userReaction"] == "fire"
    assert first["authorDisplayName"] == "Advocate One"
    assert second["id"] == quiet.id
    assert second["userReaction"] == "like"


def test_popular_sort_by_type(client, make_insight) -> None:
    a = make_insight()
    b = make_insight()
    react(client, a.id, "alice", "like")
    react(client, a.id, "bob", "like")
    react(client, b.id, "alice", "insightful")

    response = client.get("/api/v1/insights/popular", params={"sort": "insightful"})

    assert [item["id"] for item in response.json()["insights"]] == [b.id, a.id]


def test_popular_rejects_unknown_sort_and_period(client) -> None:
    response = client.get("/api/v1/insights/popular", params={"sort": "newest"})
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["detail"].startswith("Invalid sort")

    response = client.get("/api/v1/insights/popular", params={"period": "decade"})
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_popular_limit_is_capped(client) -> None:
    response = client.get("/api/v1/insights/popular", params={"limit": 500})
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["limit"] == 100


def test_reaction_stats(client, make_insight) -> None:
    insight = make_insight(author_actor_id="ada", author_display_name="Ada")
    react(client, insight.id, "alice", "like", "Alice")
    react(client, insight.id, "bob", "celebrate", "Bob")

    response = client.get("/api/v1/insights/popular/stats")

    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert {entry["actorId"] for entry in body["topReactors"]} == {"alice", "bob"}
    assert body["topReceivers"] == [
        {"actorId": "ada", "name": "Ada", "totalReactions": 2, "insightCount": 1}
    ]
    assert body["typeDistribution"]["like"] == {"count": 1, "emoji": "\U0001F44D"}
    assert body["typeDistribution"]["celebrate"]["count"] == 1
    assert body["totals"] == {"reactions": 2, "insightsWithReactions": 1}


def test_leaderboard(client, make_insight) -> None:
    for _ in range(3):
        make_insight(author_actor_id="ada", author_display_name="Ada", priority=PRIORITY_HIGH)
    make_insight(author_actor_id="grace", author_display_name="Grace", priority=PRIORITY_CRITICAL)

    response = client.get("/api/v1/insights/leaderboard")

    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert body["period"] == "all"
    assert body["totalInsights"] == 4
    assert body["totalActors"] == 2
    first = body["leaderboard"][0]
    assert first["actorId"] == "ada"
    assert first["totalInsights"] == 3
    assert first["highCount"] == 3
    assert first["impactScore"] == 9
    assert body["leaderboard"][1]["impactScore"] == 4


def test_leaderboard_rejects_unknown_period(client) -> None:
    response = client.get("/api/v1/insights/leaderboard", params={"period": "quarter"})
    assert response.status_code == status.HTTP_400_BAD_REQUEST
