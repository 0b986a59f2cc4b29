# tests/test_health.py
from typing import Any


def test_health(client: Any) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_root_describes_service(client: Any) -> None:
    body = client.get("/").json()
    assert body["name"] == "Insight Pulse"
    assert body["docs"] == "/docs"
