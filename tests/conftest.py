# tests/conftest.py
from __future__ import annotations

from collections.abc import Callable, Generator, Iterator
from datetime import timedelta
from itertools import count
from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from insight_pulse.db.session import Base
from insight_pulse.db.session import get_db as app_get_session
from insight_pulse.db.time import utcnow
from insight_pulse.main import app as fastapi_app
from insight_pulse.models import Insight

TEST_DB_URL = "sqlite://"

_INSIGHT_COUNTER = count(1)


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    # Services commit, so every test gets a plain session and the tables are
    # emptied afterwards instead of rolling back an outer transaction.
    SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_session_dependency(app: FastAPI, db_session: Session) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def make_insight(db_session: Session) -> Callable[..., Insight]:
    """Return a factory that persists an insight and commits it."""

    def _make(**overrides: Any) -> Insight:
        number = next(_INSIGHT_COUNTER)
        fields: dict[str, Any] = {
            "id": f"insight-{number:05d}",
            "text": f"Captured insight #{number}",
            "author_actor_id": "advocate-1",
            "author_display_name": "Advocate One",
            "captured_at": utcnow() - timedelta(hours=1),
        }
        fields.update(overrides)
        insight = Insight(**fields)
        db_session.add(insight)
        db_session.commit()
        db_session.refresh(insight)
        return insight

    return _make


@pytest.fixture()
def insight(make_insight: Callable[..., Insight]) -> Insight:
    """Create a baseline insight with no reactions."""
    return make_insight()
