"""Database session configuration."""

from __future__ import annotations

from collections.abc import Generator
from typing import Any

from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from insight_pulse.core.settings import settings


class Base(DeclarativeBase):
    """Declarative base shared by all ORM models."""


# Ensure model modules are imported so that metadata is populated when create_all runs.
import insight_pulse.models  # noqa: E402,F401


def engine_connect_args(database_url: str, timeout_seconds: float) -> dict[str, Any]:
    """Return driver arguments that bound every store operation by ``timeout_seconds``.

    PostgreSQL enforces it server-side as ``statement_timeout``; SQLite uses it
    as the busy timeout while waiting for the write lock.
    """
    backend = make_url(database_url).get_backend_name()
    if backend == "postgresql":
        timeout_ms = max(1, int(timeout_seconds * 1000))
        return {
            "connect_timeout": max(1, int(timeout_seconds)),
            "options": f"-c statement_timeout={timeout_ms}",
        }
    if backend == "sqlite":
        return {"timeout": timeout_seconds, "check_same_thread": False}
    return {}


engine = create_engine(
    settings.effective_database_url,
    pool_pre_ping=True,
    echo=settings.sql_debug,
    connect_args=engine_connect_args(
        settings.effective_database_url,
        settings.db_statement_timeout_seconds,
    ),
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """Yield a database session for dependency injection."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
