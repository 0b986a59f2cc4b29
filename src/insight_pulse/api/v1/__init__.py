# src/insight_pulse/api/v1/__init__.py
"""Version 1 API endpoints."""

from .endpoints import insights_router, reactions_router

__all__ = [
    "insights_router",
    "reactions_router",
]
