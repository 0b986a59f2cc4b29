# src/insight_pulse/api/v1/endpoints/__init__.py
"""API endpoint modules for version 1."""

from .insights import router as insights_router
from .reactions import router as reactions_router

__all__ = [
    "insights_router",
    "reactions_router",
]
