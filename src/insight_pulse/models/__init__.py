# src/insight_pulse/models/__init__.py
"""SQLAlchemy models for the Insight Pulse application."""

from .insight import Insight
from .reaction import (
    REACTION_EMOJI,
    REACTION_SCHEMA_VERSION,
    REACTION_TYPES,
    Reaction,
    ReactionType,
)

__all__ = [
    "Insight",
    "Reaction", "ReactionType",
    "REACTION_EMOJI", "REACTION_SCHEMA_VERSION", "REACTION_TYPES",
]
