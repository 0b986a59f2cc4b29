"""Shared API dependencies."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.orm import Session

from insight_pulse.db.session import get_db
from insight_pulse.services.reaction_service import ReactionService

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]


def get_reaction_service(db: SessionDep) -> ReactionService:
    """Return a reaction service bound to the request's session."""
    return ReactionService(db)


# Type alias for the reaction toggle service dependency
ReactionServiceDep = Annotated[ReactionService, Depends(get_reaction_service)]
