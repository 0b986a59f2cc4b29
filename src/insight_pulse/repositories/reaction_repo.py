"""Data access helpers for the reaction store."""
from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

from sqlalchemy import delete, func, insert, select, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from insight_pulse.core.errors import ConflictError
from insight_pulse.db.time import utcnow
from insight_pulse.models.reaction import Reaction, ReactionType

__all__ = ["ReactionRepository"]

_UPSERT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class ReactionRepository:
    """Thin wrapper around database access for reaction rows.

    Writes are guarded by the row's expected prior state so that a caller
    racing another request for the same (insight, actor) pair finds out
    instead of overwriting it.
    """

    def __init__(self, session: Session) -> None:
        """Initialize the repository with a SQLAlchemy session."""
        self.session = session

    def current_type(self, insight_id: str, actor_id: str) -> ReactionType | None:
        """Return the pair's stored reaction type without loading an ORM instance."""
        stored = self.session.execute(
            select(Reaction.type).where(
                Reaction.insight_id == insight_id,
                Reaction.actor_id == actor_id,
            )
        ).scalar_one_or_none()
        return ReactionType(stored) if stored is not None else None

    def insert(
        self,
        *,
        insight_id: str,
        actor_id: str,
        actor_display_name: str,
        reaction_type: ReactionType,
        now: datetime | None = None,
    ) -> None:
        """Insert a new reaction.

        Raises:
            ConflictError: If a reaction already exists for the pair.
        """
        now = now or utcnow()
        values = {
            "insight_id": insight_id,
            "actor_id": actor_id,
            "actor_display_name": actor_display_name,
            "type": reaction_type.value,
            "created_at": now,
            "updated_at": now,
        }
        dialect = self.session.get_bind().dialect.name
        upsert_insert = _UPSERT_INSERTS.get(dialect)

        if upsert_insert is not None:
            stmt = upsert_insert(Reaction).values(**values).on_conflict_do_nothing(
                index_elements=["insight_id", "actor_id"],
            )
            if self.session.execute(stmt).rowcount == 0:
                raise ConflictError(f"Reaction exists for {insight_id}/{actor_id}")
            return

        try:
            with self.session.begin_nested():
                self.session.execute(insert(Reaction).values(**values))
        except IntegrityError as err:
            raise ConflictError(f"Reaction exists for {insight_id}/{actor_id}") from err

    def update_type(
        self,
        *,
        insight_id: str,
        actor_id: str,
        expected: ReactionType,
        new_type: ReactionType,
        now: datetime | None = None,
    ) -> bool:
        """Change the reaction type if it still equals ``expected``.

        Returns:
            ``True`` when exactly one row changed.
        """
        result = self.session.execute(
            update(Reaction)
            .where(
                Reaction.insight_id == insight_id,
                Reaction.actor_id == actor_id,
                Reaction.type == expected.value,
            )
            .values(type=new_type.value, updated_at=now or utcnow())
        )
        return result.rowcount == 1

    def delete(self, *, insight_id: str, actor_id: str, expected: ReactionType) -> bool:
        """Delete the reaction if its type still equals ``expected``."""
        result = self.session.execute(
            delete(Reaction).where(
                Reaction.insight_id == insight_id,
                Reaction.actor_id == actor_id,
                Reaction.type == expected.value,
            )
        )
        return result.rowcount == 1

    def recent_for_insight(self, insight_id: str, limit: int) -> list[Reaction]:
        """Return the most recent reactions on an insight."""
        result = self.session.execute(
            select(Reaction)
            .where(Reaction.insight_id == insight_id)
            .order_by(Reaction.created_at.desc(), Reaction.actor_id)
            .limit(limit)
        )
        return list(result.scalars())

    def for_actor(self, actor_id: str, limit: int) -> list[Reaction]:
        """Return an actor's reactions, newest first."""
        result = self.session.execute(
            select(Reaction)
            .where(Reaction.actor_id == actor_id)
            .order_by(Reaction.created_at.desc(), Reaction.insight_id)
            .limit(limit)
        )
        return list(result.scalars())

    def types_for_actor(self, insight_ids: Iterable[str], actor_id: str) -> dict[str, str]:
        """Return ``{insight_id: type}`` for the actor across many insights in one query."""
        ids = list(insight_ids)
        if not ids:
            return {}
        rows = self.session.execute(
            select(Reaction.insight_id, Reaction.type).where(
                Reaction.actor_id == actor_id,
                Reaction.insight_id.in_(ids),
            )
        )
        return {insight_id: reaction_type for insight_id, reaction_type in rows}

    def count_by_insight_and_type(
        self, insight_ids: Iterable[str]
    ) -> dict[str, dict[str, int]]:
        """Return true per-type reaction counts for each requested insight."""
        ids = list(insight_ids)
        counts: dict[str, dict[str, int]] = {insight_id: {} for insight_id in ids}
        if not ids:
            return counts
        rows = self.session.execute(
            select(Reaction.insight_id, Reaction.type, func.count())
            .where(Reaction.insight_id.in_(ids))
            .group_by(Reaction.insight_id, Reaction.type)
        )
        for insight_id, reaction_type, count in rows:
            counts[insight_id][reaction_type] = int(count)
        return counts

    def type_distribution(self) -> list[tuple[str, int]]:
        """Return ``(type, count)`` pairs across all reactions, most frequent first."""
        count = func.count().label("count")
        rows = self.session.execute(
            select(Reaction.type, count)
            .group_by(Reaction.type)
            .order_by(count.desc(), Reaction.type)
        )
        return [(reaction_type, int(total)) for reaction_type, total in rows]

    def top_reactors(self, limit: int) -> list[tuple[str, str, int]]:
        """Return ``(actor_id, display_name, count)`` for actors who react the most."""
        count = func.count().label("count")
        rows = self.session.execute(
            select(Reaction.actor_id, func.max(Reaction.actor_display_name), count)
            .group_by(Reaction.actor_id)
            .order_by(count.desc(), Reaction.actor_id)
            .limit(limit)
        )
        return [(actor_id, name, int(total)) for actor_id, name, total in rows]

    def count_all(self) -> int:
        """Return the total number of reactions."""
        return int(self.session.execute(select(func.count()).select_from(Reaction)).scalar_one())
