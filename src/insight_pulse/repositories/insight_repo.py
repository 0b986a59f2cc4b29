"""Data access helpers for insights and their reaction aggregate."""
from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from insight_pulse.db.time import utcnow
from insight_pulse.models.insight import Insight
from insight_pulse.models.reaction import REACTION_TYPES, ReactionType

__all__ = ["AggregateSnapshot", "InsightRepository"]

AggregateSnapshot = tuple[dict[str, int], int]


def _count_columns() -> list:
    return [Insight.count_column(rt) for rt in REACTION_TYPES]


class InsightRepository:
    """Thin wrapper around database access for insight entities."""

    def __init__(self, session: Session) -> None:
        """Initialize the repository with a SQLAlchemy session."""
        self.session = session

    def exists(self, insight_id: str) -> bool:
        """Return whether an insight with this identifier exists."""
        found = self.session.execute(
            select(Insight.id).where(Insight.id == insight_id)
        ).scalar_one_or_none()
        return found is not None

    def read_aggregate(self, insight_id: str, *, for_update: bool = False) -> AggregateSnapshot | None:
        """Return ``(counts, total)`` straight from the database.

        With ``for_update`` the row is locked until the transaction ends on
        dialects that support ``SELECT ... FOR UPDATE``.
        """
        stmt = select(*_count_columns(), Insight.reaction_total).where(Insight.id == insight_id)
        if for_update:
            stmt = stmt.with_for_update()
        row = self.session.execute(stmt).first()
        if row is None:
            return None
        counts = {rt.value: int(row[index]) for index, rt in enumerate(REACTION_TYPES)}
        return counts, int(row[len(REACTION_TYPES)])

    def apply_delta(
        self,
        insight_id: str,
        counts: Mapping[ReactionType, int],
        total: int,
        now: datetime | None = None,
    ) -> bool:
        """Atomically add signed per-kind ``counts`` and ``total`` to the stored counters.

        The arithmetic happens inside a single ``UPDATE`` so concurrent writers
        never lose each other's increments.
        """
        values: dict = {"updated_at": now or utcnow()}
        for reaction_type, change in counts.items():
            if change:
                column = Insight.count_column(reaction_type)
                values[column.key] = column + change
        if total:
            values["reaction_total"] = Insight.reaction_total + total

        result = self.session.execute(
            update(Insight)
            .where(Insight.id == insight_id)
            .values(values)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    def replace_aggregate(
        self,
        insight_id: str,
        *,
        expected_counts: Mapping[str, int],
        expected_total: int,
        counts: Mapping[str, int],
        total: int,
        now: datetime | None = None,
    ) -> bool:
        """Overwrite the counters only if they still hold the expected values.

        Returns:
            ``True`` when the row was corrected, ``False`` if a concurrent
            writer changed it first.
        """
        conditions = [Insight.id == insight_id, Insight.reaction_total == expected_total]
        values: dict = {"reaction_total": total, "updated_at": now or utcnow()}
        for rt in REACTION_TYPES:
            column = Insight.count_column(rt)
            conditions.append(column == expected_counts.get(rt.value, 0))
            values[column.key] = counts.get(rt.value, 0)

        result = self.session.execute(
            update(Insight)
            .where(*conditions)
            .values(values)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    def ids_after(self, after_id: str | None, limit: int) -> list[str]:
        """Return up to ``limit`` insight ids in ascending order, after ``after_id``."""
        stmt = select(Insight.id).order_by(Insight.id).limit(limit)
        if after_id is not None:
            stmt = stmt.where(Insight.id > after_id)
        return list(self.session.execute(stmt).scalars())
