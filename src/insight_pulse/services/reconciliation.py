"""Detect and correct drift between reactions and the insight aggregate.

The reaction table is the source of truth. For each insight in a batch the
stored counters are read (and row-locked where supported) before the true
counts are recomputed, and any correction is written with a compare-and-set
update. A toggle that commits in between therefore makes the correction a
no-op instead of being overwritten; the next pass re-checks that insight.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field

from sqlalchemy.exc import DBAPIError
from sqlalchemy.orm import Session

from insight_pulse.core.errors import NotFoundError
from insight_pulse.core.settings import settings
from insight_pulse.db.session import SessionLocal
from insight_pulse.models.reaction import REACTION_TYPES
from insight_pulse.repositories.insight_repo import InsightRepository
from insight_pulse.repositories.reaction_repo import ReactionRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AggregateDrift:
    """Difference between an insight's stored counters and its reaction rows."""

    insight_id: str
    stored_counts: dict[str, int]
    stored_total: int
    actual_counts: dict[str, int]
    actual_total: int


@dataclass
class ReconciliationReport:
    """Summary of one reconciliation pass over a batch of insights."""

    examined: int = 0
    corrections: list[AggregateDrift] = field(default_factory=list)
    # Drifted insights whose counters moved before the correction landed.
    skipped: list[str] = field(default_factory=list)
    next_cursor: str | None = None

    @property
    def corrected(self) -> int:
        return len(self.corrections)


def _normalize(counts: Mapping[str, int]) -> dict[str, int]:
    return {rt.value: int(counts.get(rt.value, 0)) for rt in REACTION_TYPES}


def _drift(
    insight_id: str,
    stored: tuple[dict[str, int], int],
    actual_counts: Mapping[str, int],
) -> AggregateDrift | None:
    stored_counts, stored_total = stored
    actual = _normalize(actual_counts)
    actual_total = sum(actual.values())
    if stored_counts == actual and stored_total == actual_total:
        return None
    return AggregateDrift(
        insight_id=insight_id,
        stored_counts=dict(stored_counts),
        stored_total=stored_total,
        actual_counts=actual,
        actual_total=actual_total,
    )


def check_insight(db: Session, insight_id: str) -> AggregateDrift | None:
    """Return the insight's drift, or ``None`` if its aggregate is exact.

    Raises:
        NotFoundError: If the insight does not exist.
    """
    stored = InsightRepository(db).read_aggregate(insight_id)
    if stored is None:
        raise NotFoundError("Insight not found")
    actual = ReactionRepository(db).count_by_insight_and_type([insight_id])[insight_id]
    return _drift(insight_id, stored, actual)


def reconcile_insights(
    db: Session,
    *,
    insight_ids: Iterable[str] | None = None,
    batch_size: int | None = None,
    after_id: str | None = None,
    dry_run: bool = False,
) -> ReconciliationReport:
    """Recompute counters for a batch of insights and fix any that drifted.

    Args:
        db: Session used for the whole batch; committed unless ``dry_run``.
        insight_ids: Explicit insights to check. When omitted the next
            ``batch_size`` insights after ``after_id`` (by id) are checked.
        batch_size: Batch size for cursor-driven passes.
        after_id: Keyset cursor from a previous report's ``next_cursor``.
        dry_run: Detect and log drift without writing corrections.

    Returns:
        A report whose ``next_cursor`` is ``None`` once the last batch was read.
    """
    insights = InsightRepository(db)
    reactions = ReactionRepository(db)
    report = ReconciliationReport()

    if insight_ids is None:
        size = max(1, batch_size or settings.reconciliation_batch_size)
        ids = insights.ids_after(after_id, size)
        report.next_cursor = ids[-1] if len(ids) == size else None
    else:
        ids = list(dict.fromkeys(insight_ids))

    # Stored counters are read before the truth so a concurrent toggle shows
    # up as a failed compare-and-set rather than a stale overwrite.
    stored = {}
    for insight_id in ids:
        snapshot = insights.read_aggregate(insight_id, for_update=not dry_run)
        if snapshot is not None:
            stored[insight_id] = snapshot
    actual = reactions.count_by_insight_and_type(stored)

    for insight_id, snapshot in stored.items():
        report.examined += 1
        drift = _drift(insight_id, snapshot, actual[insight_id])
        if drift is None:
            continue

        if dry_run:
            logger.warning(
                "Aggregate drift on insight %s: stored total=%d counts=%s, actual total=%d counts=%s",
                insight_id,
                drift.stored_total,
                drift.stored_counts,
                drift.actual_total,
                drift.actual_counts,
            )
            report.corrections.append(drift)
            continue

        corrected = insights.replace_aggregate(
            insight_id,
            expected_counts=drift.stored_counts,
            expected_total=drift.stored_total,
            counts=drift.actual_counts,
            total=drift.actual_total,
        )
        if corrected:
            logger.warning(
                "Corrected aggregate on insight %s: total %d -> %d, counts %s -> %s",
                insight_id,
                drift.stored_total,
                drift.actual_total,
                drift.stored_counts,
                drift.actual_counts,
            )
            report.corrections.append(drift)
        else:
            logger.info("Aggregate on insight %s changed during reconciliation; skipped", insight_id)
            report.skipped.append(insight_id)

    if dry_run:
        db.rollback()
    else:
        db.commit()
    return report


class ReconciliationWorker:
    """Periodically walks all insights in batches and corrects aggregate drift.

    Each tick reconciles one batch and advances a keyset cursor; after the
    last batch the cursor wraps around to the start.
    """

    def __init__(
        self,
        *,
        interval_seconds: float | None = None,
        batch_size: int | None = None,
        session_factory: Callable[[], Session] = SessionLocal,
    ) -> None:
        self.interval = max(
            0.1,
            float(interval_seconds or settings.reconciliation_interval_seconds),
        )
        self.batch_size = batch_size or settings.reconciliation_batch_size
        self.session_factory = session_factory
        self.cursor: str | None = None
        self.total_corrections = 0
        self._task: asyncio.Task[None] | None = None
        self._stopping = asyncio.Event()

    async def start(self) -> None:
        """Start the background reconciliation loop."""
        if self._task is None or self._task.done():
            self._stopping.clear()
            self._task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        """Stop the background reconciliation loop."""
        if self._task is None:
            return

        self._stopping.set()
        await self._task
        self._task = None

    async def run_once(self) -> ReconciliationReport:
        """Reconcile the next batch and advance the cursor."""
        report = await asyncio.to_thread(self._reconcile_batch, self.cursor)
        self.cursor = report.next_cursor
        self.total_corrections += report.corrected
        return report

    def _reconcile_batch(self, cursor: str | None) -> ReconciliationReport:
        with self.session_factory() as db:
            return reconcile_insights(db, batch_size=self.batch_size, after_id=cursor)

    async def _run(self) -> None:
        while not self._stopping.is_set():
            try:
                report = await self.run_once()
            except DBAPIError as e:
                logger.warning("ReconciliationWorker encountered store error: %s", e)
                await self._sleep(min(self.interval * 4, 300.0))
                continue
            except (ValueError, TypeError, KeyError, AttributeError) as e:
                logger.error(
                    "ReconciliationWorker encountered data processing error: %s", e, exc_info=True
                )
                await self._sleep(min(self.interval * 4, 300.0))
                continue

            if report.corrected:
                logger.info(
                    "ReconciliationWorker corrected %d of %d insights",
                    report.corrected,
                    report.examined,
                )
            await self._sleep(self.interval)

    async def _sleep(self, seconds: float) -> None:
        with contextlib.suppress(TimeoutError):
            await asyncio.wait_for(self._stopping.wait(), timeout=seconds)
