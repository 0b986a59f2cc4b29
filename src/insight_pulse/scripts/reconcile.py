# src/insight_pulse/scripts/reconcile.py
"""
Recompute reaction counters from the reaction table and fix any drift.

Run on demand or from cron:
    python -m insight_pulse.scripts.reconcile
    python -m insight_pulse.scripts.reconcile --insight-id abc --dry-run
"""

from __future__ import annotations

import argparse
import logging

from insight_pulse.core.settings import settings
from insight_pulse.db.session import SessionLocal
from insight_pulse.services.reconciliation import ReconciliationReport, reconcile_insights


def run(
    *,
    batch_size: int,
    insight_ids: list[str] | None = None,
    dry_run: bool = False,
) -> ReconciliationReport:
    """Reconcile the given insights, or every insight in keyset batches."""
    total = ReconciliationReport()
    cursor: str | None = None
    while True:
        with SessionLocal() as db:
            report = reconcile_insights(
                db,
                insight_ids=insight_ids,
                batch_size=batch_size,
                after_id=cursor,
                dry_run=dry_run,
            )
        total.examined += report.examined
        total.corrections.extend(report.corrections)
        total.skipped.extend(report.skipped)
        if insight_ids is not None or report.next_cursor is None:
            return total
        cursor = report.next_cursor


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.strip().splitlines()[0])
    parser.add_argument(
        "--batch-size",
        type=int,
        default=settings.reconciliation_batch_size,
        help="insights examined per transaction",
    )
    parser.add_argument(
        "--insight-id",
        action="append",
        dest="insight_ids",
        help="only check this insight (repeatable)",
    )
    parser.add_argument("--dry-run", action="store_true", help="report drift without fixing it")
    args = parser.parse_args(argv)

    logging.basicConfig(level=settings.log_level.upper())

    report = run(batch_size=args.batch_size, insight_ids=args.insight_ids, dry_run=args.dry_run)
    verb = "Found" if args.dry_run else "Corrected"
    print(
        f"Examined {report.examined} insights. {verb} {report.corrected} drifted, "
        f"skipped {len(report.skipped)} changed mid-run."
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
