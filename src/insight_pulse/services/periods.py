"""Capture-time windows shared by the popularity feed and the leaderboard."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Final

from insight_pulse.core.errors import InvalidArgumentError
from insight_pulse.db.time import utcnow

PERIOD_ALL: Final = "all"

PERIOD_WINDOWS: Final[dict[str, timedelta]] = {
    "day": timedelta(days=1),
    "week": timedelta(days=7),
    "month": timedelta(days=30),
    "year": timedelta(days=365),
}


def period_start(
    period: str,
    *,
    allowed: tuple[str, ...],
    now: datetime | None = None,
) -> datetime | None:
    """Return the inclusive lower bound on ``captured_at`` for ``period``.

    ``all`` yields ``None`` (no bound). The upper bound is always ``now``.

    Raises:
        InvalidArgumentError: If ``period`` is not in ``allowed``.
    """
    if period not in allowed:
        raise InvalidArgumentError(f"Invalid period. Must be one of: {', '.join(allowed)}")
    if period == PERIOD_ALL:
        return None
    return (now or utcnow()) - PERIOD_WINDOWS[period]
