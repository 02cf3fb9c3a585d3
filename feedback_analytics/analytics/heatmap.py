"""Day-of-week x hour-of-day sentiment heatmap."""

from __future__ import annotations

import datetime
from typing import Iterable

from feedback_analytics.analytics.models import HeatmapGrid, SentimentStats
from feedback_analytics.records import FeedbackRecord

DAYS_PER_WEEK = 7
HOURS_PER_DAY = 24


def empty_grid() -> HeatmapGrid:
    return {
        (day, hour): SentimentStats()
        for day in range(DAYS_PER_WEEK)
        for hour in range(HOURS_PER_DAY)
    }


def build_heatmap(
    records: Iterable[FeedbackRecord],
    tz: datetime.tzinfo = datetime.timezone.utc,
) -> HeatmapGrid:
    """Return all 168 cells keyed by ``(day_of_week, hour_of_day)``.

    Local time is taken in *tz*; ``day_of_week`` is ``0`` for Monday.
    Records without a timestamp are skipped.
    """
    grid = empty_grid()
    for record in records:
        if record.submitted_at is None:
            continue
        local = record.submitted_at.astimezone(tz)
        grid[(local.weekday(), local.hour)].add(record)
    return grid
