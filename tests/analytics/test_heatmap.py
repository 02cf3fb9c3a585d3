"""Unit tests for the sentiment heatmap."""
from __future__ import annotations

import datetime

import pytest

from feedback_analytics.analytics.buckets import resolve_timezone
from feedback_analytics.analytics.heatmap import build_heatmap
from feedback_analytics.records import FeedbackRecord, Sentiment, SentimentLabel

UTC = datetime.timezone.utc


def _rec(idx: int, ts: datetime.datetime | None, score: float | None = None):
    sentiment = Sentiment(SentimentLabel.POSITIVE, score) if score is not None else None
    return FeedbackRecord(id=str(idx), form_id="f", submitted_at=ts, sentiment=sentiment)


def test_grid_is_always_full():
    grid = build_heatmap([])

    assert len(grid) == 7 * 24
    assert all(cell.count == 0 and cell.average_score == 0.0 for cell in grid.values())


def test_cells_keyed_by_weekday_and_hour():
    # 2024-03-04 is a Monday
    monday_9 = datetime.datetime(2024, 3, 4, 9, 15, tzinfo=UTC)
    sunday_23 = datetime.datetime(2024, 3, 10, 23, 59, tzinfo=UTC)
    records = [
        _rec(1, monday_9, 0.8),
        _rec(2, monday_9 + datetime.timedelta(minutes=30), 0.4),
        _rec(3, monday_9),
        _rec(4, sunday_23, 0.1),
        _rec(5, None, 1.0),
    ]

    grid = build_heatmap(records)

    assert grid[(0, 9)].count == 3
    assert grid[(0, 9)].scored_count == 2
    assert grid[(0, 9)].average_score == pytest.approx(0.6)
    assert grid[(6, 23)].count == 1
    assert sum(cell.count for cell in grid.values()) == 4


def test_local_time_follows_timezone():
    # Monday 02:00 UTC is Sunday 21:00 in New York (EST)
    record = _rec(1, datetime.datetime(2024, 3, 4, 2, 0, tzinfo=UTC), 0.5)

    utc_grid = build_heatmap([record])
    ny_grid = build_heatmap([record], resolve_timezone("America/New_York"))

    assert utc_grid[(0, 2)].count == 1
    assert ny_grid[(6, 21)].count == 1
