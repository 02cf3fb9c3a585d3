"""Unit tests for the trend builder."""
from __future__ import annotations

import datetime

import pytest

from feedback_analytics.analytics.aggregator import aggregate
from feedback_analytics.analytics.trends import build_trends, merge_trend_stats, trend_series
from feedback_analytics.records import FeedbackRecord, Sentiment, SentimentLabel

UTC = datetime.timezone.utc


def _rec(idx: int, day: int | None, label: str | None = None, score: float = 0.5):
    submitted = datetime.datetime(2024, 3, day, 12, tzinfo=UTC) if day else None
    sentiment = Sentiment(SentimentLabel(label), score) if label else None
    return FeedbackRecord(id=str(idx), form_id="f", submitted_at=submitted, sentiment=sentiment)


@pytest.fixture()
def records() -> list[FeedbackRecord]:
    return [
        _rec(1, 1, "Positive", 0.9),
        _rec(2, 1, "Negative", 0.2),
        _rec(3, 1),
        _rec(4, 3, "Neutral", 0.5),
        _rec(5, 4, "Positive", 0.8),
        _rec(6, None, "Positive", 1.0),
        _rec(7, 12, "Negative", 0.0),
    ]


def test_per_bucket_counts_and_scores(records):
    points = build_trends(records, "day", end=datetime.date(2024, 3, 4))

    assert [p.bucket.label for p in points] == [
        "2024-03-01",
        "2024-03-02",
        "2024-03-03",
        "2024-03-04",
    ]
    assert [p.count for p in points] == [3, 0, 1, 1]
    assert points[0].average_score == pytest.approx(0.55)
    assert points[1].average_score == 0.0
    assert points[1].stats.scored_count == 0


def test_series_are_aligned(records):
    for granularity in ("day", "week", "month"):
        feedback, sentiment = trend_series(build_trends(records, granularity))

        assert len(feedback) == len(sentiment)
        assert [f["date"] for f in feedback] == [s["date"] for s in sentiment]
        assert [f["label"] for f in feedback] == [s["label"] for s in sentiment]


def test_counts_sum_to_timestamped_in_window(records):
    start, end = datetime.date(2024, 3, 2), datetime.date(2024, 3, 10)

    points = build_trends(records, "week", start=start, end=end)

    in_window = [
        r
        for r in records
        if r.submitted_at is not None and start <= r.submitted_at.date() <= end
    ]
    assert sum(p.count for p in points) == len(in_window) == 2


def test_overall_mean_equals_weighted_bucket_mean(records):
    timed = [r for r in records if r.submitted_at is not None]
    points = build_trends(timed, "day")

    scored = sum(p.stats.scored_count for p in points)
    weighted = sum(p.average_score * p.stats.scored_count for p in points) / scored

    assert aggregate(timed).average_score == pytest.approx(weighted)
    merged = merge_trend_stats(points)
    assert merged.count == len(timed)
    assert merged.distribution() == aggregate(timed).distribution()
    assert merged.average_score == pytest.approx(weighted)


def test_empty_window_yields_zero_buckets():
    points = build_trends(
        [], "day", start=datetime.date(2024, 3, 1), end=datetime.date(2024, 3, 2)
    )
    feedback, sentiment = trend_series(points)

    assert [f["count"] for f in feedback] == [0, 0]
    assert [s["averageScore"] for s in sentiment] == [0.0, 0.0]
    assert trend_series(build_trends([], "day")) == ([], [])
