"""Unit tests for the dashboard context."""
from __future__ import annotations

import datetime

import pytest

from feedback_analytics.analytics.engine import AnalyticsOptions, compute_analytics
from feedback_analytics.records import FeedbackRecord, Sentiment, SentimentLabel
from feedback_analytics.reporting import config as _cfg
from feedback_analytics.reporting.context import (
    build_dashboard_context,
    distribution_shares,
    sentiment_bar,
    trend_direction,
)

UTC = datetime.timezone.utc


def _rec(idx: int, day: int, label: SentimentLabel | None, score: float = 0.5):
    return FeedbackRecord(
        id=str(idx),
        form_id=f"form-{idx % 2}",
        submitted_at=datetime.datetime(2024, 3, day, 12, tzinfo=UTC),
        responses={"comment": "quick friendly service"},
        sentiment=Sentiment(label, score) if label else None,
    )


def _result(days: int = 10, form_count: int | None = None):
    records = [
        _rec(i, i, SentimentLabel.POSITIVE if i % 3 else SentimentLabel.NEGATIVE, 0.8)
        for i in range(1, days + 1)
        if i != 4
    ]
    records.append(_rec(99, 4, None))
    return compute_analytics(records, AnalyticsOptions(form_count=form_count))


def test_overview_uses_display_scale():
    result = _result()

    ctx = build_dashboard_context(result)

    assert ctx.overview.average_rating == pytest.approx(0.8 * _cfg.DISPLAY_SCALE)
    assert ctx.overview.satisfaction == 80
    assert ctx.overview.active_forms == 2
    assert ctx.overview.response_rate is None
    assert ctx.overview.has_data


def test_recent_trends_window_and_placeholder():
    result = _result()

    ctx = build_dashboard_context(result)

    assert len(ctx.recent_trends) == _cfg.RECENT_TREND_POINTS
    assert ctx.recent_trends[-1].label == "2024-03-10"
    # 2024-03-04 only has an unscored record
    short = build_dashboard_context(_result(days=4))
    assert short.recent_trends[-1].responses == 1
    assert short.recent_trends[-1].rating == _cfg.EMPTY_BUCKET_RATING


def test_distribution_percentages_and_direction():
    shares = distribution_shares({"Positive": 3, "Neutral": 0, "Negative": 1})

    assert [(s.label, s.count) for s in shares] == [
        ("Positive", 3),
        ("Neutral", 0),
        ("Negative", 1),
    ]
    assert [s.percentage for s in shares] == pytest.approx([75.0, 0.0, 25.0])
    assert trend_direction({"Positive": 1, "Negative": 2}) == "negative"
    assert trend_direction({"Positive": 2, "Negative": 2}) == "balanced"
    assert trend_direction({"Positive": 3, "Negative": 0}) == "positive"


def test_empty_distribution_has_zero_percentages():
    shares = distribution_shares({"Positive": 0, "Neutral": 0, "Negative": 0})

    assert all(s.percentage == 0.0 for s in shares)
    assert sentiment_bar({}) == ""


def test_sentiment_bar_is_bounded():
    bar = sentiment_bar({"Positive": 50, "Neutral": 1, "Negative": 10}, max_len=20)

    assert "😐" in bar
    assert bar.count("😊") > bar.count("🙁")
    assert len(bar) <= 22  # rounding plus the one-emoji minimum per label


def test_response_rate_is_rounded_percentage():
    ctx = build_dashboard_context(_result(form_count=3))

    assert ctx.overview.response_rate == 67


def test_to_dict_includes_has_data():
    ctx = build_dashboard_context(compute_analytics([]))

    data = ctx.to_dict()

    assert data["overview"]["has_data"] is False
    assert ctx() == data
    assert data["recent_trends"] == []
    assert data["keywords"] == []
