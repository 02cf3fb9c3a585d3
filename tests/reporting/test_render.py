"""Unit tests for dashboard digest rendering."""
from __future__ import annotations

import datetime

import pytest

from feedback_analytics.analytics.engine import AnalyticsOptions, compute_analytics
from feedback_analytics.analytics.models import AnalyticsResult
from feedback_analytics.records import FeedbackRecord
from feedback_analytics.reporting.render import render_dashboard


def _sample_result() -> AnalyticsResult:
    docs = [
        {
            "_id": "a",
            "formId": "f1",
            "submittedAt": "2024-03-01T08:00:00Z",
            "responses": {"comment": "Great coffee, great music"},
            "sentiment": {"label": "Positive", "score": 0.9},
        },
        {
            "_id": "b",
            "formId": "f1",
            "submittedAt": "2024-03-02T09:00:00Z",
            "responses": {"comment": "Coffee was cold"},
            "sentiment": {"label": "Negative", "score": 0.2},
        },
    ]
    records = [FeedbackRecord.from_dict(d) for d in docs]
    return compute_analytics(records, AnalyticsOptions(form_count=1))


@pytest.fixture()
def result() -> AnalyticsResult:
    return _sample_result()


def test_render_dashboard_basic(result: AnalyticsResult):
    out = render_dashboard(result)

    assert "Total feedback: 2 (2 scored)" in out
    assert "Average rating: 2.8 / 5" in out
    assert "Response rate: 40%" in out
    assert "Positive: 1 (50.0%)" in out
    assert "Overall trend: balanced" in out
    assert "2024-03-02: 1 responses, rating 1.0" in out
    assert "• great (2)" in out
    assert "😊" in out and "🙁" in out


def test_render_dashboard_without_data():
    out = render_dashboard(compute_analytics([]))

    assert "Total feedback: 0 (0 scored)" in out
    assert "no scored feedback yet" in out
    assert "Response rate" not in out
    assert "Top keywords" not in out
    assert "Recent trend" not in out


def test_render_is_stable(result: AnalyticsResult):
    assert render_dashboard(result) == render_dashboard(result)


def test_render_mentions_granularity_and_zone():
    records = [
        FeedbackRecord(
            id="1",
            form_id="f",
            submitted_at=datetime.datetime(2024, 3, 1, tzinfo=datetime.timezone.utc),
        )
    ]
    out = render_dashboard(
        compute_analytics(records, AnalyticsOptions(granularity="week", timezone="Europe/Paris"))
    )

    assert "(week buckets, Europe/Paris)" in out
