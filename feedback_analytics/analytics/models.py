"""Data structures produced by the analytics engine."""

from __future__ import annotations

import datetime
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple

from feedback_analytics.records import FeedbackRecord, SentimentLabel


class Granularity(str, Enum):
    """Calendar unit of a trend bucket."""

    DAY = "day"
    WEEK = "week"
    MONTH = "month"


@dataclass(slots=True)
class SentimentStats:
    """Mergeable count/mean accumulator over a set of records.

    ``count`` covers every record, scored or not; the label counters and
    ``score_sum`` only cover scored records. Two accumulators built over
    disjoint subsets merge into the accumulator of their union, so overview,
    trend and heatmap values all come from this one primitive.
    """

    count: int = 0
    scored_count: int = 0
    score_sum: float = 0.0
    positive: int = 0
    neutral: int = 0
    negative: int = 0

    def add(self, record: FeedbackRecord) -> None:
        self.count += 1
        sentiment = record.sentiment
        if sentiment is None:
            return
        self.scored_count += 1
        self.score_sum += sentiment.score
        if sentiment.label is SentimentLabel.POSITIVE:
            self.positive += 1
        elif sentiment.label is SentimentLabel.NEUTRAL:
            self.neutral += 1
        elif sentiment.label is SentimentLabel.NEGATIVE:
            self.negative += 1

    def merge(self, other: "SentimentStats") -> "SentimentStats":
        """Return a new accumulator covering both *self* and *other*."""
        return SentimentStats(
            count=self.count + other.count,
            scored_count=self.scored_count + other.scored_count,
            score_sum=self.score_sum + other.score_sum,
            positive=self.positive + other.positive,
            neutral=self.neutral + other.neutral,
            negative=self.negative + other.negative,
        )

    __add__ = merge

    @property
    def average_score(self) -> float:
        """Mean score of scored records; ``0.0`` when none are scored."""
        if not self.scored_count:
            return 0.0
        return self.score_sum / self.scored_count

    def distribution(self) -> Dict[str, int]:
        return {
            SentimentLabel.POSITIVE.value: self.positive,
            SentimentLabel.NEUTRAL.value: self.neutral,
            SentimentLabel.NEGATIVE.value: self.negative,
        }


@dataclass(frozen=True, slots=True)
class TimeBucket:
    """Calendar interval ``[period_start, period_end)``."""

    period_start: datetime.date
    period_end: datetime.date
    label: str


@dataclass(frozen=True, slots=True)
class TrendPoint:
    """Per-bucket statistics; one entry per bucket, in chronological order."""

    bucket: TimeBucket
    stats: SentimentStats

    @property
    def count(self) -> int:
        return self.stats.count

    @property
    def average_score(self) -> float:
        return self.stats.average_score


@dataclass(frozen=True, slots=True)
class Keyword:
    term: str
    frequency: int

    def to_dict(self) -> Dict[str, Any]:
        return {"term": self.term, "frequency": self.frequency}


@dataclass(frozen=True, slots=True)
class Overview:
    """Headline counters shown at the top of the dashboard."""

    total_feedback: int
    scored_feedback: int
    average_sentiment_score: float
    active_forms: int
    response_rate: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalFeedback": self.total_feedback,
            "scoredFeedback": self.scored_feedback,
            "averageSentimentScore": self.average_sentiment_score,
            "activeForms": self.active_forms,
            "responseRate": self.response_rate,
        }


HeatmapGrid = Dict[Tuple[int, int], SentimentStats]


def trend_series(
    points: Sequence[TrendPoint],
) -> Tuple[List[Dict[str, Any]], List[Dict[str, Any]]]:
    """Split *points* into the ``(feedbackTrends, sentimentTrends)`` arrays.

    Both arrays are derived from the same points, so they always share
    length and bucket order.
    """
    feedback: List[Dict[str, Any]] = []
    sentiment: List[Dict[str, Any]] = []
    for point in points:
        date = point.bucket.period_start.isoformat()
        feedback.append({"date": date, "label": point.bucket.label, "count": point.count})
        sentiment.append(
            {"date": date, "label": point.bucket.label, "averageScore": point.average_score}
        )
    return feedback, sentiment


@dataclass(slots=True)
class AnalyticsResult:
    """Everything the dashboard needs for one query.

    ``trends`` is the single source for both legacy trend arrays emitted by
    :meth:`to_dict`, which keeps them index-aligned.
    """

    overview: Overview
    sentiment_distribution: Dict[str, int]
    trends: List[TrendPoint] = field(default_factory=list)
    keywords: List[Keyword] = field(default_factory=list)
    heatmap: HeatmapGrid = field(default_factory=dict)
    granularity: Granularity = Granularity.DAY
    timezone: str = "UTC"

    @property
    def has_data(self) -> bool:  # noqa: D401 – property
        """Return *True* if at least one record carried a sentiment score."""
        return self.overview.scored_feedback > 0

    def heatmap_cells(self) -> List[Dict[str, Any]]:
        return [
            {
                "dayOfWeek": day,
                "hourOfDay": hour,
                "count": stats.count,
                "averageScore": stats.average_score,
            }
            for (day, hour), stats in sorted(self.heatmap.items())
        ]

    def to_dict(self) -> Dict[str, Any]:  # noqa: D401 – simple helper
        """Return a JSON-ready ``dict`` with the dashboard's field names."""
        feedback_trends, sentiment_trends = trend_series(self.trends)
        return {
            "overview": self.overview.to_dict(),
            "sentimentDistribution": dict(self.sentiment_distribution),
            "feedbackTrends": feedback_trends,
            "sentimentTrends": sentiment_trends,
            "keywords": [k.to_dict() for k in self.keywords],
            "heatmap": self.heatmap_cells(),
            "granularity": self.granularity.value,
            "timezone": self.timezone,
        }
