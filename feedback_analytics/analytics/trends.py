"""Build per-bucket response and sentiment trends."""

from __future__ import annotations

import datetime
from typing import Iterable, List, Optional, Union

from feedback_analytics.analytics.aggregator import aggregate
from feedback_analytics.analytics.buckets import Bound, BucketGroup, bucket_records
from feedback_analytics.analytics.models import (
    Granularity,
    SentimentStats,
    TrendPoint,
    trend_series,
)
from feedback_analytics.records import FeedbackRecord

__all__ = [
    "build_trends",
    "merge_trend_stats",
    "trend_points",
    "trend_series",
]


def trend_points(groups: Iterable[BucketGroup]) -> List[TrendPoint]:
    """Return one :class:`TrendPoint` per bucket group, preserving order."""
    return [TrendPoint(bucket=g.bucket, stats=aggregate(g.records)) for g in groups]


def build_trends(
    records: Iterable[FeedbackRecord],
    granularity: Union[Granularity, str] = Granularity.DAY,
    *,
    start: Optional[Bound] = None,
    end: Optional[Bound] = None,
    tz: datetime.tzinfo = datetime.timezone.utc,
) -> List[TrendPoint]:
    """Bucket *records* and aggregate every bucket in one pass.

    Use :func:`trend_series` to turn the result into the two chart arrays.
    """
    return trend_points(bucket_records(records, granularity, start=start, end=end, tz=tz))


def merge_trend_stats(points: Iterable[TrendPoint]) -> SentimentStats:
    """Merge the stats of all *points* (equals aggregating their records)."""
    total = SentimentStats()
    for point in points:
        total = total.merge(point.stats)
    return total
