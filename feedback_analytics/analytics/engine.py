"""Analytics engine facade.

``compute_analytics`` turns a snapshot of feedback records into the
:class:`AnalyticsResult` the dashboard consumes. It is a pure function of its
arguments: no module state is read or written and the record sequence is
never mutated, so it can be called concurrently with different inputs.

Request validation happens before any pass over the data. An unknown time
zone raises :class:`InvalidTimezoneError`, a window whose start lies after
its end raises :class:`InvalidWindowError`; neither produces partial output.
An empty or all-unscored record set is not an error and yields a zeroed
result.
"""
from __future__ import annotations

import logging
from concurrent.futures import Executor, wait
from dataclasses import dataclass, field
from typing import AbstractSet, Any, Callable, Iterable, List, Optional, Sequence, Tuple

from feedback_analytics.analysis.keywords import extract_keywords
from feedback_analytics.analytics import config
from feedback_analytics.analytics.aggregator import aggregate, build_overview
from feedback_analytics.analytics.buckets import (
    Bound,
    bucket_records,
    resolve_timezone,
    validate_window,
)
from feedback_analytics.analytics.heatmap import build_heatmap
from feedback_analytics.analytics.models import AnalyticsResult, Granularity
from feedback_analytics.analytics.trends import trend_points
from feedback_analytics.exceptions import AnalyticsError
from feedback_analytics.records import FeedbackRecord

__all__ = [
    "AnalyticsOptions",
    "AnalyticsEngine",
    "compute_analytics",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class AnalyticsOptions:
    """Per-request parameters of :func:`compute_analytics`."""

    start: Optional[Bound] = None
    end: Optional[Bound] = None
    granularity: Granularity = field(
        default_factory=lambda: Granularity(config.DEFAULT_GRANULARITY)
    )
    top_keywords: int = config.DEFAULT_TOP_KEYWORDS
    timezone: str = config.DEFAULT_TIMEZONE
    stop_words: AbstractSet[str] = config.STOP_WORDS
    # Number of forms owned by the requester; enables ``responseRate``
    form_count: Optional[int] = None

    @classmethod
    def from_params(cls, **params: Any) -> "AnalyticsOptions":
        """Build options from loosely typed request parameters.

        ``None`` values fall back to the defaults.

        Raises
        ------
        AnalyticsError
            If the granularity is unknown or ``top_keywords`` is negative.
        """
        clean = {k: v for k, v in params.items() if v is not None}
        if "granularity" in clean:
            try:
                clean["granularity"] = Granularity(str(clean["granularity"]).lower())
            except ValueError as exc:
                raise AnalyticsError(
                    f"Unknown granularity: {params['granularity']!r}"
                ) from exc
        if clean.get("top_keywords", 0) < 0:
            raise AnalyticsError("top_keywords must not be negative")
        return cls(**clean)


class AnalyticsEngine:
    """Stateless facade; *executor* optionally runs sub-computations in parallel."""

    def __init__(self, executor: Optional[Executor] = None) -> None:
        self._executor = executor

    def compute(
        self,
        records: Iterable[FeedbackRecord],
        options: Optional[AnalyticsOptions] = None,
    ) -> AnalyticsResult:
        return compute_analytics(records, options, executor=self._executor)


def _fan_out(
    executor: Optional[Executor], calls: Sequence[Tuple[Callable[..., Any], tuple, dict]]
) -> List[Any]:
    """Run *calls* and return their results in order.

    With an *executor* every submitted future is finished or cancelled before
    an error propagates.
    """
    if executor is None:
        return [fn(*args, **kwargs) for fn, args, kwargs in calls]
    futures = [executor.submit(fn, *args, **kwargs) for fn, args, kwargs in calls]
    try:
        return [future.result() for future in futures]
    finally:
        for future in futures:
            future.cancel()
        wait(futures)


def compute_analytics(
    records: Iterable[FeedbackRecord],
    options: Optional[AnalyticsOptions] = None,
    *,
    executor: Optional[Executor] = None,
) -> AnalyticsResult:
    """Compute every dashboard view for *records*.

    Overview, distribution and keywords cover all *records*. Trends and the
    heatmap cover the records with a timestamp inside the window, so both
    time views count the same records.
    """
    options = options or AnalyticsOptions()
    tz = resolve_timezone(options.timezone)
    granularity = Granularity(options.granularity)
    validate_window(options.start, options.end, tz)

    snapshot = list(records)
    logger.debug(
        "Computing analytics: records=%d granularity=%s timezone=%s",
        len(snapshot),
        granularity.value,
        options.timezone,
    )

    groups = bucket_records(
        snapshot, granularity, start=options.start, end=options.end, tz=tz
    )
    in_window = [r for g in groups for r in g.records]

    overall, keywords, trends, heatmap = _fan_out(
        executor,
        [
            (aggregate, (snapshot,), {}),
            (
                extract_keywords,
                (snapshot,),
                {"top_n": options.top_keywords, "stop_words": options.stop_words},
            ),
            (trend_points, (groups,), {}),
            (build_heatmap, (in_window, tz), {}),
        ],
    )
    overview = build_overview(snapshot, overall, form_count=options.form_count)

    result = AnalyticsResult(
        overview=overview,
        sentiment_distribution=overall.distribution(),
        trends=trends,
        keywords=keywords,
        heatmap=heatmap,
        granularity=granularity,
        timezone=options.timezone,
    )
    if not result.has_data:
        logger.info("No scored feedback among %d record(s)", overview.total_feedback)
    return result
