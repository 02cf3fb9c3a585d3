"""Aggregate feedback records into overview counters and sentiment stats."""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from feedback_analytics.analytics.models import Overview, SentimentStats
from feedback_analytics.records import FeedbackRecord

logger = logging.getLogger(__name__)

# Heuristic used by the dashboard's "response rate" card
RESPONSE_RATE_MULTIPLIER = 20


def aggregate(records: Iterable[FeedbackRecord]) -> SentimentStats:
    """Return the :class:`SentimentStats` of *records*.

    Unscored records raise ``count`` only, so the label counters may sum to
    less than ``count``.
    """
    stats = SentimentStats()
    for record in records:
        stats.add(record)
    return stats


def aggregate_chunks(chunks: Iterable[Iterable[FeedbackRecord]]) -> SentimentStats:
    """Aggregate each chunk separately and merge the partial results.

    Gives the same answer as :func:`aggregate` over the concatenated chunks;
    callers that need to stop early can check a cancellation signal between
    chunks themselves.
    """
    total = SentimentStats()
    for chunk in chunks:
        total = total.merge(aggregate(chunk))
    return total


def response_rate(total_feedback: int, form_count: int) -> float:
    """Return the dashboard's response-rate percentage, capped at 100."""
    return min(100.0, total_feedback / max(form_count, 1) * RESPONSE_RATE_MULTIPLIER)


def build_overview(
    records: Iterable[FeedbackRecord],
    stats: Optional[SentimentStats] = None,
    *,
    form_count: Optional[int] = None,
) -> Overview:
    """Build the overview counters for *records*.

    ``activeForms`` is the number of distinct forms that received at least
    one record. ``responseRate`` is only reported when *form_count* is given.
    """
    records = list(records)
    if stats is None:
        stats = aggregate(records)

    active_forms = len({r.form_id for r in records if r.form_id})
    rate = response_rate(stats.count, form_count) if form_count is not None else None

    logger.debug(
        "Overview: total=%d scored=%d forms=%d",
        stats.count,
        stats.scored_count,
        active_forms,
    )
    return Overview(
        total_feedback=stats.count,
        scored_feedback=stats.scored_count,
        average_sentiment_score=stats.average_score,
        active_forms=active_forms,
        response_rate=rate,
    )
