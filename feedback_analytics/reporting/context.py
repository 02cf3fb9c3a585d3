"""Context dataclass for rendering the analytics dashboard digest.

This module defines ``DashboardContext``, a typed container holding the
display values expected by ``templates/dashboard.md.j2``. All presentation
transforms live here: the 0–5 rating scale, distribution percentages, the
overall trend direction, the recent-trend window and the response-rate card.
The engine's :class:`AnalyticsResult` stays in raw units.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

from feedback_analytics.analytics.models import AnalyticsResult
from feedback_analytics.records import SentimentLabel
from feedback_analytics.reporting import config

__all__ = [
    "DashboardOverview",
    "DistributionShare",
    "RecentTrend",
    "DashboardContext",
    "build_dashboard_context",
]


@dataclass(slots=True)
class DashboardOverview:
    """Headline cards."""

    total_feedback: int
    scored_feedback: int
    average_rating: float
    satisfaction: int
    active_forms: int
    response_rate: Optional[int] = None

    @property
    def has_data(self) -> bool:
        return self.scored_feedback > 0


@dataclass(slots=True)
class DistributionShare:
    label: str
    count: int
    percentage: float


@dataclass(slots=True)
class RecentTrend:
    label: str
    responses: int
    rating: float


@dataclass(slots=True)
class DashboardContext:
    """Container with all fields used by the dashboard template."""

    overview: DashboardOverview
    distribution: List[DistributionShare]
    trend_direction: str
    sentiment_bar: str = ""
    recent_trends: List[RecentTrend] = field(default_factory=list)
    keywords: List[Dict[str, Any]] = field(default_factory=list)
    granularity: str = "day"
    timezone: str = "UTC"
    display_scale: float = config.DISPLAY_SCALE

    def to_dict(self) -> Dict[str, Any]:  # noqa: D401 – simple helper
        """Return a *plain* ``dict`` (recursively) for Jinja rendering."""
        data = asdict(self)
        # asdict() drops properties; the template needs has_data
        data["overview"]["has_data"] = self.overview.has_data
        return data

    # Alias for convenience (e.g. template kwargs)
    __call__ = to_dict


# ---------------------------------------------------------------------------
# Local helper functions
# ---------------------------------------------------------------------------
def sentiment_bar(counts: Dict[str, int], max_len: int = 20) -> str:
    """Return a bar of emojis proportional to the label *counts*.

    Positive → 😊, Neutral → 😐, Negative → 🙁. Every non-zero label gets at
    least one emoji.
    """

    pos = counts.get(SentimentLabel.POSITIVE.value, 0)
    neu = counts.get(SentimentLabel.NEUTRAL.value, 0)
    neg = counts.get(SentimentLabel.NEGATIVE.value, 0)
    total = pos + neu + neg
    if not total:
        return ""

    scale = max_len / total
    pos_e = "😊" * max(1 if pos else 0, round(pos * scale))
    neu_e = "😐" * max(1 if neu else 0, round(neu * scale))
    neg_e = "🙁" * max(1 if neg else 0, round(neg * scale))
    return pos_e + neu_e + neg_e


def distribution_shares(counts: Dict[str, int]) -> List[DistributionShare]:
    """Return one share per label; percentages are of scored records."""
    total = sum(counts.values())
    return [
        DistributionShare(
            label=label.value,
            count=counts.get(label.value, 0),
            percentage=(counts.get(label.value, 0) / total * 100) if total else 0.0,
        )
        for label in SentimentLabel
    ]


def trend_direction(counts: Dict[str, int]) -> str:
    pos = counts.get(SentimentLabel.POSITIVE.value, 0)
    neg = counts.get(SentimentLabel.NEGATIVE.value, 0)
    if pos > neg:
        return "positive"
    if pos < neg:
        return "negative"
    return "balanced"


def recent_trends(
    result: AnalyticsResult, *, limit: int = config.RECENT_TREND_POINTS
) -> List[RecentTrend]:
    """Return the last *limit* trend buckets on the display scale."""
    points = result.trends[-limit:] if limit > 0 else []
    return [
        RecentTrend(
            label=p.bucket.label,
            responses=p.count,
            rating=(
                p.average_score * config.DISPLAY_SCALE
                if p.stats.scored_count
                else config.EMPTY_BUCKET_RATING
            ),
        )
        for p in points
    ]


# ---------------------------------------------------------------------------
# Conversion helper
# ---------------------------------------------------------------------------
def build_dashboard_context(result: AnalyticsResult) -> DashboardContext:
    """Convert an :class:`AnalyticsResult` into :class:`DashboardContext`.

    The function is *pure* – it does not mutate *result*.
    """

    ov = result.overview
    overview = DashboardOverview(
        total_feedback=ov.total_feedback,
        scored_feedback=ov.scored_feedback,
        average_rating=ov.average_sentiment_score * config.DISPLAY_SCALE,
        satisfaction=round(ov.average_sentiment_score * 100),
        active_forms=ov.active_forms,
        response_rate=round(ov.response_rate) if ov.response_rate is not None else None,
    )

    counts = result.sentiment_distribution
    return DashboardContext(
        overview=overview,
        distribution=distribution_shares(counts),
        trend_direction=trend_direction(counts),
        sentiment_bar=sentiment_bar(counts, config.MAX_SENTIMENT_BAR),
        recent_trends=recent_trends(result),
        keywords=[k.to_dict() for k in result.keywords[: config.MAX_KEYWORDS]],
        granularity=result.granularity.value,
        timezone=result.timezone,
    )
