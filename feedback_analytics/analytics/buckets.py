"""Group timestamped records into contiguous calendar buckets.

Buckets are calendar days, ISO weeks (Monday first) or months in one explicit
time zone. Every bucket between the first and the last is materialized, even
when no record falls into it, so trend charts never have silent gaps.

Assignment uses half-open intervals ``[period_start, period_end)`` on local
calendar dates: a record submitted exactly at local midnight on a boundary
belongs to the later bucket.
"""
from __future__ import annotations

import datetime
import logging
from typing import Iterable, List, NamedTuple, Optional, Tuple, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from feedback_analytics.analytics.models import Granularity, TimeBucket
from feedback_analytics.exceptions import InvalidTimezoneError, InvalidWindowError
from feedback_analytics.records import FeedbackRecord

logger = logging.getLogger(__name__)

Bound = Union[datetime.date, datetime.datetime]

_UTC = datetime.timezone.utc


class BucketGroup(NamedTuple):
    bucket: TimeBucket
    records: List[FeedbackRecord]


def resolve_timezone(name: str) -> datetime.tzinfo:
    """Return the tzinfo for IANA zone *name*.

    Raises
    ------
    InvalidTimezoneError
        If *name* is not a known zone identifier.
    """
    if not isinstance(name, str) or not name.strip():
        raise InvalidTimezoneError(str(name))
    try:
        return ZoneInfo(name.strip())
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise InvalidTimezoneError(name) from exc


def bucket_start(day: datetime.date, granularity: Granularity) -> datetime.date:
    """Return the first day of the bucket containing *day*."""
    if granularity is Granularity.DAY:
        return day
    if granularity is Granularity.WEEK:
        return day - datetime.timedelta(days=day.weekday())
    return day.replace(day=1)


def next_bucket_start(start: datetime.date, granularity: Granularity) -> datetime.date:
    if granularity is Granularity.DAY:
        return start + datetime.timedelta(days=1)
    if granularity is Granularity.WEEK:
        return start + datetime.timedelta(days=7)
    if start.month == 12:
        return datetime.date(start.year + 1, 1, 1)
    return datetime.date(start.year, start.month + 1, 1)


def bucket_label(start: datetime.date, granularity: Granularity) -> str:
    if granularity is Granularity.DAY:
        return start.isoformat()
    if granularity is Granularity.WEEK:
        iso_year, iso_week, _ = start.isocalendar()
        return f"{iso_year}-W{iso_week:02d}"
    return f"{start:%Y-%m}"


def generate_buckets(
    first_day: datetime.date, last_day: datetime.date, granularity: Granularity
) -> List[TimeBucket]:
    """Return the contiguous buckets covering ``[first_day, last_day]``."""
    buckets: List[TimeBucket] = []
    current = bucket_start(first_day, granularity)
    while current <= last_day:
        following = next_bucket_start(current, granularity)
        buckets.append(
            TimeBucket(
                period_start=current,
                period_end=following,
                label=bucket_label(current, granularity),
            )
        )
        current = following
    return buckets


# ---------------------------------------------------------------------------
# Window handling
# ---------------------------------------------------------------------------


def _lower_bound(value: Bound, tz: datetime.tzinfo) -> datetime.datetime:
    if isinstance(value, datetime.datetime):
        return value if value.tzinfo is not None else value.replace(tzinfo=tz)
    return datetime.datetime.combine(value, datetime.time.min, tzinfo=tz)


def _upper_bound(value: Bound, tz: datetime.tzinfo) -> Tuple[datetime.datetime, bool]:
    """Return ``(instant, inclusive)`` for the window end *value*.

    A date covers its whole local day, so it maps to the next local midnight,
    excluded.
    """
    if isinstance(value, datetime.datetime):
        return _lower_bound(value, tz), True
    following = value + datetime.timedelta(days=1)
    return datetime.datetime.combine(following, datetime.time.min, tzinfo=tz), False


def validate_window(
    start: Optional[Bound], end: Optional[Bound], tz: datetime.tzinfo = _UTC
) -> None:
    """Raise :class:`InvalidWindowError` if *start* lies after *end*."""
    if start is None or end is None:
        return
    lower = _lower_bound(start, tz)
    upper, inclusive = _upper_bound(end, tz)
    if lower > upper or (not inclusive and lower >= upper):
        raise InvalidWindowError(start, end)


def bucket_records(
    records: Iterable[FeedbackRecord],
    granularity: Union[Granularity, str] = Granularity.DAY,
    *,
    start: Optional[Bound] = None,
    end: Optional[Bound] = None,
    tz: datetime.tzinfo = _UTC,
) -> List[BucketGroup]:
    """Assign every in-window, timestamped record to exactly one bucket.

    Missing window bounds are derived from the earliest/latest timestamps and
    rounded outward to bucket boundaries. Without bounds and without any
    timestamped record the result is empty.

    Raises
    ------
    InvalidWindowError
        If *start* lies after *end*.
    """
    granularity = Granularity(granularity)
    validate_window(start, end, tz)

    timed = [r for r in records if r.submitted_at is not None]
    if start is None and end is None and not timed:
        return []

    lower = _lower_bound(start, tz) if start is not None else None
    upper, inclusive = _upper_bound(end, tz) if end is not None else (None, True)

    if timed:
        if lower is None:
            lower = min(r.submitted_at for r in timed)
            if upper is not None and (lower > upper or (not inclusive and lower >= upper)):
                lower = _lower_bound(end, tz)
        if upper is None:
            upper = max(r.submitted_at for r in timed)
            if upper < lower:
                upper = lower
    if lower is None:
        lower = _lower_bound(end, tz)
    if upper is None:
        upper, inclusive = lower, True

    last_instant = upper if inclusive else upper - datetime.timedelta(microseconds=1)
    first_day = lower.astimezone(tz).date()
    last_day = last_instant.astimezone(tz).date()

    buckets = generate_buckets(first_day, last_day, granularity)
    index = {b.period_start: i for i, b in enumerate(buckets)}
    groups: List[List[FeedbackRecord]] = [[] for _ in buckets]

    excluded = 0
    for record in timed:
        ts = record.submitted_at
        if ts < lower or (ts > upper if inclusive else ts >= upper):
            excluded += 1
            continue
        day = ts.astimezone(tz).date()
        groups[index[bucket_start(day, granularity)]].append(record)

    if excluded:
        logger.debug("Excluded %d record(s) outside the window", excluded)

    return [BucketGroup(b, g) for b, g in zip(buckets, groups)]
