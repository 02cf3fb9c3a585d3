"""Command-line entry point for Feedback Analytics.

Reads a JSON array of stored feedback documents, runs the analytics engine
and prints either the serialized :class:`AnalyticsResult` or the Markdown
dashboard digest:

    feedback-analytics feedback.json --granularity week --timezone Europe/Berlin
"""
from __future__ import annotations

import argparse
import datetime
import json
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from dotenv import load_dotenv

from feedback_analytics.analytics.engine import AnalyticsOptions, compute_analytics
from feedback_analytics.analytics.models import Granularity
from feedback_analytics.exceptions import AnalyticsError
from feedback_analytics.records import FeedbackRecord
from feedback_analytics.reporting.render import render_dashboard

logger = logging.getLogger("feedback_analytics")


def _parse_bound(raw: str) -> datetime.date:
    """Accept ``YYYY-MM-DD`` (whole day) or a full ISO-8601 timestamp."""
    try:
        if "T" in raw or " " in raw:
            return datetime.datetime.fromisoformat(raw.replace("Z", "+00:00"))
        return datetime.date.fromisoformat(raw)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid date/time: {raw!r}") from exc


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="feedback-analytics",
        description="Compute dashboard analytics for stored feedback records.",
    )
    parser.add_argument("records", type=Path, help="JSON file with an array of records")
    parser.add_argument(
        "--granularity",
        choices=[g.value for g in Granularity],
        default=None,
        help="trend bucket size (default: ANALYTICS_DEFAULT_GRANULARITY or day)",
    )
    parser.add_argument("--start", type=_parse_bound, default=None)
    parser.add_argument("--end", type=_parse_bound, default=None)
    parser.add_argument("--timezone", default=None, help="IANA zone, e.g. Europe/Berlin")
    parser.add_argument("--top-keywords", type=int, default=None)
    parser.add_argument(
        "--form-count",
        type=int,
        default=None,
        help="number of forms owned by the requester (enables responseRate)",
    )
    parser.add_argument("--format", choices=["json", "markdown"], default="json")
    return parser


def load_records(path: Path) -> List[FeedbackRecord]:
    """Load feedback documents from *path*.

    Raises
    ------
    ValueError
        If the file does not contain a JSON array.
    """
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, list):
        raise ValueError(f"{path} must contain a JSON array of feedback records")
    records = [FeedbackRecord.from_dict(doc) for doc in data if isinstance(doc, dict)]
    skipped = len(data) - len(records)
    if skipped:
        logger.warning("Skipped %d non-object entries in %s", skipped, path)
    return records


def main(argv: Optional[Sequence[str]] = None) -> int:
    load_dotenv()
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=os.environ.get("ANALYTICS_LOG_LEVEL", "WARNING"),
    )

    args = build_parser().parse_args(argv)

    try:
        records = load_records(args.records)
        options = AnalyticsOptions.from_params(
            start=args.start,
            end=args.end,
            granularity=args.granularity,
            top_keywords=args.top_keywords,
            timezone=args.timezone,
            form_count=args.form_count,
        )
        result = compute_analytics(records, options)
    except (OSError, ValueError) as exc:
        # AnalyticsError and JSON decode errors are ValueErrors
        reason = "Invalid request" if isinstance(exc, AnalyticsError) else "Cannot load records"
        logger.error("%s: %s", reason, exc)
        return 2

    if args.format == "markdown":
        sys.stdout.write(render_dashboard(result))
    else:
        json.dump(result.to_dict(), sys.stdout, indent=2, ensure_ascii=False)
        sys.stdout.write("\n")
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
