"""Turn a form submission into a scored :class:`FeedbackRecord`.

This is the step that runs *before* records reach the analytics engine. The
string answers of a submission are joined and scored once; if scoring fails
the record is still accepted, just unscored.
"""
from __future__ import annotations

import datetime
import logging
import uuid
from dataclasses import replace
from typing import Any, Callable, Mapping, Optional

from feedback_analytics.analysis.sentiment import analyze_sentiment
from feedback_analytics.records import FeedbackRecord, Sentiment, parse_timestamp

logger = logging.getLogger(__name__)

Scorer = Callable[[str], Sentiment]


def score_text(text: str, scorer: Scorer = analyze_sentiment) -> Optional[Sentiment]:
    """Return the sentiment of *text*, or ``None`` if blank or scoring failed."""
    if not text.strip():
        return None
    try:
        return scorer(text)
    except Exception as exc:  # noqa: BLE001 – keep going on failures
        logger.warning("Sentiment analysis failed, storing unscored: %s", exc)
        return None


def record_from_submission(
    payload: Mapping[str, Any],
    *,
    scorer: Scorer = analyze_sentiment,
    record_id: Optional[str] = None,
) -> FeedbackRecord:
    """Build a scored record from a submission ``payload``.

    Raises
    ------
    ValueError
        If ``formId`` or ``responses`` is missing.
    """
    form_id = payload.get("formId")
    responses = payload.get("responses")
    if not form_id or not isinstance(responses, Mapping) or not responses:
        raise ValueError("Form ID and responses are required")

    submitted_at = parse_timestamp(payload.get("submittedAt"))
    if submitted_at is None:
        submitted_at = datetime.datetime.now(datetime.timezone.utc)

    record = FeedbackRecord(
        id=record_id or uuid.uuid4().hex,
        form_id=str(form_id),
        submitted_at=submitted_at,
        responses=dict(responses),
    )
    sentiment = score_text(record.text_corpus(), scorer)

    logger.debug(
        "Ingested record %s form=%s scored=%s fields=%s",
        record.id,
        record.form_id,
        sentiment is not None,
        list(record.responses),
    )
    return replace(record, sentiment=sentiment)
