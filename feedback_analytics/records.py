"""Input model for the analytics engine.

A :class:`FeedbackRecord` is one stored form submission as handed over by the
storage layer. Records are read-only to the engine: every analytics function
accepts any iterable of them and never mutates it.

``FeedbackRecord.from_dict`` accepts the JSON document shape the storage layer
returns (``_id``/``id``, ``formId``, ``submittedAt``, ``responses``,
``sentiment``) and tolerates malformed fields by degrading them: an unparseable
timestamp becomes ``None`` ("unknown time") and an invalid sentiment payload
leaves the record unscored.
"""
from __future__ import annotations

import datetime
import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional

logger = logging.getLogger(__name__)


class SentimentLabel(str, Enum):
    """Enumeration of supported sentiment classes."""

    POSITIVE = "Positive"
    NEUTRAL = "Neutral"
    NEGATIVE = "Negative"

    @classmethod
    def parse(cls, raw: Any) -> "SentimentLabel":
        """Return the label matching *raw* case-insensitively.

        Raises
        ------
        ValueError
            If *raw* is not one of the known labels.
        """
        if isinstance(raw, cls):
            return raw
        if isinstance(raw, str):
            for label in cls:
                if label.value.lower() == raw.strip().lower():
                    return label
        raise ValueError(f"Unexpected sentiment label: {raw!r}")


@dataclass(frozen=True, slots=True)
class Sentiment:
    """Sentiment attached to a record by the ingestion path."""

    label: SentimentLabel
    score: float  # range 0.0 .. 1.0

    def __post_init__(self) -> None:
        score = self.score
        if isinstance(score, bool) or not isinstance(score, (int, float)):
            raise ValueError("Score missing or not numeric")
        if not math.isfinite(score) or not 0.0 <= score <= 1.0:
            raise ValueError(f"Score {score} outside [0, 1]")
        object.__setattr__(self, "label", SentimentLabel.parse(self.label))
        object.__setattr__(self, "score", float(score))

    def to_dict(self) -> Dict[str, Any]:
        return {"label": self.label.value, "score": self.score}

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Sentiment":
        """Build a :class:`Sentiment` from ``{"label": ..., "score": ...}``.

        Raises
        ------
        ValueError
            If the label is unknown or the score is not a number in [0, 1].
        """
        return cls(label=payload.get("label"), score=payload.get("score"))


def parse_timestamp(value: Any) -> Optional[datetime.datetime]:
    """Return *value* as a timezone-aware instant, or ``None`` if unusable.

    ISO-8601 strings (including a trailing ``Z``) and ``datetime`` objects are
    accepted. Naive values are taken to be UTC, which is how the storage layer
    writes ``submittedAt``.
    """
    if isinstance(value, datetime.datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        raw = value.strip()
        if raw.endswith(("Z", "z")):
            raw = raw[:-1] + "+00:00"
        try:
            parsed = datetime.datetime.fromisoformat(raw)
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=datetime.timezone.utc)
    return parsed


@dataclass(frozen=True, slots=True)
class FeedbackRecord:
    """One submitted feedback document."""

    id: str
    form_id: str
    submitted_at: Optional[datetime.datetime] = None
    responses: Mapping[str, Any] = field(default_factory=dict)
    sentiment: Optional[Sentiment] = None

    def __post_init__(self) -> None:
        # Naive instants are UTC, anything unparseable is unknown time
        object.__setattr__(self, "submitted_at", parse_timestamp(self.submitted_at))

    @property
    def is_scored(self) -> bool:  # noqa: D401 – property
        """Return *True* if the record carries a sentiment score."""
        return self.sentiment is not None

    def text_corpus(self) -> str:
        """Return all string-valued answers joined by a single space."""
        return " ".join(v for v in self.responses.values() if isinstance(v, str))

    @classmethod
    def from_dict(cls, doc: Mapping[str, Any]) -> "FeedbackRecord":
        """Build a record from a stored feedback document."""

        record_id = str(doc.get("id") or doc.get("_id") or "")
        submitted_at = parse_timestamp(doc.get("submittedAt"))
        if submitted_at is None and doc.get("submittedAt") is not None:
            logger.debug(
                "Record %s has unparseable submittedAt=%r", record_id, doc["submittedAt"]
            )

        responses = doc.get("responses")
        if not isinstance(responses, Mapping):
            responses = {}

        sentiment: Optional[Sentiment] = None
        raw_sentiment = doc.get("sentiment")
        if isinstance(raw_sentiment, Mapping):
            try:
                sentiment = Sentiment.from_dict(raw_sentiment)
            except ValueError as exc:
                logger.debug("Record %s treated as unscored: %s", record_id, exc)

        return cls(
            id=record_id,
            form_id=str(doc.get("formId") or ""),
            submitted_at=submitted_at,
            responses=dict(responses),
            sentiment=sentiment,
        )
