"""Sentiment scoring of submitted answers using OpenAI.

The ingestion path calls ``analyze_sentiment`` once per submission, before the
record is stored; the analytics engine only ever reads the stored result.

The prompt asks the model to respond *only* with a compact JSON payload to make
machine-parsing deterministic.
"""
from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict

from feedback_analytics.openai_client import chat_completion
from feedback_analytics.records import Sentiment, SentimentLabel

_logger = logging.getLogger(__name__)

_RESPONSE_RE = re.compile(r"\{[\s\S]*?\}")  # first JSON object in string


def _parse_response(content: str) -> Sentiment:
    """Extract a :class:`Sentiment` from the model's raw string response."""

    match = _RESPONSE_RE.search(content)
    if not match:
        raise ValueError("Model response did not contain a JSON object")

    try:
        payload: Dict[str, Any] = json.loads(match.group(0))
    except json.JSONDecodeError as exc:
        raise ValueError("Failed to parse JSON from model response") from exc

    label = SentimentLabel.parse(payload.get("label"))
    score = payload.get("score")
    if isinstance(score, bool) or not isinstance(score, (int, float)):
        raise ValueError("Score missing or not numeric")

    # clamp score into the stored range
    return Sentiment(label=label, score=max(0.0, min(1.0, float(score))))


_PROMPT_SYSTEM = (
    "You are a precise sentiment analysis assistant for customer feedback. "
    'Return ONLY a minified JSON like {"label":"Positive","score":0.8}.'
)


def analyze_sentiment(text: str, *, temperature: float = 0.0) -> Sentiment:
    """Classify *text* as Positive/Neutral/Negative with a score in [0, 1].

    Parameters
    ----------
    text
        Combined free-text answers of one submission.
    temperature
        Optional temperature forwarded to the model (default 0 for determinism).
    """

    messages = [
        {"role": "system", "content": _PROMPT_SYSTEM},
        {
            "role": "user",
            "content": (
                "Sentiment analysis request. Identify the sentiment label"
                " (Positive, Neutral or Negative) and a score between 0 and 1"
                " (0 = very negative, 1 = very positive).\n\nText:\n" + text
            ),
        },
    ]

    content = chat_completion(messages, temperature=temperature)
    _logger.debug("Sentiment model replied with %d chars", len(content))
    return _parse_response(content)
