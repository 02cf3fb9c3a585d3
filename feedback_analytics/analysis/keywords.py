"""Keyword frequencies for the dashboard word cloud."""
from __future__ import annotations

import re
from collections import Counter
from typing import AbstractSet, Iterable, Iterator, List

from feedback_analytics.analytics import config
from feedback_analytics.analytics.models import Keyword
from feedback_analytics.records import FeedbackRecord

# Runs of letters/digits in any script; underscores count as separators
_TOKEN_RE = re.compile(r"[^\W_]+")


def tokenize(
    text: str,
    *,
    stop_words: AbstractSet[str] = config.STOP_WORDS,
    min_length: int = config.MIN_KEYWORD_LENGTH,
) -> Iterator[str]:
    """Yield the lower-cased keyword tokens of *text* in order."""
    for token in _TOKEN_RE.findall(text.lower()):
        if len(token) >= min_length and token not in stop_words:
            yield token


def extract_keywords(
    records: Iterable[FeedbackRecord],
    *,
    top_n: int = config.DEFAULT_TOP_KEYWORDS,
    stop_words: AbstractSet[str] = config.STOP_WORDS,
    min_length: int = config.MIN_KEYWORD_LENGTH,
) -> List[Keyword]:
    """Return the *top_n* most frequent keywords across *records*.

    Only string answers are read. Ties keep the order in which the terms first
    appeared in *records*, so the result is identical for identical input.
    """
    if top_n <= 0:
        return []

    # Counter keeps first-insertion order and sorted() is stable.
    counts: Counter[str] = Counter()
    for record in records:
        counts.update(
            tokenize(record.text_corpus(), stop_words=stop_words, min_length=min_length)
        )

    ranked = sorted(counts.items(), key=lambda item: -item[1])
    return [Keyword(term=term, frequency=freq) for term, freq in ranked[:top_n]]
