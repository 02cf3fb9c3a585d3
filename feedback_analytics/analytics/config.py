"""Configuration constants for the analytics engine."""
from __future__ import annotations

import os

# Granularity used when a request does not name one (day | week | month)
DEFAULT_GRANULARITY: str = os.getenv("ANALYTICS_DEFAULT_GRANULARITY", "day")

# Time zone used for calendar buckets and the heatmap grid
DEFAULT_TIMEZONE: str = os.getenv("ANALYTICS_DEFAULT_TIMEZONE", "UTC")

# Number of keywords returned for the word cloud
DEFAULT_TOP_KEYWORDS: int = int(os.getenv("ANALYTICS_TOP_KEYWORDS", "50"))

# Tokens shorter than this are never keywords
MIN_KEYWORD_LENGTH: int = int(os.getenv("ANALYTICS_MIN_KEYWORD_LENGTH", "3"))

# Articles, conjunctions, pronouns and other filler words
STOP_WORDS: frozenset[str] = frozenset(
    """
    a an the and or but nor so yet for of to in on at by with from into onto
    about above after before over under again further then once than too very
    i me my mine myself we us our ours ourselves you your yours yourself
    yourselves he him his himself she her hers herself it its itself they them
    their theirs themselves this that these those who whom whose which what
    am is are was were be been being have has had having do does did doing
    will would shall should can could may might must not no nor only own same
    just also there here when where why how all any both each few more most
    other some such out off up down as if because while until
    """.split()
)
