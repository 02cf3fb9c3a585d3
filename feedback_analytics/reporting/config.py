"""Configuration constants for the dashboard presentation layer."""
from __future__ import annotations

import os

# Scores are stored in [0, 1]; the dashboard shows them on a 0–N rating scale
DISPLAY_SCALE: float = float(os.getenv("REPORT_DISPLAY_SCALE", "5"))

# Rating shown for trend buckets without any scored record
EMPTY_BUCKET_RATING: float = float(os.getenv("REPORT_EMPTY_BUCKET_RATING", "3.0"))

# Number of most recent trend buckets shown in the trend chart
RECENT_TREND_POINTS: int = int(os.getenv("REPORT_RECENT_TREND_POINTS", "6"))

# Maximum number of keywords listed in the Markdown digest
MAX_KEYWORDS: int = int(os.getenv("REPORT_MAX_KEYWORDS", "10"))

# Maximum length of the sentiment bar in the Markdown digest
MAX_SENTIMENT_BAR: int = int(os.getenv("REPORT_MAX_SENTIMENT_BAR", "20"))
