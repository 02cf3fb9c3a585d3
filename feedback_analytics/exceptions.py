"""Project-wide custom exception types."""


class AnalyticsError(ValueError):
    """Base class for caller errors reported by the analytics engine."""


class InvalidWindowError(AnalyticsError):
    """Raised when a requested time window starts after it ends."""

    def __init__(self, start, end) -> None:  # noqa: D401 – simple constructor
        super().__init__(f"Invalid window: start {start} is after end {end}.")
        self.start = start
        self.end = end


class InvalidTimezoneError(AnalyticsError):
    """Raised when the configured time zone identifier is not recognised."""

    def __init__(self, zone: str) -> None:  # noqa: D401 – simple constructor
        super().__init__(f"Unknown time zone: {zone!r}.")
        self.zone = zone
