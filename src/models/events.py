"""
Data models for utterance resolution and calendar events.

All models are request-scoped and immutable.
"""

from dataclasses import dataclass
from datetime import date, datetime, timedelta


@dataclass(frozen=True)
class ParsedTemporalExpression:
    """One recognized date/time span within an utterance."""

    matched_text: str
    start_instant: datetime
    end_instant: datetime | None = None

    def __post_init__(self):
        if not self.matched_text:
            raise ValueError("matched_text must not be empty")
        if self.start_instant.tzinfo is None:
            raise ValueError("start_instant must be timezone-aware")
        if self.end_instant is not None and self.end_instant < self.start_instant:
            raise ValueError(
                f"end_instant {self.end_instant.isoformat()} is before "
                f"start_instant {self.start_instant.isoformat()}"
            )


@dataclass(frozen=True)
class DayRange:
    """Closed interval covering one calendar day in the display timezone."""

    range_start: datetime
    range_end: datetime

    def __post_init__(self):
        if not self.range_start < self.range_end:
            raise ValueError("range_start must be before range_end")


@dataclass(frozen=True)
class CalendarEventDraft:
    """Payload for event creation."""

    title: str
    start_instant: datetime
    end_instant: datetime
    timezone_label: str

    @property
    def duration(self) -> timedelta:
        return self.end_instant - self.start_instant


@dataclass(frozen=True)
class CalendarEventRecord:
    """
    Existing event as returned by the calendar backend.

    Timed events carry start_instant; all-day events carry only start_date.
    """

    id: str
    title: str
    start_instant: datetime | None = None
    start_date: date | None = None

    def __post_init__(self):
        if (self.start_instant is None) == (self.start_date is None):
            raise ValueError("exactly one of start_instant or start_date must be set")

    @property
    def is_all_day(self) -> bool:
        return self.start_date is not None
