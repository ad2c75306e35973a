"""
Event draft building and title matching.
"""

from datetime import timezone
from zoneinfo import ZoneInfo

from core.config import DEFAULT_EVENT_DURATION
from models.events import CalendarEventDraft, CalendarEventRecord, ParsedTemporalExpression


def build_draft(
    title: str, expression: ParsedTemporalExpression, timezone_label: str
) -> CalendarEventDraft:
    """
    Convert a title and its parsed time into an event creation payload.

    Events without an explicit end last DEFAULT_EVENT_DURATION (one hour).
    The title is passed through unchecked, even when empty.
    """
    tz = ZoneInfo(timezone_label)
    start = expression.start_instant.astimezone(tz)
    if expression.end_instant is not None:
        end = expression.end_instant.astimezone(tz)
    else:
        # Add in UTC so the duration stays exact across DST changes
        end = (start.astimezone(timezone.utc) + DEFAULT_EVENT_DURATION).astimezone(tz)

    return CalendarEventDraft(
        title=title,
        start_instant=start,
        end_instant=end,
        timezone_label=timezone_label,
    )


def titles_overlap(title: str, search_title: str) -> bool:
    """Bidirectional substring containment on the lowercased event title."""
    candidate = title.lower()
    return search_title in candidate or candidate in search_title


def find_match(
    events: list[CalendarEventRecord], search_title: str
) -> CalendarEventRecord | None:
    """
    Return the first event whose title overlaps the search title.

    Events are scanned in backend order (chronological), so when several
    titles overlap the earliest one wins.

    Untitled events are skipped on purpose, even though an empty string
    overlaps every title: cancelling "the event" should never delete a
    nameless placeholder. So an empty search title matches the first
    *titled* event, and a list of untitled events matches nothing.
    """
    for event in events:
        if event.title and titles_overlap(event.title, search_title):
            return event
    return None
