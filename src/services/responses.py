"""
Spoken-response formatting.

Everything returned here is read aloud by the voice assistant, so sentences
are short and times use the 12-hour clock of the display timezone.
"""

from datetime import date, datetime, time
from zoneinfo import ZoneInfo

from core.config import DISPLAY_TIMEZONE
from models.events import CalendarEventDraft, CalendarEventRecord


def _to_local(moment: datetime | date, timezone: str) -> datetime:
    tz = ZoneInfo(timezone)
    if isinstance(moment, datetime):
        return moment.astimezone(tz) if moment.tzinfo else moment.replace(tzinfo=tz)
    # All-day events only have a date; read it as local midnight
    return datetime.combine(moment, time.min, tzinfo=tz)


def format_time(moment: datetime | date, timezone: str = DISPLAY_TIMEZONE) -> str:
    """Format as '9:05 AM' (platform-safe, no zero-padded hour)."""
    local = _to_local(moment, timezone)
    hour = local.hour % 12 or 12
    meridiem = "AM" if local.hour < 12 else "PM"
    return f"{hour}:{local.minute:02d} {meridiem}"


def format_date(moment: datetime | date, timezone: str = DISPLAY_TIMEZONE) -> str:
    """Format as 'Saturday, November 1'."""
    local = _to_local(moment, timezone)
    return f"{local.strftime('%A')}, {local.strftime('%B')} {local.day}"


def event_start(event: CalendarEventRecord) -> datetime | date:
    """Timed events start at an instant, all-day events on a date."""
    return event.start_instant if event.start_instant is not None else event.start_date


def format_event_list(
    events: list[CalendarEventRecord], date_context: str, timezone: str = DISPLAY_TIMEZONE
) -> str:
    """
    Render the events of one day as a single spoken paragraph.

    Example: "For today, you have 2 events. Standup at 9:00 AM. Lunch at 12:30 PM. "
    """
    if not events:
        return f"You have no events scheduled for {date_context}."

    noun = "event" if len(events) == 1 else "events"
    parts = [f"For {date_context}, you have {len(events)} {noun}. "]
    for event in events:
        parts.append(f"{event.title} at {format_time(event_start(event), timezone)}. ")
    return "".join(parts)


def format_created(draft: CalendarEventDraft, timezone: str = DISPLAY_TIMEZONE) -> str:
    date_str = format_date(draft.start_instant, timezone)
    time_str = format_time(draft.start_instant, timezone)
    return f'Added "{draft.title}" to your calendar for {date_str} at {time_str}.'


def format_cancelled(event: CalendarEventRecord, timezone: str = DISPLAY_TIMEZONE) -> str:
    return f'I\'ve cancelled "{event.title}" at {format_time(event_start(event), timezone)}.'


def format_no_match(search_title: str, date_context: str) -> str:
    return f'I couldn\'t find an event matching "{search_title}" for {date_context}.'
