"""
Assistant operations: today, create, query and delete.

Each operation runs the resolution pipeline for one utterance
(parse -> title/search key -> draft/match -> spoken sentence) and always
returns an AssistantReply. Errors from the taxonomy in core.errors are caught
here and turned into their spoken message.
"""

import logging
from dataclasses import dataclass
from datetime import datetime

from core.config import (
    CALENDAR_ID,
    CALENDAR_USER,
    DISPLAY_TIMEZONE,
    PARSER_LANGUAGES,
    graph_credentials_configured,
)
from core.errors import (
    AssistantError,
    BackendFailure,
    CalendarBackendError,
    MissingInput,
    NoMatchFound,
    UnparsableTemporal,
)
from services.calendar import CalendarBackend, GraphCalendar, UnconfiguredCalendar
from services.events import build_draft, find_match
from services.responses import (
    format_cancelled,
    format_created,
    format_date,
    format_event_list,
    format_no_match,
)
from services.temporal import TemporalParser, day_range
from services.titles import extract_title, normalize_search_title

logger = logging.getLogger("voice_calendar.assistant")

# =============================================================================
# SPOKEN MESSAGES
# =============================================================================

TODAY_BACKEND_FAILURE = "Sorry, I couldn't access your calendar right now."

CREATE_MISSING_INPUT = "Please provide event details."
CREATE_UNPARSABLE = "I couldn't understand the date and time for this event."
CREATE_BACKEND_FAILURE = "Sorry, I couldn't create the event right now."

QUERY_MISSING_INPUT = "Please specify which day you'd like to check."
QUERY_UNPARSABLE = "I couldn't understand which date you meant."
QUERY_BACKEND_FAILURE = "Sorry, I couldn't check your calendar right now."

DELETE_MISSING_INPUT = "Please specify which event you'd like to cancel."
DELETE_BACKEND_FAILURE = "Sorry, I couldn't cancel the event right now."

GENERIC_FAILURE = "Sorry, I couldn't process your request right now."
INTERNAL_FAILURE = "Sorry, something went wrong. Please try again later."


# =============================================================================
# CONTEXT AND REPLY
# =============================================================================


@dataclass(frozen=True)
class AssistantContext:
    """Read-only collaborators shared by every request."""

    calendar: CalendarBackend
    parser: TemporalParser
    timezone: str = DISPLAY_TIMEZONE
    calendar_id: str = CALENDAR_ID


@dataclass
class AssistantReply:
    """Outcome of one operation. error is for debugging, never spoken."""

    siri_response: str
    error: str | None = None
    code: str | None = None


def build_assistant_context() -> AssistantContext:
    """Build the context from configuration, once per process."""
    parser = TemporalParser(DISPLAY_TIMEZONE, PARSER_LANGUAGES)

    if not graph_credentials_configured():
        logger.warning("MS Graph credentials or CALENDAR_USER missing; calendar calls will fail")
        return AssistantContext(calendar=UnconfiguredCalendar(), parser=parser)

    from core.graph_client import create_graph_client

    calendar = GraphCalendar(create_graph_client(), CALENDAR_USER, DISPLAY_TIMEZONE)
    return AssistantContext(calendar=calendar, parser=parser)


def _reply_from_error(error: AssistantError) -> AssistantReply:
    return AssistantReply(siri_response=error.message, error=error.detail, code=error.code)


def _require_text(text: str | None, message: str) -> str:
    if text is None or not text.strip():
        raise MissingInput(message)
    return text.strip()


# =============================================================================
# OPERATIONS
# =============================================================================


async def _list_day(context: AssistantContext, moment, failure_message: str):
    window = day_range(moment, context.timezone)
    try:
        return await context.calendar.list_events(
            context.calendar_id,
            window.range_start,
            window.range_end,
            single_events=True,
            order_by="startTime",
        )
    except CalendarBackendError as e:
        logger.exception("Calendar API Error while listing events")
        raise BackendFailure(failure_message, detail=str(e)) from e


async def todays_events(
    context: AssistantContext, now: datetime | None = None
) -> AssistantReply:
    """Read back every event of the current day."""
    try:
        events = await _list_day(context, now, TODAY_BACKEND_FAILURE)
    except AssistantError as e:
        return _reply_from_error(e)

    return AssistantReply(
        siri_response=format_event_list(events, "today", context.timezone),
    )


async def create_event(
    context: AssistantContext, event_text: str | None, now: datetime | None = None
) -> AssistantReply:
    """
    Create an event from text such as "lunch with Sam tomorrow at noon".

    The first temporal expression sets the time; all matched temporal text is
    removed to form the title.
    """
    try:
        text = _require_text(event_text, CREATE_MISSING_INPUT)
        expressions = context.parser.parse(text, reference=now)
        if not expressions:
            raise UnparsableTemporal(CREATE_UNPARSABLE)

        title = extract_title(text, expressions)
        draft = build_draft(title, expressions[0], context.timezone)

        try:
            await context.calendar.insert_event(context.calendar_id, draft)
        except CalendarBackendError as e:
            logger.exception("Calendar API Error while creating %r", title)
            raise BackendFailure(CREATE_BACKEND_FAILURE, detail=str(e)) from e
    except AssistantError as e:
        return _reply_from_error(e)

    return AssistantReply(
        siri_response=format_created(draft, context.timezone),
    )


async def query_events(
    context: AssistantContext, date_text: str | None, now: datetime | None = None
) -> AssistantReply:
    """List the events of the day named in text such as "next Friday"."""
    try:
        text = _require_text(date_text, QUERY_MISSING_INPUT)
        expressions = context.parser.parse(text, reference=now)
        if not expressions:
            raise UnparsableTemporal(QUERY_UNPARSABLE)

        target = expressions[0].start_instant
        events = await _list_day(context, target, QUERY_BACKEND_FAILURE)
    except AssistantError as e:
        return _reply_from_error(e)

    return AssistantReply(
        siri_response=format_event_list(events, format_date(target, context.timezone), context.timezone),
    )


async def cancel_event(
    context: AssistantContext, event_text: str | None, now: datetime | None = None
) -> AssistantReply:
    """
    Delete the first event of the named day whose title overlaps the text.

    Without a recognizable date the search covers today.
    """
    try:
        text = _require_text(event_text, DELETE_MISSING_INPUT)
        expressions = context.parser.parse(text, reference=now)
        target = expressions[0].start_instant if expressions else now
        search_title = normalize_search_title(text, expressions)

        events = await _list_day(context, target, DELETE_BACKEND_FAILURE)
        match = find_match(events, search_title)
        if match is None:
            date_context = format_date(day_range(target, context.timezone).range_start, context.timezone)
            raise NoMatchFound(format_no_match(search_title, date_context))

        try:
            await context.calendar.delete_event(context.calendar_id, match.id)
        except CalendarBackendError as e:
            logger.exception("Calendar API Error while deleting event %s", match.id)
            raise BackendFailure(DELETE_BACKEND_FAILURE, detail=str(e)) from e
    except AssistantError as e:
        return _reply_from_error(e)

    return AssistantReply(
        siri_response=format_cancelled(match, context.timezone),
    )
