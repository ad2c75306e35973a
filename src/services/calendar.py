"""
Calendar backend over MS Graph.

Lists, creates and deletes events on one calendar of one mailbox, translating
Graph Event models to and from our event records. Every failure surfaces as a
CalendarBackendError.
"""

import logging
from datetime import datetime, timezone
from typing import Protocol
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from msgraph import GraphServiceClient
from msgraph.generated.models.date_time_time_zone import DateTimeTimeZone
from msgraph.generated.models.event import Event
from msgraph.generated.users.item.calendar.calendar_view.calendar_view_request_builder import (
    CalendarViewRequestBuilder as PrimaryCalendarViewRequestBuilder,
)
from msgraph.generated.users.item.calendar.events.events_request_builder import (
    EventsRequestBuilder as PrimaryEventsRequestBuilder,
)
from msgraph.generated.users.item.calendars.item.calendar_view.calendar_view_request_builder import (
    CalendarViewRequestBuilder,
)
from msgraph.generated.users.item.calendars.item.events.events_request_builder import (
    EventsRequestBuilder,
)

from core.config import DISPLAY_TIMEZONE, EVENT_LIST_LIMIT, PRIMARY_CALENDAR
from core.errors import CalendarBackendError
from models.events import CalendarEventDraft, CalendarEventRecord

logger = logging.getLogger("voice_calendar.calendar")

GRAPH_ORDER_BY = {
    "startTime": ["start/dateTime"],
    "updated": ["lastModifiedDateTime"],
}


class CalendarBackend(Protocol):
    """Operations the assistant needs from a calendar service."""

    async def list_events(
        self,
        calendar_id: str,
        time_min: datetime,
        time_max: datetime,
        single_events: bool = True,
        order_by: str = "startTime",
    ) -> list[CalendarEventRecord]: ...

    async def insert_event(
        self, calendar_id: str, draft: CalendarEventDraft
    ) -> CalendarEventRecord: ...

    async def delete_event(self, calendar_id: str, event_id: str) -> None: ...


# =============================================================================
# GRAPH <-> RECORD TRANSLATION
# =============================================================================


def parse_graph_datetime(value: str) -> datetime:
    """Parse Graph's 'YYYY-MM-DDTHH:MM:SS.fffffff' (7 fractional digits) as naive."""
    head, _, fraction = value.partition(".")
    moment = datetime.fromisoformat(head)
    fraction = fraction.rstrip("Z")
    if fraction:
        moment = moment.replace(microsecond=int(fraction[:6].ljust(6, "0")))
    return moment


def _zone(name: str | None, default: str) -> ZoneInfo:
    try:
        return ZoneInfo(name or default)
    except (ZoneInfoNotFoundError, ValueError):
        # Windows zone names ("Arabian Standard Time") are not IANA keys
        return ZoneInfo(default)


def parse_event(event: Event, display_timezone: str = DISPLAY_TIMEZONE) -> CalendarEventRecord:
    """Parse an MS Graph event into a CalendarEventRecord."""
    if event.start is None or not event.start.date_time:
        raise CalendarBackendError(f"Event {event.id} has no start time")

    start = parse_graph_datetime(event.start.date_time)
    if event.is_all_day:
        return CalendarEventRecord(
            id=event.id or "",
            title=event.subject or "",
            start_date=start.date(),
        )

    return CalendarEventRecord(
        id=event.id or "",
        title=event.subject or "",
        start_instant=start.replace(tzinfo=_zone(event.start.time_zone, display_timezone)),
    )


def build_graph_event(draft: CalendarEventDraft) -> Event:
    """Convert a draft to an MS Graph Event with local wall times."""
    tz = ZoneInfo(draft.timezone_label)
    return Event(
        subject=draft.title,
        start=DateTimeTimeZone(
            date_time=draft.start_instant.astimezone(tz).strftime("%Y-%m-%dT%H:%M:%S"),
            time_zone=draft.timezone_label,
        ),
        end=DateTimeTimeZone(
            date_time=draft.end_instant.astimezone(tz).strftime("%Y-%m-%dT%H:%M:%S"),
            time_zone=draft.timezone_label,
        ),
    )


def backend_error(error: Exception) -> CalendarBackendError:
    """Wrap any SDK, auth or network exception, keeping the OData message if any."""
    odata_error = getattr(error, "error", None)
    message = getattr(odata_error, "message", None) or str(error) or type(error).__name__
    return CalendarBackendError(message)


# =============================================================================
# BACKENDS
# =============================================================================


class GraphCalendar:
    """MS Graph calendar of a single mailbox."""

    def __init__(
        self,
        graph: GraphServiceClient,
        user_id: str,
        timezone_label: str = DISPLAY_TIMEZONE,
        limit: int = EVENT_LIST_LIMIT,
    ):
        self.graph = graph
        self.user_id = user_id
        self.timezone = timezone_label
        self.limit = limit

    def _calendar(self, calendar_id: str):
        user = self.graph.users.by_user_id(self.user_id)
        if calendar_id == PRIMARY_CALENDAR:
            return user.calendar
        return user.calendars.by_calendar_id(calendar_id)

    def _view_configuration(self, calendar_id, time_min, time_max, order_by):
        builder = (
            PrimaryCalendarViewRequestBuilder
            if calendar_id == PRIMARY_CALENDAR
            else CalendarViewRequestBuilder
        )
        query_params = builder.CalendarViewRequestBuilderGetQueryParameters(
            start_date_time=time_min.isoformat(),
            end_date_time=time_max.isoformat(),
            orderby=GRAPH_ORDER_BY[order_by],
            top=self.limit,
        )
        config = builder.CalendarViewRequestBuilderGetRequestConfiguration(
            query_parameters=query_params
        )
        config.headers.add("Prefer", f'outlook.timezone="{self.timezone}"')
        return config

    def _events_configuration(self, calendar_id, time_min, time_max, order_by):
        builder = (
            PrimaryEventsRequestBuilder
            if calendar_id == PRIMARY_CALENDAR
            else EventsRequestBuilder
        )
        start_str = time_min.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
        end_str = time_max.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
        query_params = builder.EventsRequestBuilderGetQueryParameters(
            filter=f"start/dateTime ge '{start_str}' and start/dateTime le '{end_str}'",
            orderby=GRAPH_ORDER_BY[order_by],
            top=self.limit,
        )
        config = builder.EventsRequestBuilderGetRequestConfiguration(
            query_parameters=query_params
        )
        config.headers.add("Prefer", f'outlook.timezone="{self.timezone}"')
        return config

    async def list_events(
        self,
        calendar_id: str,
        time_min: datetime,
        time_max: datetime,
        single_events: bool = True,
        order_by: str = "startTime",
    ) -> list[CalendarEventRecord]:
        """
        Fetch events starting within [time_min, time_max].

        single_events expands recurring series into their occurrences
        (Graph calendarView); otherwise series masters are returned as-is.
        Follows @odata.nextLink until every page has been read.
        """
        if order_by not in GRAPH_ORDER_BY:
            raise ValueError(f"Unsupported order_by: {order_by}")

        calendar = self._calendar(calendar_id)
        try:
            if single_events:
                builder = calendar.calendar_view
                config = self._view_configuration(calendar_id, time_min, time_max, order_by)
            else:
                builder = calendar.events
                config = self._events_configuration(calendar_id, time_min, time_max, order_by)

            raw_events = []
            response = await builder.get(request_configuration=config)
            while response is not None:
                raw_events.extend(response.value or [])
                if not response.odata_next_link:
                    break
                # The next link already carries the query; only headers are reused
                response = await builder.with_url(response.odata_next_link).get(
                    request_configuration=config
                )

            events = [parse_event(event, self.timezone) for event in raw_events]
        except CalendarBackendError:
            raise
        except Exception as e:
            raise backend_error(e) from e

        logger.debug("Fetched %d events from calendar %s", len(events), calendar_id)
        return events

    async def insert_event(
        self, calendar_id: str, draft: CalendarEventDraft
    ) -> CalendarEventRecord:
        try:
            created = await self._calendar(calendar_id).events.post(build_graph_event(draft))
            if created is None:
                raise CalendarBackendError("Calendar returned no event after create")
            return parse_event(created, self.timezone)
        except CalendarBackendError:
            raise
        except Exception as e:
            raise backend_error(e) from e

    async def delete_event(self, calendar_id: str, event_id: str) -> None:
        try:
            await self._calendar(calendar_id).events.by_event_id(event_id).delete()
        except Exception as e:
            raise backend_error(e) from e


class UnconfiguredCalendar:
    """Stand-in used when Graph credentials are missing; every call fails."""

    reason = "Calendar credentials are not configured"

    async def list_events(self, calendar_id, time_min, time_max, single_events=True, order_by="startTime"):
        raise CalendarBackendError(self.reason)

    async def insert_event(self, calendar_id, draft):
        raise CalendarBackendError(self.reason)

    async def delete_event(self, calendar_id, event_id):
        raise CalendarBackendError(self.reason)
