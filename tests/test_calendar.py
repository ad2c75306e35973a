"""Tests for the MS Graph calendar backend."""

from datetime import date, datetime
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from msgraph.generated.models.date_time_time_zone import DateTimeTimeZone
from msgraph.generated.models.event import Event

from conftest import TIMEZONE, TZ
from core.errors import CalendarBackendError
from models.events import CalendarEventDraft
from services.calendar import (
    GraphCalendar,
    UnconfiguredCalendar,
    backend_error,
    build_graph_event,
    parse_event,
    parse_graph_datetime,
)


def page(events, next_link=None):
    """One Graph collection response."""
    return SimpleNamespace(value=events, odata_next_link=next_link)


def graph_event(event_id="evt-1", subject="Team Sync", start="2025-11-01T10:00:00.0000000", tz=TIMEZONE, all_day=False):
    return Event(
        id=event_id,
        subject=subject,
        start=DateTimeTimeZone(date_time=start, time_zone=tz),
        is_all_day=all_day,
    )


@pytest.fixture
def graph():
    """MagicMock standing in for the GraphServiceClient request-builder chain."""
    return MagicMock()


@pytest.fixture
def primary(graph):
    return graph.users.by_user_id.return_value.calendar


@pytest.fixture
def draft():
    return CalendarEventDraft(
        title="lunch with Sam",
        start_instant=datetime(2025, 11, 2, 12, 0, tzinfo=TZ),
        end_instant=datetime(2025, 11, 2, 13, 0, tzinfo=TZ),
        timezone_label=TIMEZONE,
    )


class TestTranslation:
    def test_graph_datetime_with_seven_fraction_digits(self):
        assert parse_graph_datetime("2025-11-01T10:00:00.1234567") == datetime(2025, 11, 1, 10, 0, 0, 123456)
        assert parse_graph_datetime("2025-11-01T10:00:00") == datetime(2025, 11, 1, 10, 0)

    def test_timed_event(self):
        record = parse_event(graph_event(), TIMEZONE)

        assert record.id == "evt-1"
        assert record.title == "Team Sync"
        assert record.start_instant == datetime(2025, 11, 1, 10, 0, tzinfo=TZ)
        assert record.start_date is None

    def test_utc_event(self):
        record = parse_event(graph_event(start="2025-11-01T06:00:00.0000000", tz="UTC"), TIMEZONE)

        assert record.start_instant.astimezone(TZ) == datetime(2025, 11, 1, 10, 0, tzinfo=TZ)

    def test_windows_zone_falls_back_to_display_zone(self):
        record = parse_event(graph_event(tz="Arabian Standard Time"), TIMEZONE)

        assert record.start_instant.utcoffset().total_seconds() == 4 * 3600

    def test_all_day_event_keeps_only_the_date(self):
        record = parse_event(graph_event(start="2025-12-02T00:00:00.0000000", all_day=True), TIMEZONE)

        assert record.is_all_day
        assert record.start_date == date(2025, 12, 2)
        assert record.start_instant is None

    def test_missing_subject_is_empty_title(self):
        assert parse_event(graph_event(subject=None), TIMEZONE).title == ""

    def test_missing_start_is_a_backend_error(self):
        with pytest.raises(CalendarBackendError):
            parse_event(Event(id="broken", subject="x"), TIMEZONE)

    def test_build_graph_event(self, draft):
        event = build_graph_event(draft)

        assert event.subject == "lunch with Sam"
        assert event.start.date_time == "2025-11-02T12:00:00"
        assert event.end.date_time == "2025-11-02T13:00:00"
        assert event.start.time_zone == TIMEZONE
        assert event.end.time_zone == TIMEZONE

    def test_backend_error_prefers_odata_message(self):
        error = Exception()
        error.error = SimpleNamespace(code="ErrorAccessDenied", message="Access is denied.")

        assert str(backend_error(error)) == "Access is denied."
        assert str(backend_error(TimeoutError("timed out"))) == "timed out"
        assert str(backend_error(ConnectionError())) == "ConnectionError"


class TestGraphCalendar:
    @pytest.mark.asyncio
    async def test_list_events_uses_calendar_view(self, graph, primary):
        primary.calendar_view.get = AsyncMock(
            return_value=page([graph_event(), graph_event("evt-2", "Doctor", "2025-11-01T15:30:00.0000000")])
        )
        calendar = GraphCalendar(graph, "owner@example.com", TIMEZONE, limit=50)

        events = await calendar.list_events(
            "primary",
            datetime(2025, 11, 1, 0, 0, tzinfo=TZ),
            datetime(2025, 11, 1, 23, 59, 59, 999000, tzinfo=TZ),
        )

        assert [e.title for e in events] == ["Team Sync", "Doctor"]
        graph.users.by_user_id.assert_called_with("owner@example.com")
        config = primary.calendar_view.get.call_args.kwargs["request_configuration"]
        assert config.query_parameters.start_date_time == "2025-11-01T00:00:00+04:00"
        assert config.query_parameters.end_date_time == "2025-11-01T23:59:59.999000+04:00"
        assert config.query_parameters.orderby == ["start/dateTime"]
        assert config.query_parameters.top == 50

    @pytest.mark.asyncio
    async def test_list_events_on_named_calendar(self, graph):
        named = graph.users.by_user_id.return_value.calendars.by_calendar_id.return_value
        named.calendar_view.get = AsyncMock(return_value=page(None))
        calendar = GraphCalendar(graph, "owner@example.com", TIMEZONE)

        events = await calendar.list_events(
            "AAMkAD-work",
            datetime(2025, 11, 1, 0, 0, tzinfo=TZ),
            datetime(2025, 11, 1, 23, 59, tzinfo=TZ),
        )

        assert events == []
        graph.users.by_user_id.return_value.calendars.by_calendar_id.assert_called_with("AAMkAD-work")

    @pytest.mark.asyncio
    async def test_list_events_without_expansion_filters_events(self, graph, primary):
        primary.events.get = AsyncMock(return_value=page([graph_event()]))
        calendar = GraphCalendar(graph, "owner@example.com", TIMEZONE)

        await calendar.list_events(
            "primary",
            datetime(2025, 11, 1, 0, 0, tzinfo=TZ),
            datetime(2025, 11, 1, 23, 59, 59, tzinfo=TZ),
            single_events=False,
        )

        config = primary.events.get.call_args.kwargs["request_configuration"]
        assert config.query_parameters.filter == (
            "start/dateTime ge '2025-10-31T20:00:00Z' and start/dateTime le '2025-11-01T19:59:59Z'"
        )

    @pytest.mark.asyncio
    async def test_list_events_follows_next_link(self, graph, primary):
        next_link = "https://graph.microsoft.com/v1.0/users/owner/calendar/calendarView?$skip=50"
        primary.calendar_view.get = AsyncMock(return_value=page([graph_event()], next_link))
        second_page = primary.calendar_view.with_url.return_value
        second_page.get = AsyncMock(return_value=page([graph_event("evt-2", "Doctor", "2025-11-01T15:30:00.0000000")]))
        calendar = GraphCalendar(graph, "owner@example.com", TIMEZONE)

        events = await calendar.list_events(
            "primary",
            datetime(2025, 11, 1, 0, 0, tzinfo=TZ),
            datetime(2025, 11, 1, 23, 59, tzinfo=TZ),
        )

        assert [e.id for e in events] == ["evt-1", "evt-2"]
        primary.calendar_view.with_url.assert_called_once_with(next_link)
        first_config = primary.calendar_view.get.call_args.kwargs["request_configuration"]
        assert second_page.get.call_args.kwargs["request_configuration"] is first_config

    @pytest.mark.asyncio
    async def test_unknown_order_is_rejected(self, graph):
        calendar = GraphCalendar(graph, "owner@example.com", TIMEZONE)

        with pytest.raises(ValueError):
            await calendar.list_events("primary", datetime(2025, 11, 1, tzinfo=TZ), datetime(2025, 11, 2, tzinfo=TZ), order_by="title")

    @pytest.mark.asyncio
    async def test_list_failure_becomes_backend_error(self, graph, primary):
        primary.calendar_view.get = AsyncMock(side_effect=ConnectionError("network unreachable"))
        calendar = GraphCalendar(graph, "owner@example.com", TIMEZONE)

        with pytest.raises(CalendarBackendError, match="network unreachable"):
            await calendar.list_events("primary", datetime(2025, 11, 1, tzinfo=TZ), datetime(2025, 11, 2, tzinfo=TZ))

    @pytest.mark.asyncio
    async def test_insert_event_posts_draft(self, graph, primary, draft):
        primary.events.post = AsyncMock(
            return_value=graph_event("new-1", "lunch with Sam", "2025-11-02T12:00:00.0000000")
        )
        calendar = GraphCalendar(graph, "owner@example.com", TIMEZONE)

        record = await calendar.insert_event("primary", draft)

        posted = primary.events.post.call_args.args[0]
        assert posted.subject == "lunch with Sam"
        assert posted.start.date_time == "2025-11-02T12:00:00"
        assert record.id == "new-1"

    @pytest.mark.asyncio
    async def test_insert_failure_becomes_backend_error(self, graph, primary, draft):
        primary.events.post = AsyncMock(side_effect=RuntimeError("quota exceeded"))
        calendar = GraphCalendar(graph, "owner@example.com", TIMEZONE)

        with pytest.raises(CalendarBackendError, match="quota exceeded"):
            await calendar.insert_event("primary", draft)

    @pytest.mark.asyncio
    async def test_delete_event(self, graph, primary):
        primary.events.by_event_id.return_value.delete = AsyncMock(return_value=None)
        calendar = GraphCalendar(graph, "owner@example.com", TIMEZONE)

        await calendar.delete_event("primary", "evt-2")

        primary.events.by_event_id.assert_called_with("evt-2")
        primary.events.by_event_id.return_value.delete.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_unconfigured_calendar_always_fails(self, draft):
        calendar = UnconfiguredCalendar()

        with pytest.raises(CalendarBackendError):
            await calendar.list_events("primary", datetime(2025, 11, 1, tzinfo=TZ), datetime(2025, 11, 2, tzinfo=TZ))
        with pytest.raises(CalendarBackendError):
            await calendar.insert_event("primary", draft)
        with pytest.raises(CalendarBackendError):
            await calendar.delete_event("primary", "evt-1")
