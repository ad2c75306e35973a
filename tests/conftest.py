"""
Pytest configuration and shared fixtures.
"""

import os
import sys
from datetime import datetime
from pathlib import Path
from zoneinfo import ZoneInfo

import pytest

# Deterministic configuration, set before core.config is imported
os.environ["DISPLAY_TIMEZONE"] = "Asia/Dubai"
os.environ["CALENDAR_ID"] = "primary"
os.environ["ASSISTANT_API_KEY"] = ""
os.environ["REQUEST_LOG_ENABLED"] = "false"
os.environ["CALENDAR_USER"] = ""
os.environ["MICROSOFT_GRAPH_TENANT_ID"] = ""
os.environ["MICROSOFT_GRAPH_APP_ID"] = ""
os.environ["MICROSOFT_GRAPH_CLIENT_SECRET"] = ""

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from core.errors import CalendarBackendError  # noqa: E402
from models.events import CalendarEventRecord, ParsedTemporalExpression  # noqa: E402
from services.assistant import AssistantContext  # noqa: E402

TIMEZONE = "Asia/Dubai"
TZ = ZoneInfo(TIMEZONE)


class FakeCalendar:
    """In-memory calendar backend recording every call."""

    def __init__(self, events=None, fail_on=None, error="network unreachable"):
        self.events = list(events or [])
        self.fail_on = set(fail_on or [])
        self.error = error
        self.list_calls = []
        self.inserted = []
        self.deleted = []

    def _maybe_fail(self, operation):
        if operation in self.fail_on:
            raise CalendarBackendError(self.error)

    async def list_events(self, calendar_id, time_min, time_max, single_events=True, order_by="startTime"):
        self.list_calls.append(
            {
                "calendar_id": calendar_id,
                "time_min": time_min,
                "time_max": time_max,
                "single_events": single_events,
                "order_by": order_by,
            }
        )
        self._maybe_fail("list")
        return list(self.events)

    async def insert_event(self, calendar_id, draft):
        self._maybe_fail("insert")
        self.inserted.append(draft)
        return CalendarEventRecord(id="new-1", title=draft.title, start_instant=draft.start_instant)

    async def delete_event(self, calendar_id, event_id):
        self._maybe_fail("delete")
        self.deleted.append(event_id)


class FakeParser:
    """Temporal parser returning preset expressions."""

    def __init__(self, expressions=None):
        self.expressions = list(expressions or [])
        self.calls = []

    def parse(self, text, reference=None):
        self.calls.append((text, reference))
        return list(self.expressions)


@pytest.fixture
def now():
    """Saturday 1 November 2025, 09:00 in Dubai."""
    return datetime(2025, 11, 1, 9, 0, tzinfo=TZ)


@pytest.fixture
def make_expression():
    """Factory for ParsedTemporalExpression in the display timezone."""

    def _make(matched_text, start, end=None):
        return ParsedTemporalExpression(
            matched_text=matched_text,
            start_instant=start.replace(tzinfo=TZ) if start.tzinfo is None else start,
            end_instant=(end.replace(tzinfo=TZ) if end is not None and end.tzinfo is None else end),
        )

    return _make


@pytest.fixture
def sample_events():
    """Events of Saturday 1 November 2025, in backend (chronological) order."""
    return [
        CalendarEventRecord(id="evt-1", title="Team Sync", start_instant=datetime(2025, 11, 1, 10, 0, tzinfo=TZ)),
        CalendarEventRecord(id="evt-2", title="Doctor", start_instant=datetime(2025, 11, 1, 15, 30, tzinfo=TZ)),
    ]


@pytest.fixture
def all_day_event():
    return CalendarEventRecord(id="evt-3", title="National Day", start_date=datetime(2025, 11, 1).date())


@pytest.fixture
def make_context():
    """Build an AssistantContext around fake collaborators."""

    def _make(calendar=None, expressions=None, parser=None):
        return AssistantContext(
            calendar=calendar if calendar is not None else FakeCalendar(),
            parser=parser if parser is not None else FakeParser(expressions),
            timezone=TIMEZONE,
            calendar_id="primary",
        )

    return _make
