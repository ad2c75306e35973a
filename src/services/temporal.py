"""
Temporal parsing and day-range calculation.

Wraps dateparser's free-text search and normalizes its matches into
ParsedTemporalExpression objects expressed in the display timezone.
"""

import re
from datetime import date, datetime, time
from typing import NamedTuple
from zoneinfo import ZoneInfo

from dateparser.search import search_dates

from core.config import DISPLAY_TIMEZONE, PARSER_LANGUAGES
from models.events import DayRange, ParsedTemporalExpression

END_OF_DAY = time(23, 59, 59, 999000)
TONIGHT_AT = time(22, 0)

# Text allowed between two matches for them to read as a single range
RANGE_CONNECTOR = re.compile(r"^\s*(?:-|–|to|until|till|through)\s*$", re.IGNORECASE)
BETWEEN_CONNECTOR = re.compile(r"^\s*and\s*$", re.IGNORECASE)
RANGE_PREFIX = re.compile(r"\b(from|between)\s+$", re.IGNORECASE)

# Words dateparser leaves outside a match: "next Friday", "on March 5th"
LEADING_MODIFIER = re.compile(
    r"\b(?:(?:on|at)\s+)?(?:(?:next|this|coming)\s+)?$", re.IGNORECASE
)
TONIGHT = re.compile(r"\btonight\b", re.IGNORECASE)
TIME_OF_DAY = re.compile(r"\d\s*[ap]\.?m\b|\d:\d{2}|\bnoon\b|\bmidnight\b", re.IGNORECASE)
BARE_MONTH = re.compile(
    r"^(?:in\s+)?(?:jan|feb|mar|apr|may|jun|jul|aug|sep|sept|oct|nov|dec)[a-z]*\.?$",
    re.IGNORECASE,
)


# =============================================================================
# DAY RANGE
# =============================================================================


def day_range(
    moment: datetime | date | None = None, timezone: str = DISPLAY_TIMEZONE
) -> DayRange:
    """
    Build the [00:00:00.000, 23:59:59.999] range of a local calendar day.

    Args:
        moment: Aware datetime (converted to the display timezone), naive
            datetime (read as local wall time), or a plain date. Defaults to now.
        timezone: IANA name of the display timezone.
    """
    tz = ZoneInfo(timezone)
    if moment is None:
        local_date = datetime.now(tz).date()
    elif isinstance(moment, datetime):
        local_date = (moment.astimezone(tz) if moment.tzinfo else moment).date()
    else:
        local_date = moment

    return DayRange(
        range_start=datetime.combine(local_date, time.min, tzinfo=tz),
        range_end=datetime.combine(local_date, END_OF_DAY, tzinfo=tz),
    )


# =============================================================================
# TEMPORAL PARSER
# =============================================================================


class _Span(NamedTuple):
    start: int
    end: int
    text: str
    moment: datetime


class TemporalParser:
    """Find date/time expressions in free text."""

    def __init__(self, timezone: str = DISPLAY_TIMEZONE, languages=PARSER_LANGUAGES):
        self.timezone = timezone
        self.languages = list(languages)
        self._tz = ZoneInfo(timezone)

    def parse(
        self, text: str, reference: datetime | None = None
    ) -> list[ParsedTemporalExpression]:
        """
        Parse every temporal expression in text, in order of appearance.

        Relative phrases ("tomorrow", "next Friday") resolve against reference,
        which defaults to the current instant. Text without any recognizable
        date yields an empty list.
        """
        if not text or not text.strip():
            return []

        if reference is None:
            reference = datetime.now(self._tz)

        # Same-length rewrite so match offsets still point into text
        search_text = TONIGHT.sub(lambda m: "today".ljust(len(m.group())), text)
        matches = search_dates(
            search_text,
            languages=self.languages,
            settings=self._settings(reference),
            strategy="ngram",
        )
        if not matches:
            return []

        spans = self._drop_bare_months(self._locate(text, search_text, matches))
        return self._join_ranges(text, spans)

    def _settings(self, reference: datetime) -> dict:
        """
        dateparser settings for one parse.

        Everything is computed in local wall time: the reference goes in naive
        and TIMEZONE stays UTC, so dateparser never compares a local clock
        reading with a UTC one. Matches without an explicit zone come back
        naive and are localized afterwards.
        """
        local_reference = reference.astimezone(self._tz) if reference.tzinfo else reference
        return {
            "TIMEZONE": "UTC",
            "PREFER_DATES_FROM": "future",
            "RELATIVE_BASE": local_reference.replace(tzinfo=None),
        }

    def _localize(self, moment: datetime) -> datetime:
        if moment.tzinfo is None:
            return moment.replace(tzinfo=self._tz)
        return moment.astimezone(self._tz)

    def _locate(
        self, text: str, search_text: str, matches: list[tuple[str, datetime]]
    ) -> list[_Span]:
        """Attach character offsets to each match, scanning left to right."""
        spans = []
        cursor = 0
        for matched, moment in matches:
            position = search_text.find(matched, cursor)
            if position < 0:
                position = search_text.find(matched)
            if position < 0 or not matched.strip():
                continue
            start, end = position, position + len(matched)
            cursor = end

            modifier = LEADING_MODIFIER.search(text, 0, start)
            if modifier:
                start = modifier.start()

            moment = self._localize(moment)
            for tonight in TONIGHT.finditer(text):
                if tonight.start() < end and start < tonight.end():
                    end = max(end, tonight.end())
                    if not TIME_OF_DAY.search(text, start, end):
                        moment = datetime.combine(moment.date(), TONIGHT_AT, tzinfo=self._tz)

            spans.append(_Span(start, end, text[start:end], moment))

        return sorted(spans, key=lambda span: span.start)

    @staticmethod
    def _drop_bare_months(spans: list[_Span]) -> list[_Span]:
        """A lone month name next to a real date is a word ("review with May tomorrow")."""
        specific = [span for span in spans if not BARE_MONTH.match(span.text)]
        return specific or spans

    def _join_ranges(self, text: str, spans: list[_Span]) -> list[ParsedTemporalExpression]:
        expressions = []
        index = 0
        while index < len(spans):
            current = spans[index]
            if index + 1 < len(spans):
                merged = _merge_range(text, current, spans[index + 1])
                if merged is not None:
                    expressions.append(merged)
                    index += 2
                    continue
            expressions.append(ParsedTemporalExpression(current.text, current.moment))
            index += 1
        return expressions


def _merge_range(text: str, first: _Span, second: _Span) -> ParsedTemporalExpression | None:
    """Merge "<first> to <second>" into one expression, or return None."""
    gap = text[first.end:second.start]
    prefix = RANGE_PREFIX.search(text[:first.start])

    if RANGE_CONNECTOR.match(gap):
        pass
    elif BETWEEN_CONNECTOR.match(gap) and prefix and prefix.group(1).lower() == "between":
        pass
    else:
        return None

    end = second.moment
    if end < first.moment:
        # "tomorrow from 2pm to 3pm": the bare end time resolves against today
        end = datetime.combine(first.moment.date(), end.timetz())
        if end < first.moment:
            return None

    start_index = prefix.start() if prefix else first.start
    return ParsedTemporalExpression(text[start_index:second.end], first.moment, end)
