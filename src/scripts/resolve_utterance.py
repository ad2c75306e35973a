#!/usr/bin/env python3
"""
Show how an utterance is resolved, without touching the calendar.

Prints the temporal expressions found, the event title, the search key used
for cancellations and the draft that /api/create would send.

Usage:
    uv run python src/scripts/resolve_utterance.py "lunch with Sam tomorrow at noon"
    uv run python src/scripts/resolve_utterance.py --now 2025-11-01T09:00 "cancel standup"
"""

import argparse
import sys
from datetime import datetime
from pathlib import Path
from zoneinfo import ZoneInfo

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.config import DISPLAY_TIMEZONE, PARSER_LANGUAGES
from services.events import build_draft
from services.responses import format_date, format_time
from services.temporal import TemporalParser, day_range
from services.titles import extract_title, normalize_search_title


def main():
    parser = argparse.ArgumentParser(description="Resolve an utterance offline")
    parser.add_argument("utterance", help="Text as spoken to the assistant")
    parser.add_argument(
        "--now",
        help="Reference time (ISO 8601, local to --timezone). Defaults to now.",
    )
    parser.add_argument("--timezone", default=DISPLAY_TIMEZONE, help="Display timezone")
    args = parser.parse_args()

    tz = ZoneInfo(args.timezone)
    now = datetime.fromisoformat(args.now).replace(tzinfo=tz) if args.now else datetime.now(tz)

    expressions = TemporalParser(args.timezone, PARSER_LANGUAGES).parse(args.utterance, reference=now)

    print(f"Utterance: {args.utterance!r}")
    print(f"Reference: {now.isoformat()}")
    print(f"\nTemporal expressions ({len(expressions)}):")
    for expression in expressions:
        end = expression.end_instant.isoformat() if expression.end_instant else "-"
        print(f"  - {expression.matched_text!r}: {expression.start_instant.isoformat()} -> {end}")

    print(f"\nTitle:      {extract_title(args.utterance, expressions)!r}")
    print(f"Search key: {normalize_search_title(args.utterance, expressions)!r}")

    target = expressions[0].start_instant if expressions else now
    window = day_range(target, args.timezone)
    print(f"Day range:  {window.range_start.isoformat()} .. {window.range_end.isoformat()}")

    if expressions:
        draft = build_draft(extract_title(args.utterance, expressions), expressions[0], args.timezone)
        print(
            f"\nDraft: {draft.title!r} on {format_date(draft.start_instant, args.timezone)} "
            f"{format_time(draft.start_instant, args.timezone)}-{format_time(draft.end_instant, args.timezone)}"
        )
    else:
        print("\nNo date found: /api/create would answer that it couldn't understand the date.")


if __name__ == "__main__":
    main()
