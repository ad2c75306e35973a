#!/usr/bin/env python3
"""
List the calendars of the configured mailbox, to pick a CALENDAR_ID.

Usage:
    uv run python src/scripts/list_users_calendars.py [--user someone@example.com]
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.config import CALENDAR_USER
from core.graph_client import create_graph_client


async def list_calendars(user_id: str):
    """Print every calendar of one user."""
    graph = create_graph_client()

    print(f"Fetching calendars for {user_id}...\n")
    user = await graph.users.by_user_id(user_id).get()
    print(f"User: {user.display_name}")
    print(f"  Email: {user.user_principal_name}")
    print(f"  ID: {user.id}")

    default_calendar = await graph.users.by_user_id(user_id).calendar.get()
    calendars_response = await graph.users.by_user_id(user_id).calendars.get()
    calendars = calendars_response.value if calendars_response.value else []

    print(f"\nCalendars ({len(calendars)}):")
    print("-" * 80)
    for cal in calendars:
        marker = "  (default, CALENDAR_ID=primary)" if cal.id == default_calendar.id else ""
        print(f"  - {cal.name}{marker}")
        print(f"    ID: {cal.id}")
        if cal.can_edit is False:
            print("    Read-only")

    print("\nDone!")


def main():
    parser = argparse.ArgumentParser(description="List calendars of a mailbox")
    parser.add_argument(
        "--user",
        default=CALENDAR_USER,
        help="Mailbox UPN or id (defaults to CALENDAR_USER)",
    )
    args = parser.parse_args()

    if not args.user:
        print("Error: set CALENDAR_USER or pass --user")
        sys.exit(1)

    try:
        asyncio.run(list_calendars(args.user))
    except Exception as e:
        print(f"\nError: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
