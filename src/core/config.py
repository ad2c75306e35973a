"""
Configuration constants and environment setup.
"""

import os
from datetime import timedelta
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# =============================================================================
# PATHS
# =============================================================================

PROJECT_ROOT = Path(__file__).parent.parent.parent
DB_PATH = PROJECT_ROOT / "data" / "db" / "voice-calendar.db"

# =============================================================================
# CALENDAR CONFIGURATION
# =============================================================================

# IANA zone used for day boundaries and everything read back to the caller
DISPLAY_TIMEZONE = os.environ.get("DISPLAY_TIMEZONE", "Asia/Dubai")

# Mailbox that owns the calendar (UPN or object id)
CALENDAR_USER = os.environ.get("CALENDAR_USER", "")

# "primary" addresses the user's default calendar
PRIMARY_CALENDAR = "primary"
CALENDAR_ID = os.environ.get("CALENDAR_ID", PRIMARY_CALENDAR)

DEFAULT_EVENT_DURATION = timedelta(hours=1)
EVENT_LIST_LIMIT = int(os.environ.get("EVENT_LIST_LIMIT", "100"))

# =============================================================================
# UTTERANCE PARSING
# =============================================================================

PARSER_LANGUAGES = tuple(
    lang.strip() for lang in os.environ.get("PARSER_LANGUAGES", "en").split(",") if lang.strip()
)

# Stripped from delete utterances before matching (whole words only)
SEARCH_ACTION_VERBS = ("cancel", "delete", "remove")

# =============================================================================
# MS GRAPH CREDENTIALS (from environment)
# =============================================================================

GRAPH_TENANT_ID = os.environ.get("MICROSOFT_GRAPH_TENANT_ID", "")
GRAPH_APP_ID = os.environ.get("MICROSOFT_GRAPH_APP_ID", "")
GRAPH_CLIENT_SECRET = os.environ.get("MICROSOFT_GRAPH_CLIENT_SECRET", "")

# =============================================================================
# API CONFIGURATION
# =============================================================================

ASSISTANT_API_KEY = os.environ.get("ASSISTANT_API_KEY", "")
API_HOST = os.environ.get("API_HOST", "0.0.0.0")
API_PORT = int(os.environ.get("PORT", os.environ.get("API_PORT", "3000")))
API_DEBUG = os.environ.get("API_DEBUG", "false").lower() == "true"
REQUEST_LOG_ENABLED = os.environ.get("REQUEST_LOG_ENABLED", "true").lower() == "true"
API_VERSION = "1.0.0"


def graph_credentials_configured() -> bool:
    """Check that every MS Graph credential and the calendar owner are set."""
    return all((GRAPH_TENANT_ID, GRAPH_APP_ID, GRAPH_CLIENT_SECRET, CALENDAR_USER))
