"""SQLite request logging for API."""

import logging
import sqlite3
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path

from core.config import DB_PATH, REQUEST_LOG_ENABLED

logger = logging.getLogger("voice_calendar.api")


@dataclass
class RequestLog:
    """Captured request/response data for logging."""

    request_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    timestamp: str = field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )
    endpoint: str = ""
    method: str = ""
    client_ip: str | None = None
    input_text: str | None = None
    status_code: int = 0
    error_code: str | None = None
    error_message: str | None = None
    processing_time_ms: int = 0
    siri_response: str | None = None


def log_request(log: RequestLog, db_path: Path = DB_PATH) -> None:
    """Write request log to SQLite database."""
    conn = sqlite3.connect(db_path)
    try:
        conn.execute(
            """
            INSERT INTO api_requests (
                request_id, timestamp, endpoint, method, client_ip,
                input_text, status_code, error_code, error_message,
                processing_time_ms, siri_response
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """,
            (
                log.request_id,
                log.timestamp,
                log.endpoint,
                log.method,
                log.client_ip,
                log.input_text,
                log.status_code,
                log.error_code,
                log.error_message,
                log.processing_time_ms,
                log.siri_response,
            ),
        )
        conn.commit()
    finally:
        conn.close()


def safe_log_request(log: RequestLog) -> None:
    """Log the request without ever failing the response."""
    if not REQUEST_LOG_ENABLED:
        return
    try:
        log_request(log)
    except (sqlite3.Error, OSError) as e:
        logger.warning("Could not write request log %s: %s", log.request_id, e)
