"""API Pydantic models."""

from .responses import (
    DateTextRequest,
    ErrorCodes,
    EventTextRequest,
    HealthResponse,
    SiriResponse,
)

__all__ = [
    "DateTextRequest",
    "ErrorCodes",
    "EventTextRequest",
    "HealthResponse",
    "SiriResponse",
]
