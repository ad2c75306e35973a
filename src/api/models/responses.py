"""Pydantic request and response models for API endpoints."""

from pydantic import BaseModel, ConfigDict, Field


class EventTextRequest(BaseModel):
    """Body of /api/create and /api/delete."""

    model_config = ConfigDict(populate_by_name=True)

    event_text: str | None = Field(default=None, alias="eventText")


class DateTextRequest(BaseModel):
    """Body of /api/query."""

    model_config = ConfigDict(populate_by_name=True)

    date_text: str | None = Field(default=None, alias="dateText")


class SiriResponse(BaseModel):
    """Spoken reply. Always returned with HTTP 200."""

    model_config = ConfigDict(populate_by_name=True)

    siri_response: str = Field(alias="siriResponse")
    error: str | None = None


class HealthResponse(BaseModel):
    """Health check response."""

    status: str  # "healthy" or "unhealthy"
    version: str
    calendar_configured: bool
    timezone: str
    timestamp: str  # ISO 8601 UTC
    error: str | None = None


class ErrorCodes:
    """
    Request-log codes for failures outside the assistant operations.

    Operation outcomes use the codes on core.errors.AssistantError.
    """

    INVALID_REQUEST = "INVALID_REQUEST"
    INTERNAL_ERROR = "INTERNAL_ERROR"
