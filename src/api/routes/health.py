"""Liveness and health check endpoints."""

from datetime import datetime, timezone

from fastapi import APIRouter
from fastapi.responses import JSONResponse, PlainTextResponse

from api.models.responses import HealthResponse
from core.config import API_VERSION, DISPLAY_TIMEZONE, graph_credentials_configured

router = APIRouter()


@router.get("/", response_class=PlainTextResponse)
async def root():
    return "Siri Calendar API is running"


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """
    Health check endpoint for monitoring.

    Returns 200 if calendar credentials are configured, 503 otherwise.
    """
    calendar_configured = graph_credentials_configured()
    timestamp = datetime.now(timezone.utc).isoformat()

    if calendar_configured:
        return HealthResponse(
            status="healthy",
            version=API_VERSION,
            calendar_configured=True,
            timezone=DISPLAY_TIMEZONE,
            timestamp=timestamp,
        )
    else:
        return JSONResponse(
            status_code=503,
            content=HealthResponse(
                status="unhealthy",
                version=API_VERSION,
                calendar_configured=False,
                timezone=DISPLAY_TIMEZONE,
                timestamp=timestamp,
                error="MS Graph credentials or CALENDAR_USER not configured",
            ).model_dump(),
        )
