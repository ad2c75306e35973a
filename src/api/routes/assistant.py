"""Voice assistant endpoints: today, create, query and delete."""

import time
from collections.abc import Awaitable

from fastapi import APIRouter, Depends, Request

from api.dependencies import get_assistant_context, verify_api_key
from api.logging import RequestLog, safe_log_request
from api.models.responses import DateTextRequest, ErrorCodes, EventTextRequest, SiriResponse
from services.assistant import (
    AssistantContext,
    AssistantReply,
    cancel_event,
    create_event,
    query_events,
    todays_events,
)

router = APIRouter(prefix="/api", dependencies=[Depends(verify_api_key)])


def get_client_ip(request: Request) -> str:
    """Extract client IP from request, handling proxies."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


async def _respond(
    request: Request, input_text: str | None, operation: Awaitable[AssistantReply]
) -> SiriResponse:
    """Await an assistant operation, logging the request whatever happens."""
    start_time = time.time()
    request_log = RequestLog(
        endpoint=request.url.path,
        method=request.method,
        client_ip=get_client_ip(request),
        input_text=input_text,
        status_code=200,
    )

    try:
        reply = await operation
        request_log.error_code = reply.code
        request_log.error_message = reply.error
        request_log.siri_response = reply.siri_response
        return SiriResponse(siri_response=reply.siri_response, error=reply.error)

    except Exception as e:
        # Answered by the global handler, still with HTTP 200
        request_log.error_code = ErrorCodes.INTERNAL_ERROR
        request_log.error_message = str(e)
        raise

    finally:
        request_log.processing_time_ms = int((time.time() - start_time) * 1000)
        safe_log_request(request_log)


@router.get("/today", response_model=SiriResponse, response_model_exclude_none=True)
async def today_endpoint(
    request: Request,
    context: AssistantContext = Depends(get_assistant_context),
):
    """Read back today's events."""
    return await _respond(request, None, todays_events(context))


@router.post("/create", response_model=SiriResponse, response_model_exclude_none=True)
async def create_endpoint(
    request: Request,
    payload: EventTextRequest | None = None,
    context: AssistantContext = Depends(get_assistant_context),
):
    """Create an event from {"eventText": "lunch with Sam tomorrow at noon"}."""
    event_text = payload.event_text if payload else None
    return await _respond(request, event_text, create_event(context, event_text))


@router.post("/query", response_model=SiriResponse, response_model_exclude_none=True)
async def query_endpoint(
    request: Request,
    payload: DateTextRequest | None = None,
    context: AssistantContext = Depends(get_assistant_context),
):
    """List events for {"dateText": "next Friday"}."""
    date_text = payload.date_text if payload else None
    return await _respond(request, date_text, query_events(context, date_text))


@router.post("/delete", response_model=SiriResponse, response_model_exclude_none=True)
async def delete_endpoint(
    request: Request,
    payload: EventTextRequest | None = None,
    context: AssistantContext = Depends(get_assistant_context),
):
    """Cancel the event named in {"eventText": "cancel my dentist appointment"}."""
    event_text = payload.event_text if payload else None
    return await _respond(request, event_text, cancel_event(context, event_text))
