"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.logging import RequestLog, safe_log_request
from api.models.responses import ErrorCodes, SiriResponse
from api.routes import assistant_router, health_router
from api.routes.assistant import get_client_ip
from core.config import API_DEBUG, API_VERSION
from services.assistant import GENERIC_FAILURE, INTERNAL_FAILURE, build_assistant_context

logger = logging.getLogger("voice_calendar.api")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown."""
    # Startup: build the shared, read-only assistant context once
    app.state.assistant = build_assistant_context()

    yield


app = FastAPI(
    title="Siri Calendar API",
    description="Create, query and cancel calendar events from voice assistant text",
    version=API_VERSION,
    debug=API_DEBUG,
    lifespan=lifespan,
)

# The voice caller reads siriResponse and ignores HTTP status codes
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


def _spoken(message: str, error: str) -> JSONResponse:
    return JSONResponse(
        status_code=200,
        content=SiriResponse(siri_response=message, error=error).model_dump(by_alias=True),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed bodies still get a spoken answer."""
    logger.warning("Invalid request to %s: %s", request.url.path, exc.errors())
    safe_log_request(
        RequestLog(
            endpoint=request.url.path,
            method=request.method,
            client_ip=get_client_ip(request),
            status_code=200,
            error_code=ErrorCodes.INVALID_REQUEST,
            error_message="Invalid request body",
            siri_response=GENERIC_FAILURE,
        )
    )
    return _spoken(GENERIC_FAILURE, "Invalid request body")


# Global exception handler for unexpected errors
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions with a spoken apology."""
    logger.exception("Unhandled error on %s", request.url.path)
    return _spoken(INTERNAL_FAILURE, "Internal server error")


# Include routers
app.include_router(health_router)
app.include_router(assistant_router)


# Entry point for uvicorn
if __name__ == "__main__":
    import uvicorn

    from core.config import API_HOST, API_PORT

    logging.basicConfig(level=logging.DEBUG if API_DEBUG else logging.INFO)
    uvicorn.run(
        "api.main:app",
        host=API_HOST,
        port=API_PORT,
        reload=API_DEBUG,
    )
