"""FastAPI dependencies for authentication and shared resources."""

import secrets

from fastapi import Header, HTTPException, Request, status

from core.config import ASSISTANT_API_KEY
from services.assistant import AssistantContext


async def verify_api_key(
    x_api_key: str | None = Header(default=None, alias="X-API-Key"),
) -> str | None:
    """
    Verify API key from X-API-Key header when ASSISTANT_API_KEY is set.

    Raises:
        HTTPException: 401 if a key is configured and the header does not match
    """
    if not ASSISTANT_API_KEY:
        return None

    # Use constant-time comparison to prevent timing attacks
    if not x_api_key or not secrets.compare_digest(x_api_key, ASSISTANT_API_KEY):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={
                "error": "Invalid or missing API key",
                "code": "UNAUTHORIZED",
                "details": [],
            },
        )

    return x_api_key


def get_assistant_context(request: Request) -> AssistantContext:
    """Return the context built once in the application lifespan."""
    return request.app.state.assistant
