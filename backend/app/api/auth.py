"""Caller identity dependency.

Stub bearer parsing: the token is the caller's user UUID. Requests with no
Authorization header run as the configured development user.
"""

import uuid
from typing import Annotated

from fastapi import Depends, Header, HTTPException, status

from backend.app.config import Settings, get_settings
from backend.app.db.context import RequestContext


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_context(
    settings: Annotated[Settings, Depends(get_settings)],
    authorization: Annotated[str | None, Header()] = None,
) -> RequestContext:
    """Extract request context from the Authorization header.

    Args:
        settings: Application settings (for the development user)
        authorization: Authorization header (``Bearer <user_uuid>``)

    Returns:
        RequestContext for the caller

    Raises:
        HTTPException: 401 if the header is present but malformed
    """
    if not authorization:
        return RequestContext(user_id=uuid.UUID(settings.dev_user_id))

    if not authorization.startswith("Bearer "):
        raise _unauthorized("Invalid authorization header format")

    token = authorization[7:].strip()
    try:
        return RequestContext(user_id=uuid.UUID(token))
    except ValueError as e:
        raise _unauthorized("Invalid bearer token (expected user UUID)") from e
