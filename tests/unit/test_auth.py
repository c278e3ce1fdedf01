"""Unit tests for the auth dependency."""

import uuid

import pytest
from fastapi import HTTPException

from backend.app.api.auth import get_current_context
from backend.app.config import Settings


@pytest.mark.asyncio
async def test_get_current_context_no_header_uses_dev_user() -> None:
    settings = Settings(dev_user_id="00000000-0000-0000-0000-0000000000aa")

    ctx = await get_current_context(settings=settings, authorization=None)

    assert ctx.user_id == uuid.UUID("00000000-0000-0000-0000-0000000000aa")


@pytest.mark.asyncio
async def test_get_current_context_bearer_user_id() -> None:
    user_id = uuid.uuid4()

    ctx = await get_current_context(settings=Settings(), authorization=f"Bearer {user_id}")

    assert ctx.user_id == user_id


@pytest.mark.asyncio
async def test_get_current_context_invalid_bearer_format() -> None:
    with pytest.raises(HTTPException) as exc_info:
        await get_current_context(settings=Settings(), authorization="NotBearer token")

    assert exc_info.value.status_code == 401
    assert "Invalid authorization header format" in exc_info.value.detail


@pytest.mark.asyncio
async def test_get_current_context_invalid_uuid() -> None:
    with pytest.raises(HTTPException) as exc_info:
        await get_current_context(settings=Settings(), authorization="Bearer not-a-uuid")

    assert exc_info.value.status_code == 401
    assert exc_info.value.headers == {"WWW-Authenticate": "Bearer"}
