"""Activity endpoints - listing, single and bulk create, quick edit, move, delete."""

import uuid
from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response, status
from pydantic import BaseModel, Field

from backend.app.api.auth import get_current_context
from backend.app.api.dependencies import get_trip_service
from backend.app.db.context import RequestContext
from backend.app.models.activity import (
    Activity,
    ActivityDraft,
    ActivityPage,
    ActivityPatch,
    Placement,
)
from backend.app.models.common import ActivityType
from backend.app.scheduling.service import TripService

router = APIRouter(prefix="/activities", tags=["activities"])


class MoveRequest(BaseModel):
    """Request body for POST /activities/move."""

    activity_id: uuid.UUID
    target_date: date


class BulkCreateRequest(BaseModel):
    """Request body for POST /activities/bulk."""

    activities: list[ActivityDraft] = Field(..., min_length=1)


@router.get("", response_model=ActivityPage)
def list_activities(
    trip_id: uuid.UUID,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    service: Annotated[TripService, Depends(get_trip_service)],
    on_date: Annotated[date | None, Query(alias="date")] = None,
    activity_type: Annotated[ActivityType | None, Query(alias="type")] = None,
    city: Annotated[str | None, Query(min_length=1)] = None,
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=100)] = 20,
) -> ActivityPage:
    """A trip's activities by date and start time, optionally filtered."""
    return service.list_activities(
        ctx,
        trip_id,
        on_date=on_date,
        activity_type=activity_type,
        city=city,
        page=page,
        limit=limit,
    )


@router.post("", response_model=Activity, status_code=status.HTTP_201_CREATED)
def create_activity(
    draft: ActivityDraft,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    service: Annotated[TripService, Depends(get_trip_service)],
) -> Activity:
    """Create an activity at the given times (no collision check)."""
    return service.create_activity(ctx, draft)


@router.post("/bulk", response_model=list[Activity], status_code=status.HTTP_201_CREATED)
def create_activities(
    request: BulkCreateRequest,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    service: Annotated[TripService, Depends(get_trip_service)],
) -> list[Activity]:
    """Create several activities; nothing is written if any one is rejected."""
    return service.create_activities(ctx, request.activities)


@router.post("/move", response_model=Placement)
def move_activity(
    request: MoveRequest,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    service: Annotated[TripService, Depends(get_trip_service)],
) -> Placement:
    """Move an activity to another day at the first free slot from day start."""
    return service.move_activity(ctx, request.activity_id, request.target_date)


@router.get("/{activity_id}", response_model=Activity)
def get_activity(
    activity_id: uuid.UUID,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    service: Annotated[TripService, Depends(get_trip_service)],
) -> Activity:
    return service.get_activity(ctx, activity_id)


@router.put("/{activity_id}", response_model=Activity)
def quick_edit_activity(
    activity_id: uuid.UUID,
    patch: ActivityPatch,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    service: Annotated[TripService, Depends(get_trip_service)],
) -> Activity:
    return service.quick_edit_activity(ctx, activity_id, patch)


@router.delete("/{activity_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_activity(
    activity_id: uuid.UUID,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    service: Annotated[TripService, Depends(get_trip_service)],
) -> Response:
    service.delete_activity(ctx, activity_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
