"""Trip endpoints - CRUD, collaborators and itinerary view."""

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel

from backend.app.api.auth import get_current_context
from backend.app.api.dependencies import get_trip_service
from backend.app.db.context import RequestContext
from backend.app.models.itinerary import Itinerary
from backend.app.models.trip import Collaborator, Trip, TripDraft, TripPage, TripPatch
from backend.app.scheduling.service import TripService

router = APIRouter(prefix="/trips", tags=["trips"])


class DeleteTripResponse(BaseModel):
    """Response for DELETE /trips/{trip_id}."""

    trip_id: uuid.UUID
    activities_removed: int


@router.post("", response_model=Trip, status_code=status.HTTP_201_CREATED)
def create_trip(
    draft: TripDraft,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    service: Annotated[TripService, Depends(get_trip_service)],
) -> Trip:
    """Create a trip owned by the caller."""
    return service.create_trip(ctx, draft)


@router.get("", response_model=TripPage)
def list_trips(
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    service: Annotated[TripService, Depends(get_trip_service)],
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=100)] = 10,
) -> TripPage:
    """Trips owned by the caller, latest start date first."""
    return service.list_trips(ctx, page=page, limit=limit)


@router.get("/{trip_id}", response_model=Trip)
def get_trip(
    trip_id: uuid.UUID,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    service: Annotated[TripService, Depends(get_trip_service)],
) -> Trip:
    return service.get_trip(ctx, trip_id)


@router.put("/{trip_id}", response_model=Trip)
def update_trip(
    trip_id: uuid.UUID,
    patch: TripPatch,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    service: Annotated[TripService, Depends(get_trip_service)],
) -> Trip:
    """Update name or dates (owner only).

    New dates must still contain every destination.
    """
    return service.update_trip(ctx, trip_id, patch)


@router.post("/{trip_id}/collaborators", response_model=Trip)
def add_collaborator(
    trip_id: uuid.UUID,
    collaborator: Collaborator,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    service: Annotated[TripService, Depends(get_trip_service)],
) -> Trip:
    return service.add_collaborator(ctx, trip_id, collaborator)


@router.delete("/{trip_id}", response_model=DeleteTripResponse)
def delete_trip(
    trip_id: uuid.UUID,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    service: Annotated[TripService, Depends(get_trip_service)],
) -> DeleteTripResponse:
    """Delete a trip and all of its activities (owner only)."""
    removed = service.delete_trip(ctx, trip_id)
    return DeleteTripResponse(trip_id=trip_id, activities_removed=removed)


@router.get("/{trip_id}/itinerary", response_model=Itinerary)
def get_itinerary(
    trip_id: uuid.UUID,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    service: Annotated[TripService, Depends(get_trip_service)],
) -> Itinerary:
    """Trip activities grouped by day.

    ``collisions`` lists same-day pairs whose times overlap. They are
    reported, not rejected.
    """
    return service.get_itinerary(ctx, trip_id)
