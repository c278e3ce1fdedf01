"""Destination endpoints - add, edit, reorder and remove stays within a trip."""

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from backend.app.api.auth import get_current_context
from backend.app.api.dependencies import get_trip_service
from backend.app.db.context import RequestContext
from backend.app.models.trip import Destination, DestinationCandidate, DestinationPatch
from backend.app.scheduling.service import TripService

router = APIRouter(prefix="/trips/{trip_id}/destinations", tags=["destinations"])


class ReorderRequest(BaseModel):
    """Request body for PUT /trips/{trip_id}/destinations/reorder."""

    destination_ids: list[uuid.UUID] = Field(..., description="Every destination id, in order")


class RemoveDestinationResponse(BaseModel):
    """Response for DELETE /trips/{trip_id}/destinations/{destination_id}."""

    destination_id: uuid.UUID
    activities_removed: int


@router.post("", response_model=Destination, status_code=status.HTTP_201_CREATED)
def add_destination(
    trip_id: uuid.UUID,
    candidate: DestinationCandidate,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    service: Annotated[TripService, Depends(get_trip_service)],
) -> Destination:
    """Add a destination.

    Rejected with 400 if the dates are reversed or fall outside the trip,
    and with 409 (listing ``conflicting_ids``) if they overlap another stay.
    """
    return service.add_destination(ctx, trip_id, candidate)


# Declared before /{destination_id} so "reorder" is not parsed as an id
@router.put("/reorder", response_model=list[Destination])
def reorder_destinations(
    trip_id: uuid.UUID,
    request: ReorderRequest,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    service: Annotated[TripService, Depends(get_trip_service)],
) -> list[Destination]:
    """Reassign order from a full permutation of destination ids."""
    return service.reorder_destinations(ctx, trip_id, request.destination_ids)


@router.put("/{destination_id}", response_model=Destination)
def update_destination(
    trip_id: uuid.UUID,
    destination_id: uuid.UUID,
    patch: DestinationPatch,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    service: Annotated[TripService, Depends(get_trip_service)],
) -> Destination:
    return service.update_destination(ctx, trip_id, destination_id, patch)


@router.delete("/{destination_id}", response_model=RemoveDestinationResponse)
def remove_destination(
    trip_id: uuid.UUID,
    destination_id: uuid.UUID,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    service: Annotated[TripService, Depends(get_trip_service)],
) -> RemoveDestinationResponse:
    """Remove a destination and the activities scheduled there."""
    removed = service.remove_destination(ctx, trip_id, destination_id)
    return RemoveDestinationResponse(destination_id=destination_id, activities_removed=removed)
