"""Activity models - timed, costed events on one day of a trip."""

import uuid
from datetime import date

from pydantic import BaseModel, Field

from backend.app.models.common import ActivityType, Money


class DestinationRef(BaseModel):
    """Denormalized city/country snapshot, not a live reference."""

    city: str = Field(..., min_length=1)
    country: str = Field(..., min_length=1)


class Activity(BaseModel):
    """Single scheduled activity.

    ``destination_id`` is the stable link used for cascade deletes; the
    ``destination`` snapshot is kept for display and for rows written before
    the link existed.
    """

    activity_id: uuid.UUID = Field(default_factory=uuid.uuid4)
    trip_id: uuid.UUID
    destination_id: uuid.UUID | None = None
    destination: DestinationRef
    title: str = Field(..., min_length=1, max_length=100)
    type: ActivityType = ActivityType.other
    date: date
    start_time: str
    end_time: str
    duration: int = Field(0, description="Minutes, derived from start/end")
    cost: Money = Field(default_factory=Money)
    location_name: str = ""
    notes: str | None = Field(None, max_length=1000)


class ActivityDraft(BaseModel):
    """Caller-supplied fields for a new activity."""

    trip_id: uuid.UUID
    destination_id: uuid.UUID | None = None
    destination: DestinationRef
    title: str = Field(..., min_length=1, max_length=100)
    type: ActivityType = ActivityType.other
    date: date
    start_time: str
    end_time: str
    cost: Money = Field(default_factory=Money)
    location_name: str = ""
    notes: str | None = Field(None, max_length=1000)


class ActivityPatch(BaseModel):
    """Quick-edit fields; unset fields keep their current value."""

    title: str | None = Field(None, min_length=1, max_length=100)
    start_time: str | None = None
    end_time: str | None = None
    duration: int | None = Field(None, gt=0)
    cost: Money | None = None
    notes: str | None = Field(None, max_length=1000)


class Placement(BaseModel):
    """Result of a drag-and-drop move."""

    activity_id: uuid.UUID
    date: date
    start_time: str
    end_time: str


class ActivityPage(BaseModel):
    """One page of a trip's activities, in chronological order."""

    items: list[Activity]
    total: int
    page: int
    limit: int
    pages: int
