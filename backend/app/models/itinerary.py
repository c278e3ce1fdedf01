"""Itinerary models - a trip's activities laid out day by day."""

import uuid
from datetime import date

from pydantic import BaseModel

from backend.app.models.activity import Activity
from backend.app.models.trip import Destination


class Collision(BaseModel):
    """Two activities on the same day whose time slots overlap.

    Advisory only: explicit times are honoured on create and quick edit.
    """

    date: date
    activity_ids: tuple[uuid.UUID, uuid.UUID]


class Itinerary(BaseModel):
    """Trip itinerary grouped by ISO date."""

    trip_id: uuid.UUID
    name: str
    start_date: date
    end_date: date
    destinations: list[Destination]
    days: dict[str, list[Activity]]
    collisions: list[Collision]
