"""Trip models - a trip owns its ordered destinations and lump budget."""

import uuid
from datetime import date

from pydantic import BaseModel, Field, model_validator

from backend.app.models.common import BudgetCategory, CollaboratorRole, Currency


class BudgetBreakdown(BaseModel):
    """Per-category amounts. ``activities`` is always derived on read."""

    accommodation: float = Field(0.0, ge=0)
    transportation: float = Field(0.0, ge=0)
    activities: float = Field(0.0, ge=0)
    food: float = Field(0.0, ge=0)
    other: float = Field(0.0, ge=0)

    def amount(self, category: BudgetCategory) -> float:
        return float(getattr(self, category.value))


class Budget(BaseModel):
    """Trip budget: owner-entered total plus category breakdown."""

    total: float = Field(0.0, ge=0)
    currency: Currency = Currency.USD
    breakdown: BudgetBreakdown = Field(default_factory=BudgetBreakdown)


class Destination(BaseModel):
    """A bounded stay in one city, embedded in its trip.

    Date ordering and overlap are enforced by the destination scheduler, not
    here, so that tentative merges can be built before validation.
    """

    destination_id: uuid.UUID = Field(default_factory=uuid.uuid4)
    city: str = Field(..., min_length=1)
    country: str = Field(..., min_length=1)
    arrival_date: date
    departure_date: date
    order: int = Field(0, ge=0)
    budget: float | None = Field(None, ge=0)


class DestinationCandidate(BaseModel):
    """Caller-supplied fields for a new destination."""

    city: str = Field(..., min_length=1)
    country: str = Field(..., min_length=1)
    arrival_date: date
    departure_date: date
    budget: float | None = Field(None, ge=0)


class DestinationPatch(BaseModel):
    """Partial destination update; unset fields keep their current value."""

    city: str | None = Field(None, min_length=1)
    country: str | None = Field(None, min_length=1)
    arrival_date: date | None = None
    departure_date: date | None = None
    budget: float | None = Field(None, ge=0)


class Collaborator(BaseModel):
    """Non-owner member of a trip."""

    user_id: uuid.UUID
    role: CollaboratorRole = CollaboratorRole.viewer


class TripDraft(BaseModel):
    """Caller-supplied fields for a new trip."""

    name: str = Field(..., min_length=1, max_length=100)
    start_date: date
    end_date: date
    budget: Budget = Field(default_factory=Budget)
    collaborators: list[Collaborator] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_date_order(self) -> "TripDraft":
        """Ensure start_date < end_date."""
        if self.start_date >= self.end_date:
            raise ValueError("end_date must be after start_date")
        return self


class TripPatch(BaseModel):
    """Partial trip update; unset fields keep their current value.

    Date order and destination bounds are checked against the merged trip.
    """

    name: str | None = Field(None, min_length=1, max_length=100)
    start_date: date | None = None
    end_date: date | None = None


class Trip(BaseModel):
    """Trip aggregate."""

    trip_id: uuid.UUID = Field(default_factory=uuid.uuid4)
    owner_id: uuid.UUID
    name: str = Field(..., min_length=1, max_length=100)
    start_date: date
    end_date: date
    destinations: list[Destination] = Field(default_factory=list)
    budget: Budget = Field(default_factory=Budget)
    collaborators: list[Collaborator] = Field(default_factory=list)
    revision: int = Field(0, ge=0)

    @model_validator(mode="after")
    def validate_date_order(self) -> "Trip":
        """Ensure start_date < end_date."""
        if self.start_date >= self.end_date:
            raise ValueError("end_date must be after start_date")
        return self

    def find_destination(self, destination_id: uuid.UUID) -> Destination | None:
        for dest in self.destinations:
            if dest.destination_id == destination_id:
                return dest
        return None

    def role_of(self, user_id: uuid.UUID) -> CollaboratorRole | None:
        for collaborator in self.collaborators:
            if collaborator.user_id == user_id:
                return collaborator.role
        return None


class TripPage(BaseModel):
    """One page of a user's trips."""

    items: list[Trip]
    total: int
    page: int
    limit: int
    pages: int
