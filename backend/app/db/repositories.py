"""Repository protocol interfaces for data access."""

from collections.abc import Iterable
from datetime import date
from typing import Protocol
from uuid import UUID

from backend.app.models.activity import Activity
from backend.app.models.trip import Trip


class TripRepository(Protocol):
    """Repository for trip documents (destinations and budget embedded)."""

    def create(self, trip: Trip) -> Trip:
        """Persist a new trip.

        Args:
            trip: Trip to store (revision is reset to 0)

        Returns:
            Stored trip
        """
        ...

    def get(self, trip_id: UUID) -> Trip | None:
        """Get trip by ID.

        Args:
            trip_id: Trip ID

        Returns:
            Trip or None if not found
        """
        ...

    def save(self, trip: Trip, expected_revision: int) -> Trip:
        """Replace a stored trip if its revision still matches.

        Args:
            trip: New trip state
            expected_revision: Revision the caller read before mutating

        Returns:
            Stored trip with revision incremented

        Raises:
            NotFoundError: If the trip no longer exists
            ConcurrencyError: If the stored revision differs
        """
        ...

    def delete(self, trip_id: UUID) -> bool:
        """Delete a trip.

        Args:
            trip_id: Trip ID

        Returns:
            True if a trip was deleted
        """
        ...

    def list_for_owner(self, owner_id: UUID, limit: int = 10, offset: int = 0) -> list[Trip]:
        """List trips owned by a user, latest start date first.

        Args:
            owner_id: Owner user ID
            limit: Maximum number of results
            offset: Number of results to skip

        Returns:
            List of trips
        """
        ...

    def count_for_owner(self, owner_id: UUID) -> int:
        """Number of trips owned by a user."""
        ...


class ActivityRepository(Protocol):
    """Repository for activity records, looked up by trip id."""

    def add(self, activity: Activity) -> Activity:
        """Persist a new activity."""
        ...

    def get(self, activity_id: UUID) -> Activity | None:
        """Get activity by ID."""
        ...

    def update(self, activity: Activity) -> Activity:
        """Replace a stored activity.

        Raises:
            NotFoundError: If the activity does not exist
        """
        ...

    def delete(self, activity_id: UUID) -> bool:
        """Delete one activity. Returns True if it existed."""
        ...

    def list_for_trip(self, trip_id: UUID, on_date: date | None = None) -> list[Activity]:
        """List a trip's activities, optionally restricted to one day.

        Returns:
            Activities sorted by date then start time
        """
        ...

    def delete_many(self, activity_ids: Iterable[UUID]) -> int:
        """Delete activities by ID. Returns the number deleted."""
        ...

    def delete_for_trip(self, trip_id: UUID) -> int:
        """Delete every activity of a trip. Returns the number deleted."""
        ...


class UnitOfWork(Protocol):
    """Transaction boundary shared by the repositories of one request.

    Repository writes are staged until ``commit``. ``rollback`` discards
    everything written since ``begin``.
    """

    def begin(self) -> None:
        """Start a transaction."""
        ...

    def commit(self) -> None:
        """Make staged writes durable."""
        ...

    def rollback(self) -> None:
        """Discard staged writes."""
        ...
