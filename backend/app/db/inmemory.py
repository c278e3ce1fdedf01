"""In-memory implementations of repository interfaces."""

import threading
import uuid
from collections.abc import Iterable
from datetime import date

from backend.app.models.activity import Activity
from backend.app.models.trip import Trip
from backend.app.scheduling.activities import chronological_key
from backend.app.scheduling.errors import ConcurrencyError, NotFoundError


class InMemoryTripRepository:
    """In-memory implementation of TripRepository.

    ``save`` compares and swaps the revision under a lock, so two writers
    that read the same revision cannot both commit.
    """

    def __init__(self) -> None:
        self._trips: dict[uuid.UUID, Trip] = {}
        self._lock = threading.Lock()

    def create(self, trip: Trip) -> Trip:
        """Persist a new trip."""
        stored = trip.model_copy(update={"revision": 0}, deep=True)
        with self._lock:
            self._trips[stored.trip_id] = stored
        return stored.model_copy(deep=True)

    def get(self, trip_id: uuid.UUID) -> Trip | None:
        """Get trip by ID."""
        trip = self._trips.get(trip_id)
        return trip.model_copy(deep=True) if trip is not None else None

    def save(self, trip: Trip, expected_revision: int) -> Trip:
        """Replace a stored trip if its revision still matches."""
        with self._lock:
            current = self._trips.get(trip.trip_id)
            if current is None:
                raise NotFoundError("Trip", trip.trip_id)
            if current.revision != expected_revision:
                raise ConcurrencyError(trip.trip_id, expected_revision, current.revision)

            stored = trip.model_copy(update={"revision": expected_revision + 1}, deep=True)
            self._trips[trip.trip_id] = stored
        return stored.model_copy(deep=True)

    def delete(self, trip_id: uuid.UUID) -> bool:
        """Delete a trip."""
        with self._lock:
            return self._trips.pop(trip_id, None) is not None

    def list_for_owner(self, owner_id: uuid.UUID, limit: int = 10, offset: int = 0) -> list[Trip]:
        """List trips owned by a user, latest start date first."""
        owned = [t for t in self._trips.values() if t.owner_id == owner_id]
        owned.sort(key=lambda t: t.start_date, reverse=True)
        return [t.model_copy(deep=True) for t in owned[offset : offset + limit]]

    def count_for_owner(self, owner_id: uuid.UUID) -> int:
        """Number of trips owned by a user."""
        return sum(1 for t in self._trips.values() if t.owner_id == owner_id)

    def snapshot(self) -> dict[uuid.UUID, Trip]:
        with self._lock:
            return dict(self._trips)

    def restore(self, trips: dict[uuid.UUID, Trip]) -> None:
        with self._lock:
            self._trips = dict(trips)


class InMemoryActivityRepository:
    """In-memory implementation of ActivityRepository."""

    def __init__(self) -> None:
        self._activities: dict[uuid.UUID, Activity] = {}

    def add(self, activity: Activity) -> Activity:
        """Persist a new activity."""
        self._activities[activity.activity_id] = activity.model_copy(deep=True)
        return activity

    def get(self, activity_id: uuid.UUID) -> Activity | None:
        """Get activity by ID."""
        activity = self._activities.get(activity_id)
        return activity.model_copy(deep=True) if activity is not None else None

    def update(self, activity: Activity) -> Activity:
        """Replace a stored activity."""
        if activity.activity_id not in self._activities:
            raise NotFoundError("Activity", activity.activity_id)
        self._activities[activity.activity_id] = activity.model_copy(deep=True)
        return activity

    def delete(self, activity_id: uuid.UUID) -> bool:
        """Delete one activity."""
        return self._activities.pop(activity_id, None) is not None

    def list_for_trip(self, trip_id: uuid.UUID, on_date: date | None = None) -> list[Activity]:
        """List a trip's activities in chronological order."""
        results = [
            a.model_copy(deep=True)
            for a in self._activities.values()
            if a.trip_id == trip_id and (on_date is None or a.date == on_date)
        ]
        results.sort(key=chronological_key)
        return results

    def delete_many(self, activity_ids: Iterable[uuid.UUID]) -> int:
        """Delete activities by ID."""
        return sum(1 for activity_id in set(activity_ids) if self.delete(activity_id))

    def delete_for_trip(self, trip_id: uuid.UUID) -> int:
        """Delete every activity of a trip."""
        ids = [a.activity_id for a in self._activities.values() if a.trip_id == trip_id]
        return self.delete_many(ids)

    def snapshot(self) -> dict[uuid.UUID, Activity]:
        return dict(self._activities)

    def restore(self, activities: dict[uuid.UUID, Activity]) -> None:
        self._activities = dict(activities)


class InMemoryUnitOfWork:
    """Snapshot-based transaction over the in-memory repositories.

    Stored models are replaced, never mutated, so a shallow copy of each
    repository's dict is enough to roll back. Assumes a single writer.
    """

    def __init__(
        self, trips: InMemoryTripRepository, activities: InMemoryActivityRepository
    ) -> None:
        self._trips = trips
        self._activities = activities
        self._checkpoint: tuple[dict[uuid.UUID, Trip], dict[uuid.UUID, Activity]] | None = None

    def begin(self) -> None:
        self._checkpoint = (self._trips.snapshot(), self._activities.snapshot())

    def commit(self) -> None:
        self._checkpoint = None

    def rollback(self) -> None:
        if self._checkpoint is None:
            return
        trips, activities = self._checkpoint
        self._trips.restore(trips)
        self._activities.restore(activities)
        self._checkpoint = None
