"""SQL implementations of repository interfaces."""

import uuid
from collections.abc import Iterable
from datetime import date

from sqlalchemy import delete, func, select, update
from sqlalchemy.orm import Session

from backend.app.db.models import Activity as ActivityRow
from backend.app.db.models import Trip as TripRow
from backend.app.models.activity import Activity, DestinationRef
from backend.app.models.common import Money
from backend.app.models.trip import Budget, Collaborator, Destination, Trip
from backend.app.scheduling.activities import chronological_key
from backend.app.scheduling.errors import ConcurrencyError, NotFoundError


def _trip_from_row(row: TripRow) -> Trip:
    return Trip(
        trip_id=row.trip_id,
        owner_id=row.owner_id,
        name=row.name,
        start_date=row.start_date,
        end_date=row.end_date,
        destinations=[Destination.model_validate(d) for d in row.destinations or []],
        budget=Budget.model_validate(row.budget or {}),
        collaborators=[Collaborator.model_validate(c) for c in row.collaborators or []],
        revision=row.revision,
    )


def _trip_document(trip: Trip) -> dict:
    """Column values for a trip row (everything except the primary key)."""
    return {
        "owner_id": trip.owner_id,
        "name": trip.name,
        "start_date": trip.start_date,
        "end_date": trip.end_date,
        "destinations": [d.model_dump(mode="json") for d in trip.destinations],
        "budget": trip.budget.model_dump(mode="json"),
        "collaborators": [c.model_dump(mode="json") for c in trip.collaborators],
    }


def _activity_from_row(row: ActivityRow) -> Activity:
    return Activity(
        activity_id=row.activity_id,
        trip_id=row.trip_id,
        destination_id=row.destination_id,
        destination=DestinationRef(city=row.destination_city, country=row.destination_country),
        title=row.title,
        type=row.type,
        date=row.activity_date,
        start_time=row.start_time,
        end_time=row.end_time,
        duration=row.duration,
        cost=Money(amount=row.cost_amount, currency=row.cost_currency),
        location_name=row.location_name,
        notes=row.notes,
    )


def _activity_columns(activity: Activity) -> dict:
    return {
        "trip_id": activity.trip_id,
        "destination_id": activity.destination_id,
        "destination_city": activity.destination.city,
        "destination_country": activity.destination.country,
        "title": activity.title,
        "type": activity.type.value,
        "activity_date": activity.date,
        "start_time": activity.start_time,
        "end_time": activity.end_time,
        "duration": activity.duration,
        "cost_amount": activity.cost.amount,
        "cost_currency": activity.cost.currency.value,
        "location_name": activity.location_name,
        "notes": activity.notes,
    }


class SqlTripRepository:
    """SQL implementation of TripRepository.

    ``save`` issues ``UPDATE ... WHERE revision = :expected`` so the revision
    check and the write happen in one statement. Writes are flushed, not
    committed; ``SqlUnitOfWork`` owns the transaction.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def create(self, trip: Trip) -> Trip:
        """Persist a new trip."""
        row = TripRow(trip_id=trip.trip_id, revision=0, **_trip_document(trip))
        self._session.add(row)
        self._session.flush()
        return trip.model_copy(update={"revision": 0})

    def get(self, trip_id: uuid.UUID) -> Trip | None:
        """Get trip by ID."""
        row = self._session.get(TripRow, trip_id, populate_existing=True)
        return _trip_from_row(row) if row is not None else None

    def save(self, trip: Trip, expected_revision: int) -> Trip:
        """Replace a stored trip if its revision still matches."""
        result = self._session.execute(
            update(TripRow)
            .where(TripRow.trip_id == trip.trip_id, TripRow.revision == expected_revision)
            .values(revision=expected_revision + 1, **_trip_document(trip))
            .execution_options(synchronize_session=False)
        )

        if result.rowcount != 1:
            actual = self._session.scalar(
                select(TripRow.revision).where(TripRow.trip_id == trip.trip_id)
            )
            if actual is None:
                raise NotFoundError("Trip", trip.trip_id)
            raise ConcurrencyError(trip.trip_id, expected_revision, actual)

        return trip.model_copy(update={"revision": expected_revision + 1})

    def delete(self, trip_id: uuid.UUID) -> bool:
        """Delete a trip."""
        result = self._session.execute(delete(TripRow).where(TripRow.trip_id == trip_id))
        return result.rowcount > 0

    def list_for_owner(self, owner_id: uuid.UUID, limit: int = 10, offset: int = 0) -> list[Trip]:
        """List trips owned by a user, latest start date first."""
        rows = self._session.execute(
            select(TripRow)
            .where(TripRow.owner_id == owner_id)
            .order_by(TripRow.start_date.desc())
            .offset(offset)
            .limit(limit)
        ).scalars()
        return [_trip_from_row(row) for row in rows]

    def count_for_owner(self, owner_id: uuid.UUID) -> int:
        """Number of trips owned by a user."""
        count = self._session.scalar(
            select(func.count()).select_from(TripRow).where(TripRow.owner_id == owner_id)
        )
        return count or 0


class SqlActivityRepository:
    """SQL implementation of ActivityRepository."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def add(self, activity: Activity) -> Activity:
        """Persist a new activity."""
        row = ActivityRow(activity_id=activity.activity_id, **_activity_columns(activity))
        self._session.add(row)
        self._session.flush()
        return activity

    def get(self, activity_id: uuid.UUID) -> Activity | None:
        """Get activity by ID."""
        row = self._session.get(ActivityRow, activity_id, populate_existing=True)
        return _activity_from_row(row) if row is not None else None

    def update(self, activity: Activity) -> Activity:
        """Replace a stored activity."""
        result = self._session.execute(
            update(ActivityRow)
            .where(ActivityRow.activity_id == activity.activity_id)
            .values(**_activity_columns(activity))
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            raise NotFoundError("Activity", activity.activity_id)
        return activity

    def delete(self, activity_id: uuid.UUID) -> bool:
        """Delete one activity."""
        return self.delete_many([activity_id]) > 0

    def list_for_trip(self, trip_id: uuid.UUID, on_date: date | None = None) -> list[Activity]:
        """List a trip's activities in chronological order."""
        query = select(ActivityRow).where(ActivityRow.trip_id == trip_id)
        if on_date is not None:
            query = query.where(ActivityRow.activity_date == on_date)

        rows = self._session.execute(query).scalars().all()
        # start_time is text; sort in Python so "9:00" orders before "10:00"
        return sorted((_activity_from_row(row) for row in rows), key=chronological_key)

    def delete_many(self, activity_ids: Iterable[uuid.UUID]) -> int:
        """Delete activities by ID."""
        ids = list(set(activity_ids))
        if not ids:
            return 0
        result = self._session.execute(
            delete(ActivityRow)
            .where(ActivityRow.activity_id.in_(ids))
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def delete_for_trip(self, trip_id: uuid.UUID) -> int:
        """Delete every activity of a trip."""
        result = self._session.execute(
            delete(ActivityRow)
            .where(ActivityRow.trip_id == trip_id)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount


class SqlUnitOfWork:
    """Commits or rolls back the session shared by the SQL repositories."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def begin(self) -> None:
        # Session autobegins on the first statement
        pass

    def commit(self) -> None:
        self._session.commit()

    def rollback(self) -> None:
        self._session.rollback()
