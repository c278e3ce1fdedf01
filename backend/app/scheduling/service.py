"""Trip service - request-scoped read-validate-write over the repositories.

Each method loads what it needs, runs the pure engine functions, and only
then writes. Trip writes go through ``TripRepository.save`` with the revision
that was read, so a concurrent writer surfaces as ``ConcurrencyError``
instead of a lost update. Every mutation runs in one unit of work: a failure
at any step, cascades included, rolls back all of its writes.
"""

import logging
import math
import time
from collections import defaultdict
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from datetime import date
from enum import Enum
from uuid import UUID

from backend.app.config import Settings, get_settings
from backend.app.db.context import RequestContext
from backend.app.db.repositories import ActivityRepository, TripRepository, UnitOfWork
from backend.app.models.activity import (
    Activity,
    ActivityDraft,
    ActivityPage,
    ActivityPatch,
    Placement,
)
from backend.app.models.budget import BudgetExport, BudgetPatch, BudgetSummary, Forecast
from backend.app.models.common import ActivityType, CollaboratorRole
from backend.app.models.itinerary import Collision, Itinerary
from backend.app.models.trip import (
    Budget,
    Collaborator,
    Destination,
    DestinationCandidate,
    DestinationPatch,
    Trip,
    TripDraft,
    TripPage,
    TripPatch,
)
from backend.app.scheduling import activities as allocator
from backend.app.scheduling import budget as reconciler
from backend.app.scheduling import destinations as scheduler
from backend.app.scheduling.errors import (
    AuthorizationError,
    NotFoundError,
    SchedulingError,
    ValidationError,
)
from backend.app.scheduling.forecast import ForecastThresholds, forecast
from backend.app.scheduling.intervals import parse_hhmm
from backend.app.utils.logging import StructuredEngineLogger
from backend.app.utils.metrics import PrometheusEngineMetrics

logger = logging.getLogger(__name__)


class Capability(str, Enum):
    """What a caller is trying to do to a trip."""

    read = "read"
    edit_activities = "edit_activities"
    manage_trip = "manage_trip"


_ACTIVITY_EDITORS = {CollaboratorRole.editor, CollaboratorRole.admin}


def require_capability(trip: Trip, ctx: RequestContext, capability: Capability) -> None:
    """Capability check hook.

    - ``read``: owner or any collaborator
    - ``edit_activities``: owner, editor or admin collaborator
    - ``manage_trip`` (trip details, collaborators, destinations, budget,
      delete): owner only

    Raises:
        AuthorizationError: If the caller lacks the capability
    """
    if ctx.user_id == trip.owner_id:
        return

    role = trip.role_of(ctx.user_id)
    if capability == Capability.read and role is not None:
        return
    if capability == Capability.edit_activities and role in _ACTIVITY_EDITORS:
        return

    raise AuthorizationError(f"Not authorized to {capability.value.replace('_', ' ')} this trip")


class TripService:
    """Trip scheduling and budget operations for one request."""

    def __init__(
        self,
        trips: TripRepository,
        activities: ActivityRepository,
        unit_of_work: UnitOfWork,
        settings: Settings | None = None,
        metrics: PrometheusEngineMetrics | None = None,
        op_logger: StructuredEngineLogger | None = None,
    ) -> None:
        self._trips = trips
        self._activities = activities
        self._uow = unit_of_work
        self._settings = settings or get_settings()
        self._metrics = metrics or PrometheusEngineMetrics()
        self._op_logger = op_logger or StructuredEngineLogger()

    @contextmanager
    def _tracked(
        self, operation: str, ctx: RequestContext, trip_id: UUID | None = None
    ) -> Iterator[None]:
        """Run one operation in a unit of work; time, log and count it.

        Engine errors are re-raised after the rollback.
        """
        started = time.perf_counter()
        outcome = "success"
        error_code: str | None = None
        self._uow.begin()
        try:
            yield
            self._uow.commit()
        except SchedulingError as e:
            self._uow.rollback()
            outcome = "rejected"
            error_code = e.code
            self._metrics.inc_conflict(operation, e.code)
            raise
        except Exception:
            self._uow.rollback()
            outcome = "error"
            raise
        finally:
            latency_ms = (time.perf_counter() - started) * 1000
            self._metrics.record_latency(operation, outcome, latency_ms)
            self._op_logger.log_operation(
                operation, trip_id, ctx.user_id, outcome, latency_ms, error_code=error_code
            )

    def _load_trip(self, trip_id: UUID, ctx: RequestContext, capability: Capability) -> Trip:
        trip = self._trips.get(trip_id)
        if trip is None:
            raise NotFoundError("Trip", trip_id)
        require_capability(trip, ctx, capability)
        return trip

    def _load_activity(self, activity_id: UUID) -> Activity:
        activity = self._activities.get(activity_id)
        if activity is None:
            raise NotFoundError("Activity", activity_id)
        return activity

    # Trips

    def create_trip(self, ctx: RequestContext, draft: TripDraft) -> Trip:
        """Create a trip owned by the caller."""
        with self._tracked("create_trip", ctx):
            trip = Trip(owner_id=ctx.user_id, **draft.model_dump())
            return self._trips.create(trip)

    def get_trip(self, ctx: RequestContext, trip_id: UUID) -> Trip:
        """Get a trip the caller can read."""
        return self._load_trip(trip_id, ctx, Capability.read)

    def list_trips(self, ctx: RequestContext, page: int = 1, limit: int = 10) -> TripPage:
        """Trips owned by the caller, latest start date first."""
        offset = (page - 1) * limit
        total = self._trips.count_for_owner(ctx.user_id)
        return TripPage(
            items=self._trips.list_for_owner(ctx.user_id, limit=limit, offset=offset),
            total=total,
            page=page,
            limit=limit,
            pages=math.ceil(total / limit),
        )

    def update_trip(self, ctx: RequestContext, trip_id: UUID, patch: TripPatch) -> Trip:
        """Rename or re-date a trip; destinations must stay inside the new dates."""
        with self._tracked("update_trip", ctx, trip_id):
            trip = self._load_trip(trip_id, ctx, Capability.manage_trip)
            return self._trips.save(scheduler.update_trip(trip, patch), trip.revision)

    def add_collaborator(
        self, ctx: RequestContext, trip_id: UUID, collaborator: Collaborator
    ) -> Trip:
        """Grant a user a role on the trip.

        Raises:
            ValidationError: If the user is the owner or already a collaborator
        """
        with self._tracked("add_collaborator", ctx, trip_id):
            trip = self._load_trip(trip_id, ctx, Capability.manage_trip)
            if collaborator.user_id == trip.owner_id:
                raise ValidationError(
                    "The owner cannot be added as a collaborator", code="OWNER_COLLABORATOR"
                )
            if trip.role_of(collaborator.user_id) is not None:
                raise ValidationError(
                    "User is already a collaborator", code="DUPLICATE_COLLABORATOR"
                )
            updated = trip.model_copy(
                update={"collaborators": [*trip.collaborators, collaborator]}
            )
            return self._trips.save(updated, trip.revision)

    def delete_trip(self, ctx: RequestContext, trip_id: UUID) -> int:
        """Delete a trip and explicitly cascade its activities.

        Returns:
            Number of activities deleted
        """
        with self._tracked("delete_trip", ctx, trip_id):
            self._load_trip(trip_id, ctx, Capability.manage_trip)
            removed = self._activities.delete_for_trip(trip_id)
            self._trips.delete(trip_id)
            logger.info(f"[delete_trip] trip_id={trip_id} activities_removed={removed}")
            return removed

    # Destinations

    def add_destination(
        self, ctx: RequestContext, trip_id: UUID, candidate: DestinationCandidate
    ) -> Destination:
        """Add a destination after interval validation."""
        with self._tracked("add_destination", ctx, trip_id):
            trip = self._load_trip(trip_id, ctx, Capability.manage_trip)
            updated, destination = scheduler.add_destination(trip, candidate)
            self._trips.save(updated, trip.revision)
            return destination

    def update_destination(
        self,
        ctx: RequestContext,
        trip_id: UUID,
        destination_id: UUID,
        patch: DestinationPatch,
    ) -> Destination:
        """Merge, re-validate and commit a destination edit."""
        with self._tracked("update_destination", ctx, trip_id):
            trip = self._load_trip(trip_id, ctx, Capability.manage_trip)
            updated, destination = scheduler.update_destination(trip, destination_id, patch)
            self._trips.save(updated, trip.revision)
            return destination

    def remove_destination(self, ctx: RequestContext, trip_id: UUID, destination_id: UUID) -> int:
        """Remove a destination and cascade its activities within this trip.

        Activities are matched by ``destination_id``. Rows without that link
        fall back to a city+country match, still scoped to the trip.

        Returns:
            Number of activities deleted
        """
        with self._tracked("remove_destination", ctx, trip_id):
            trip = self._load_trip(trip_id, ctx, Capability.manage_trip)
            updated, removed = scheduler.remove_destination(trip, destination_id)
            self._trips.save(updated, trip.revision)

            doomed = [
                a.activity_id
                for a in self._activities.list_for_trip(trip_id)
                if _belongs_to(a, removed)
            ]
            count = self._activities.delete_many(doomed)
            logger.info(
                f"[remove_destination] trip_id={trip_id} destination_id={destination_id} "
                f"activities_removed={count}"
            )
            return count

    def reorder_destinations(
        self, ctx: RequestContext, trip_id: UUID, destination_ids: Sequence[UUID]
    ) -> list[Destination]:
        """Reassign destination order from a full permutation of ids."""
        with self._tracked("reorder_destinations", ctx, trip_id):
            trip = self._load_trip(trip_id, ctx, Capability.manage_trip)
            updated = scheduler.reorder_destinations(trip, destination_ids)
            stored = self._trips.save(updated, trip.revision)
            return stored.destinations

    # Activities

    def create_activity(self, ctx: RequestContext, draft: ActivityDraft) -> Activity:
        """Create an activity at exactly the requested times.

        Overlaps with existing activities are not rejected here.
        """
        with self._tracked("create_activity", ctx, draft.trip_id):
            trip = self._load_trip(draft.trip_id, ctx, Capability.edit_activities)
            if draft.destination_id is not None and trip.find_destination(
                draft.destination_id
            ) is None:
                raise NotFoundError("Destination", draft.destination_id)
            return self._activities.add(allocator.place_new(draft))

    def create_activities(
        self, ctx: RequestContext, drafts: Sequence[ActivityDraft]
    ) -> list[Activity]:
        """Create several activities, possibly across trips, all or nothing.

        Every draft is checked (trip access, destination, times) before the
        first one is written.
        """
        with self._tracked("create_activities", ctx):
            trips: dict[UUID, Trip] = {}
            placed: list[Activity] = []
            for draft in drafts:
                if draft.trip_id not in trips:
                    trips[draft.trip_id] = self._load_trip(
                        draft.trip_id, ctx, Capability.edit_activities
                    )
                trip = trips[draft.trip_id]
                if draft.destination_id is not None and trip.find_destination(
                    draft.destination_id
                ) is None:
                    raise NotFoundError("Destination", draft.destination_id)
                placed.append(allocator.place_new(draft))

            created = [self._activities.add(activity) for activity in placed]
            logger.info(f"[create_activities] count={len(created)} trips={len(trips)}")
            return created

    def get_activity(self, ctx: RequestContext, activity_id: UUID) -> Activity:
        """Get an activity of a trip the caller can read."""
        activity = self._load_activity(activity_id)
        self._load_trip(activity.trip_id, ctx, Capability.read)
        return activity

    def list_activities(
        self,
        ctx: RequestContext,
        trip_id: UUID,
        *,
        on_date: date | None = None,
        activity_type: ActivityType | None = None,
        city: str | None = None,
        page: int = 1,
        limit: int = 20,
    ) -> ActivityPage:
        """A trip's activities in chronological order, filtered and paginated.

        ``city`` matches the destination snapshot case-insensitively as a
        substring.
        """
        self._load_trip(trip_id, ctx, Capability.read)
        matches = [
            a
            for a in self._activities.list_for_trip(trip_id, on_date=on_date)
            if (activity_type is None or a.type == activity_type)
            and (city is None or city.casefold() in a.destination.city.casefold())
        ]
        offset = (page - 1) * limit
        return ActivityPage(
            items=matches[offset : offset + limit],
            total=len(matches),
            page=page,
            limit=limit,
            pages=math.ceil(len(matches) / limit),
        )

    def quick_edit_activity(
        self, ctx: RequestContext, activity_id: UUID, patch: ActivityPatch
    ) -> Activity:
        """Edit times/cost directly; the caller owns any resulting conflict."""
        activity = self._load_activity(activity_id)
        with self._tracked("quick_edit_activity", ctx, activity.trip_id):
            self._load_trip(activity.trip_id, ctx, Capability.edit_activities)
            return self._activities.update(allocator.quick_edit(activity, patch))

    def move_activity(
        self, ctx: RequestContext, activity_id: UUID, target_date: date
    ) -> Placement:
        """Drag-and-drop move: first-fit placement on the target day."""
        activity = self._load_activity(activity_id)
        with self._tracked("move_activity", ctx, activity.trip_id):
            self._load_trip(activity.trip_id, ctx, Capability.edit_activities)
            day = self._activities.list_for_trip(activity.trip_id, on_date=target_date)
            moved = allocator.move_activity(
                activity, target_date, day, day_start=self._settings.day_start
            )
            self._activities.update(moved)

            busy = allocator.busy_slots(a for a in day if a.activity_id != activity_id)
            last_end = max((slot.end for slot in busy), default=None)
            start = parse_hhmm(moved.start_time, strict=False)
            self._metrics.inc_move("after_last" if start == last_end else "gap")

            return Placement(
                activity_id=moved.activity_id,
                date=moved.date,
                start_time=moved.start_time,
                end_time=moved.end_time,
            )

    def delete_activity(self, ctx: RequestContext, activity_id: UUID) -> None:
        """Delete a single activity."""
        activity = self._load_activity(activity_id)
        with self._tracked("delete_activity", ctx, activity.trip_id):
            self._load_trip(activity.trip_id, ctx, Capability.edit_activities)
            self._activities.delete(activity_id)

    def get_itinerary(self, ctx: RequestContext, trip_id: UUID) -> Itinerary:
        """Activities grouped by day, with advisory collision report."""
        trip = self._load_trip(trip_id, ctx, Capability.read)
        activities = self._activities.list_for_trip(trip_id)

        days: dict[str, list[Activity]] = defaultdict(list)
        for activity in activities:
            days[activity.date.isoformat()].append(activity)

        collisions: list[Collision] = []
        for day_activities in days.values():
            for index, activity in enumerate(day_activities):
                for other in allocator.find_collisions(activity, day_activities[index + 1 :]):
                    collisions.append(
                        Collision(
                            date=activity.date,
                            activity_ids=(activity.activity_id, other.activity_id),
                        )
                    )

        return Itinerary(
            trip_id=trip.trip_id,
            name=trip.name,
            start_date=trip.start_date,
            end_date=trip.end_date,
            destinations=sorted(trip.destinations, key=lambda d: d.order),
            days=dict(days),
            collisions=collisions,
        )

    # Budget

    def get_budget(self, ctx: RequestContext, trip_id: UUID) -> BudgetSummary:
        """Reconciled budget breakdown."""
        trip = self._load_trip(trip_id, ctx, Capability.read)
        return reconciler.get_breakdown(trip, self._activities.list_for_trip(trip_id))

    def update_budget(self, ctx: RequestContext, trip_id: UUID, patch: BudgetPatch) -> Budget:
        """Owner budget edit; ``breakdown.activities`` is ignored."""
        with self._tracked("update_budget", ctx, trip_id):
            trip = self._load_trip(trip_id, ctx, Capability.manage_trip)
            stored = self._trips.save(reconciler.update_budget(trip, patch), trip.revision)
            spent = reconciler.activities_cost(self._activities.list_for_trip(trip_id))
            breakdown = stored.budget.breakdown.model_copy(update={"activities": spent})
            return stored.budget.model_copy(update={"breakdown": breakdown})

    def get_forecast(self, ctx: RequestContext, trip_id: UUID) -> Forecast:
        """Spending forecast and advisories."""
        trip = self._load_trip(trip_id, ctx, Capability.read)
        thresholds = ForecastThresholds(
            warning_pct=self._settings.warning_spend_pct,
            danger_pct=self._settings.danger_spend_pct,
            expensive_ratio=self._settings.expensive_activity_ratio,
        )
        return forecast(trip, self._activities.list_for_trip(trip_id), thresholds)

    def export_budget(self, ctx: RequestContext, trip_id: UUID) -> BudgetExport:
        """JSON budget export."""
        trip = self._load_trip(trip_id, ctx, Capability.read)
        return reconciler.export_budget(trip, self._activities.list_for_trip(trip_id))


def _belongs_to(activity: Activity, destination: Destination) -> bool:
    if activity.destination_id is not None:
        return activity.destination_id == destination.destination_id
    return (
        activity.destination.city == destination.city
        and activity.destination.country == destination.country
    )
