"""Destination scheduler - ordered, non-overlapping city stays within a trip.

All functions are pure: they validate fully, then return a new ``Trip``
without touching the input, so a failed call never leaves a half-applied
mutation behind.
"""

from collections.abc import Sequence
from uuid import UUID

from backend.app.models.trip import (
    Destination,
    DestinationCandidate,
    DestinationPatch,
    Trip,
    TripPatch,
)
from backend.app.scheduling.errors import (
    NotFoundError,
    OutOfBoundsError,
    OverlapError,
    ValidationError,
)
from backend.app.scheduling.intervals import DateRange


def validate_destination(
    trip: Trip, candidate: Destination, exclude_id: UUID | None = None
) -> None:
    """Run the three placement checks for a destination against its trip.

    Checks, in order:
    1. arrival_date < departure_date (ValidationError)
    2. interval lies within [trip.start_date, trip.end_date] (OutOfBoundsError)
    3. no overlap with any other destination of the trip (OverlapError)

    Args:
        trip: Trip the destination belongs to (or will belong to)
        candidate: Destination to validate
        exclude_id: Destination id to skip in the overlap check (self on update)
    """
    if candidate.arrival_date >= candidate.departure_date:
        raise ValidationError(
            "Departure date must be after arrival date", code="INVALID_DATE_ORDER"
        )

    stay = DateRange(candidate.arrival_date, candidate.departure_date)
    if not stay.within(trip.start_date, trip.end_date):
        raise OutOfBoundsError(
            f"Destination dates {stay.start}..{stay.end} must be within trip dates "
            f"{trip.start_date}..{trip.end_date}"
        )

    conflicts = [
        dest.destination_id
        for dest in trip.destinations
        if dest.destination_id != exclude_id
        and stay.overlaps(DateRange(dest.arrival_date, dest.departure_date))
    ]
    if conflicts:
        raise OverlapError(
            "Destination dates overlap with existing destinations", conflicting_ids=conflicts
        )


def next_order(trip: Trip) -> int:
    return max((dest.order for dest in trip.destinations), default=-1) + 1


def add_destination(trip: Trip, candidate: DestinationCandidate) -> tuple[Trip, Destination]:
    """Validate and append a destination after the highest existing ``order``.

    Without removals this is ``len(existing)``. After a remove (which does not
    renumber) it stays unique.

    Returns:
        (updated trip, created destination)
    """
    destination = Destination(
        city=candidate.city,
        country=candidate.country,
        arrival_date=candidate.arrival_date,
        departure_date=candidate.departure_date,
        budget=candidate.budget,
        order=next_order(trip),
    )
    validate_destination(trip, destination)

    updated = trip.model_copy(update={"destinations": [*trip.destinations, destination]})
    return updated, destination


def update_destination(
    trip: Trip, destination_id: UUID, patch: DestinationPatch
) -> tuple[Trip, Destination]:
    """Merge a patch into a destination and re-validate before committing.

    Unset patch fields fall back to the current values. The destination being
    updated is excluded from its own overlap check.

    Returns:
        (updated trip, merged destination)
    """
    current = trip.find_destination(destination_id)
    if current is None:
        raise NotFoundError("Destination", destination_id)

    merged = current.model_copy(update=patch.model_dump(exclude_unset=True, exclude_none=True))
    validate_destination(trip, merged, exclude_id=destination_id)

    destinations = [
        merged if dest.destination_id == destination_id else dest for dest in trip.destinations
    ]
    return trip.model_copy(update={"destinations": destinations}), merged


def remove_destination(trip: Trip, destination_id: UUID) -> tuple[Trip, Destination]:
    """Drop a destination. Surviving ``order`` values are not renumbered.

    Activity cascade is the caller's job; see ``TripService.remove_destination``.

    Returns:
        (updated trip, removed destination)
    """
    removed = trip.find_destination(destination_id)
    if removed is None:
        raise NotFoundError("Destination", destination_id)

    destinations = [d for d in trip.destinations if d.destination_id != destination_id]
    return trip.model_copy(update={"destinations": destinations}), removed


def reorder_destinations(trip: Trip, ordered_ids: Sequence[UUID]) -> Trip:
    """Reassign ``order = index`` following ``ordered_ids``.

    ``ordered_ids`` must be exactly a permutation of the trip's destination
    ids: missing, extra or duplicated ids are rejected and the prior order is
    left untouched. Applying the same ordering twice yields the same state.
    """
    existing = {dest.destination_id: dest for dest in trip.destinations}

    if len(ordered_ids) != len(existing) or set(ordered_ids) != set(existing):
        missing = sorted(str(i) for i in set(existing) - set(ordered_ids))
        unknown = sorted(str(i) for i in set(ordered_ids) - set(existing))
        detail = []
        if missing:
            detail.append(f"missing {missing}")
        if unknown:
            detail.append(f"unknown {unknown}")
        if not detail:
            detail.append("duplicate ids")
        raise ValidationError(
            f"Invalid destination IDs provided: {', '.join(detail)}", code="INVALID_REORDER"
        )

    destinations = [
        existing[dest_id].model_copy(update={"order": index})
        for index, dest_id in enumerate(ordered_ids)
    ]
    return trip.model_copy(update={"destinations": destinations})


def update_trip(trip: Trip, patch: TripPatch) -> Trip:
    """Merge a trip patch, keeping every destination inside the new dates.

    Raises:
        ValidationError: If the merged start_date is not before end_date
        OutOfBoundsError: If a destination would fall outside the new range
    """
    merged = trip.model_copy(update=patch.model_dump(exclude_unset=True, exclude_none=True))
    if merged.start_date >= merged.end_date:
        raise ValidationError("End date must be after start date", code="INVALID_DATE_ORDER")

    stranded = [
        dest
        for dest in trip.destinations
        if not DateRange(dest.arrival_date, dest.departure_date).within(
            merged.start_date, merged.end_date
        )
    ]
    if stranded:
        cities = ", ".join(dest.city for dest in stranded)
        raise OutOfBoundsError(
            f"Trip dates {merged.start_date}..{merged.end_date} would leave "
            f"destinations outside the trip: {cities}"
        )
    return merged
