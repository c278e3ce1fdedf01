"""Unit tests for the destination scheduler."""

import random
import uuid
from datetime import date, timedelta

import pytest

from backend.app.models.trip import DestinationCandidate, DestinationPatch, Trip, TripPatch
from backend.app.scheduling.destinations import (
    add_destination,
    remove_destination,
    reorder_destinations,
    update_destination,
    update_trip,
)
from backend.app.scheduling.errors import (
    NotFoundError,
    OutOfBoundsError,
    OverlapError,
    SchedulingError,
    ValidationError,
)
from tests.factories import make_trip


def candidate(city: str, arrival: int, departure: int) -> DestinationCandidate:
    return DestinationCandidate(
        city=city,
        country="Europe",
        arrival_date=date(2025, 8, arrival),
        departure_date=date(2025, 8, departure),
    )


@pytest.fixture
def paris_rome() -> Trip:
    """Trip Aug 1-10 with Paris Aug 1-5 and Rome Aug 5-10."""
    trip = make_trip()
    trip, _ = add_destination(trip, candidate("Paris", 1, 5))
    trip, _ = add_destination(trip, candidate("Rome", 5, 10))
    return trip


def test_add_assigns_sequential_order(paris_rome: Trip) -> None:
    assert [d.city for d in paris_rome.destinations] == ["Paris", "Rome"]
    assert [d.order for d in paris_rome.destinations] == [0, 1]


def test_touching_destinations_are_accepted(paris_rome: Trip) -> None:
    paris, rome = paris_rome.destinations
    assert paris.departure_date == rome.arrival_date


def test_overlap_reports_every_conflict(paris_rome: Trip) -> None:
    """Berlin Aug 4-6 overlaps both Paris and Rome."""
    with pytest.raises(OverlapError) as exc_info:
        add_destination(paris_rome, candidate("Berlin", 4, 6))

    expected = {d.destination_id for d in paris_rome.destinations}
    assert set(exc_info.value.conflicting_ids) == expected
    assert exc_info.value.to_dict()["code"] == "OVERLAP"


def test_reversed_dates_rejected_before_bounds() -> None:
    trip = make_trip()
    with pytest.raises(ValidationError) as exc_info:
        add_destination(trip, candidate("Paris", 20, 15))

    assert exc_info.value.code == "INVALID_DATE_ORDER"


def test_equal_dates_rejected() -> None:
    with pytest.raises(ValidationError):
        add_destination(make_trip(), candidate("Paris", 3, 3))


def test_out_of_trip_bounds_rejected() -> None:
    trip = make_trip()
    with pytest.raises(OutOfBoundsError):
        add_destination(trip, candidate("Paris", 8, 11))

    with pytest.raises(OutOfBoundsError):
        add_destination(
            trip,
            DestinationCandidate(
                city="Lisbon",
                country="Portugal",
                arrival_date=date(2025, 7, 30),
                departure_date=date(2025, 8, 2),
            ),
        )


def test_destination_spanning_whole_trip_is_in_bounds() -> None:
    trip, dest = add_destination(make_trip(), candidate("Paris", 1, 10))
    assert trip.destinations == [dest]


def test_failed_add_leaves_trip_untouched(paris_rome: Trip) -> None:
    before = paris_rome.model_dump()
    with pytest.raises(OverlapError):
        add_destination(paris_rome, candidate("Berlin", 2, 3))

    assert paris_rome.model_dump() == before


def test_update_excludes_itself_from_overlap(paris_rome: Trip) -> None:
    paris = paris_rome.destinations[0]
    trip, merged = update_destination(
        paris_rome,
        paris.destination_id,
        DestinationPatch(arrival_date=date(2025, 8, 2)),
    )

    assert merged.arrival_date == date(2025, 8, 2)
    assert merged.departure_date == date(2025, 8, 5)
    assert trip.find_destination(paris.destination_id) == merged


def test_update_into_neighbour_rejected(paris_rome: Trip) -> None:
    paris, rome = paris_rome.destinations
    with pytest.raises(OverlapError) as exc_info:
        update_destination(
            paris_rome, paris.destination_id, DestinationPatch(departure_date=date(2025, 8, 6))
        )

    assert exc_info.value.conflicting_ids == [rome.destination_id]


def test_update_unknown_destination() -> None:
    with pytest.raises(NotFoundError):
        update_destination(make_trip(), uuid.uuid4(), DestinationPatch(city="Nice"))


def test_remove_does_not_renumber(paris_rome: Trip) -> None:
    trip, _ = add_destination(
        paris_rome.model_copy(update={"end_date": date(2025, 8, 12)}),
        candidate("Vienna", 10, 12),
    )
    paris = trip.destinations[0]

    trip, removed = remove_destination(trip, paris.destination_id)

    assert removed.city == "Paris"
    assert [d.order for d in trip.destinations] == [1, 2]


def test_reorder_is_idempotent(paris_rome: Trip) -> None:
    paris, rome = paris_rome.destinations
    ordering = [rome.destination_id, paris.destination_id]

    once = reorder_destinations(paris_rome, ordering)
    twice = reorder_destinations(once, ordering)

    assert once == twice
    orders = {d.city: d.order for d in once.destinations}
    assert orders == {"Rome": 0, "Paris": 1}


@pytest.mark.parametrize("kind", ["missing", "extra", "duplicate"])
def test_reorder_rejects_non_permutation(paris_rome: Trip, kind: str) -> None:
    paris, rome = paris_rome.destinations
    ids = {
        "missing": [paris.destination_id],
        "extra": [paris.destination_id, rome.destination_id, uuid.uuid4()],
        "duplicate": [paris.destination_id, paris.destination_id],
    }[kind]

    with pytest.raises(ValidationError) as exc_info:
        reorder_destinations(paris_rome, ids)

    assert exc_info.value.code == "INVALID_REORDER"
    assert [d.order for d in paris_rome.destinations] == [0, 1]


def test_add_after_remove_keeps_orders_unique(paris_rome: Trip) -> None:
    paris = paris_rome.destinations[0]
    trip, _ = remove_destination(paris_rome, paris.destination_id)

    trip, vienna = add_destination(trip, candidate("Vienna", 1, 3))

    assert vienna.order == 2
    assert sorted(d.order for d in trip.destinations) == [1, 2]


def test_update_trip_renames_and_extends(paris_rome: Trip) -> None:
    updated = update_trip(
        paris_rome, TripPatch(name="Long summer", end_date=date(2025, 8, 20))
    )

    assert updated.name == "Long summer"
    assert (updated.start_date, updated.end_date) == (date(2025, 8, 1), date(2025, 8, 20))
    assert updated.destinations == paris_rome.destinations


def test_update_trip_cannot_strand_destinations(paris_rome: Trip) -> None:
    with pytest.raises(OutOfBoundsError) as exc_info:
        update_trip(paris_rome, TripPatch(end_date=date(2025, 8, 8)))

    assert "Rome" in exc_info.value.message
    with pytest.raises(OutOfBoundsError):
        update_trip(paris_rome, TripPatch(start_date=date(2025, 8, 2)))


def test_update_trip_rejects_reversed_dates() -> None:
    with pytest.raises(ValidationError) as exc_info:
        update_trip(make_trip(), TripPatch(start_date=date(2025, 8, 10)))

    assert exc_info.value.code == "INVALID_DATE_ORDER"


def _assert_schedule_valid(trip: Trip) -> None:
    stays = sorted(trip.destinations, key=lambda d: d.arrival_date)
    for dest in stays:
        assert dest.arrival_date < dest.departure_date
        assert trip.start_date <= dest.arrival_date
        assert dest.departure_date <= trip.end_date
    for current, following in zip(stays, stays[1:]):
        assert current.departure_date <= following.arrival_date, (current, following)
    orders = [d.order for d in trip.destinations]
    assert len(orders) == len(set(orders))


@pytest.mark.parametrize("seed", [1, 10, 100, 999, 12345])
def test_random_edits_never_overlap(seed: int) -> None:
    """Destinations never overlap after any successful add, update or remove."""
    rng = random.Random(seed)
    trip = make_trip(end_date=date(2025, 8, 31))

    def random_stay() -> tuple[date, date]:
        arrival = trip.start_date + timedelta(days=rng.randint(-2, 30))
        return arrival, arrival + timedelta(days=rng.randint(-1, 6))

    for step in range(150):
        arrival, departure = random_stay()
        action = rng.random()
        try:
            if action < 0.6 or not trip.destinations:
                trip, _ = add_destination(
                    trip,
                    DestinationCandidate(
                        city=f"City {step}",
                        country="Europe",
                        arrival_date=arrival,
                        departure_date=departure,
                    ),
                )
            elif action < 0.9:
                target = rng.choice(trip.destinations)
                trip, _ = update_destination(
                    trip,
                    target.destination_id,
                    DestinationPatch(arrival_date=arrival, departure_date=departure),
                )
            else:
                trip, _ = remove_destination(trip, rng.choice(trip.destinations).destination_id)
        except SchedulingError:
            pass

        _assert_schedule_valid(trip)
