"""Activity slot allocator - timed placement of activities within a day.

New activities and quick edits honour caller-supplied times without any
collision check. Only ``move_activity`` (drag-and-drop) searches for a free
slot. That asymmetry is intentional product behaviour.
"""

from collections.abc import Iterable, Sequence
from datetime import date

from backend.app.models.activity import Activity, ActivityDraft, ActivityPatch
from backend.app.scheduling.errors import ValidationError
from backend.app.scheduling.intervals import TimeSlot, format_hhmm, parse_hhmm, time_slot

DEFAULT_DAY_START = "09:00"


def _slot_of(activity: Activity) -> TimeSlot:
    return TimeSlot(
        parse_hhmm(activity.start_time, strict=False),
        parse_hhmm(activity.end_time, strict=False),
    )


def chronological_key(activity: Activity) -> tuple[date, int]:
    """Sort key: date, then start minute."""
    return (activity.date, parse_hhmm(activity.start_time, strict=False))


def place_new(draft: ActivityDraft) -> Activity:
    """Build an activity at exactly the requested times.

    Raises:
        ValidationError: If either time is not HH:MM or start >= end.
    """
    slot = time_slot(draft.start_time, draft.end_time)
    return Activity(
        **draft.model_dump(),
        duration=slot.duration,
    )


def quick_edit(activity: Activity, patch: ActivityPatch) -> Activity:
    """Apply a direct time/cost edit without collision detection.

    When ``duration`` is given without ``end_time``, the end is derived from
    the (possibly patched) start. Otherwise duration is re-derived from the
    resulting start and end.

    Caller-supplied times must be valid wall-clock values. Stored times and a
    derived end may run past midnight, as after an unbounded move.
    """
    changes = patch.model_dump(exclude_unset=True, exclude_none=True)
    if "cost" in changes:
        changes["cost"] = patch.cost
    if not changes.keys() & {"start_time", "end_time", "duration"}:
        return activity.model_copy(update=changes)

    start_time = changes.get("start_time", activity.start_time)
    start = parse_hhmm(start_time, strict="start_time" in changes)
    if "duration" in changes and "end_time" not in changes:
        end = start + changes["duration"]
    else:
        end = parse_hhmm(
            changes.get("end_time", activity.end_time), strict="end_time" in changes
        )

    if start >= end:
        raise ValidationError(
            f"End time {format_hhmm(end)} must be after start time {format_hhmm(start)}",
            code="INVALID_TIME_RANGE",
        )
    changes.update(start_time=format_hhmm(start), end_time=format_hhmm(end), duration=end - start)
    return activity.model_copy(update=changes)


def busy_slots(activities: Iterable[Activity]) -> list[TimeSlot]:
    """Time slots occupied by ``activities``, sorted by start."""
    return sorted((_slot_of(a) for a in activities), key=lambda s: (s.start, s.end))


def first_fit_start(duration: int, busy: Sequence[TimeSlot], day_start: int) -> int:
    """Find the first start minute where ``duration`` fits between busy slots.

    Scans forward from ``day_start``. For each busy slot in start order, if
    the gap between the cursor and the slot's start is at least ``duration``
    the cursor is returned; otherwise the cursor advances to the slot's end
    (never backwards). Falls through to the cursor after the last slot, with
    no end-of-day bound.
    """
    if duration <= 0:
        raise ValidationError("Activity duration must be positive", code="INVALID_DURATION")

    cursor = day_start
    for slot in sorted(busy, key=lambda s: (s.start, s.end)):
        if slot.start - cursor >= duration:
            return cursor
        cursor = max(cursor, slot.end)
    return cursor


def move_activity(
    activity: Activity,
    target_date: date,
    day_activities: Iterable[Activity],
    day_start: str = DEFAULT_DAY_START,
) -> Activity:
    """Move an activity to ``target_date`` at the first free slot.

    Args:
        activity: Activity being dragged
        target_date: Day it is dropped on
        day_activities: Activities already on ``target_date``; the moved
            activity itself is ignored if present
        day_start: Wall-clock time the scan starts from

    Returns:
        Copy of the activity with new date, start_time and end_time. Duration
        is unchanged.
    """
    duration = activity.duration or _slot_of(activity).duration
    others = [a for a in day_activities if a.activity_id != activity.activity_id]

    start = first_fit_start(duration, busy_slots(others), parse_hhmm(day_start))
    return activity.model_copy(
        update={
            "date": target_date,
            "start_time": format_hhmm(start),
            "end_time": format_hhmm(start + duration),
            "duration": duration,
        }
    )


def find_collisions(activity: Activity, day_activities: Iterable[Activity]) -> list[Activity]:
    """Activities on the same day whose time slots overlap ``activity``."""
    slot = _slot_of(activity)
    return [
        other
        for other in day_activities
        if other.activity_id != activity.activity_id
        and other.date == activity.date
        and slot.overlaps(_slot_of(other))
    ]
