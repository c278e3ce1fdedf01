"""Budget reconciler - keeps lump budgets consistent with itemized activity costs.

``breakdown.activities`` is never authoritative: every read recomputes it as
the live sum of the trip's activity costs, overwriting whatever was stored.
The four lump categories are owner-entered and spread evenly across trip days.
"""

import math
from collections import defaultdict
from collections.abc import Sequence
from datetime import date

from backend.app.models.activity import Activity
from backend.app.models.budget import (
    BudgetExport,
    BudgetPatch,
    BudgetSummary,
    DailyBreakdown,
    ExportedActivity,
    ExportSummary,
)
from backend.app.models.common import LUMP_CATEGORIES
from backend.app.models.trip import Trip
from backend.app.scheduling.activities import chronological_key


def trip_duration_days(start_date: date, end_date: date) -> int:
    """Trip length in whole days, ``ceil((end - start) / 1 day)``, at least 1."""
    seconds = (end_date - start_date).total_seconds()
    return max(1, math.ceil(seconds / 86400))


def activities_cost(activities: Sequence[Activity]) -> float:
    """Sum of activity cost amounts."""
    return sum((a.cost.amount for a in activities), 0.0)


def get_breakdown(trip: Trip, activities: Sequence[Activity]) -> BudgetSummary:
    """Reconcile the trip budget against its activities.

    Args:
        trip: Trip with owner-entered lump categories
        activities: All activities of the trip

    Returns:
        BudgetSummary with ``breakdown.activities`` recomputed and a daily
        breakdown keyed by ISO date for every day that has activities
    """
    breakdown = trip.budget.breakdown.model_copy(
        update={"activities": activities_cost(activities)}
    )
    trip_days = trip_duration_days(trip.start_date, trip.end_date)

    per_day_lump = {
        category.value: breakdown.amount(category) / trip_days for category in LUMP_CATEGORIES
    }
    lump_total_per_day = sum(per_day_lump.values())

    day_costs: dict[str, float] = defaultdict(float)
    for activity in activities:
        day_costs[activity.date.isoformat()] += activity.cost.amount

    daily_breakdown = {
        day: DailyBreakdown(
            activities=cost,
            total=cost + lump_total_per_day,
            **per_day_lump,
        )
        for day, cost in sorted(day_costs.items())
    }

    total = breakdown.activities + sum(breakdown.amount(c) for c in LUMP_CATEGORIES)

    return BudgetSummary(
        trip_id=trip.trip_id,
        trip_name=trip.name,
        currency=trip.budget.currency,
        total_budget=trip.budget.total,
        total=total,
        breakdown=breakdown,
        daily_breakdown=daily_breakdown,
        activity_count=len(activities),
        trip_days=trip_days,
    )


def update_budget(trip: Trip, patch: BudgetPatch) -> Trip:
    """Apply an owner budget edit.

    Sets ``total``, ``currency`` and individual lump categories. A value for
    ``breakdown.activities`` is silently ignored.
    """
    budget = trip.budget
    updates: dict[str, object] = {}
    if patch.total is not None:
        updates["total"] = patch.total
    if patch.currency is not None:
        updates["currency"] = patch.currency

    if patch.breakdown is not None:
        lump_changes = {
            category.value: getattr(patch.breakdown, category.value)
            for category in LUMP_CATEGORIES
            if getattr(patch.breakdown, category.value) is not None
        }
        if lump_changes:
            updates["breakdown"] = budget.breakdown.model_copy(update=lump_changes)

    return trip.model_copy(update={"budget": budget.model_copy(update=updates)})


def export_budget(trip: Trip, activities: Sequence[Activity]) -> BudgetExport:
    """JSON export of the budget with activities in chronological order."""
    ordered = sorted(activities, key=chronological_key)
    total_cost = activities_cost(ordered)

    return BudgetExport(
        trip_name=trip.name,
        start_date=trip.start_date,
        end_date=trip.end_date,
        currency=trip.budget.currency,
        budget=trip.budget.model_copy(
            update={
                "breakdown": trip.budget.breakdown.model_copy(
                    update={"activities": total_cost}
                )
            }
        ),
        activities=[ExportedActivity.from_activity(a) for a in ordered],
        summary=ExportSummary(
            total_activities=len(ordered),
            total_cost=total_cost,
            average_cost_per_activity=total_cost / len(ordered) if ordered else 0.0,
        ),
    )
