"""Forecast advisor - advisory signals derived from reconciled budget state."""

from collections.abc import Sequence
from dataclasses import dataclass

from backend.app.models.activity import Activity
from backend.app.models.budget import Advisory, AdvisoryCategory, AdvisoryType, Forecast
from backend.app.models.trip import Trip
from backend.app.scheduling.budget import activities_cost, trip_duration_days


@dataclass(frozen=True)
class ForecastThresholds:
    """Advisory trigger points.

    Percentages are strict lower bounds: a spend of exactly 80% does not warn.
    """

    warning_pct: float = 80.0
    danger_pct: float = 100.0
    expensive_ratio: float = 0.10


def forecast(
    trip: Trip,
    activities: Sequence[Activity],
    thresholds: ForecastThresholds | None = None,
) -> Forecast:
    """Compute spending figures and advisories for a trip.

    Every advisory is evaluated independently, so several may fire at once.
    Above 100% both the warning and the danger advisory are emitted.

    Args:
        trip: Trip with owner-entered total budget
        activities: All activities of the trip
        thresholds: Advisory trigger points (defaults 80%, 100%, 10%)

    Returns:
        Forecast with spending figures and ordered recommendations
    """
    limits = thresholds or ForecastThresholds()

    total_budget = trip.budget.total
    current_spending = activities_cost(activities)
    remaining_budget = total_budget - current_spending
    spending_percentage = current_spending * 100 / total_budget if total_budget > 0 else 0.0

    recommendations: list[Advisory] = []

    if spending_percentage > limits.warning_pct:
        recommendations.append(
            Advisory(
                type=AdvisoryType.warning,
                category=AdvisoryCategory.budget,
                message=(
                    f"You've used over {limits.warning_pct:g}% of your budget. "
                    "Consider reducing expenses."
                ),
            )
        )

    if spending_percentage > limits.danger_pct:
        recommendations.append(
            Advisory(
                type=AdvisoryType.danger,
                category=AdvisoryCategory.budget,
                message="You've exceeded your budget. Review your expenses.",
            )
        )

    expensive_threshold = total_budget * limits.expensive_ratio
    expensive_count = sum(1 for a in activities if a.cost.amount > expensive_threshold)
    if expensive_count > 0:
        recommendations.append(
            Advisory(
                type=AdvisoryType.info,
                category=AdvisoryCategory.activities,
                message=f"You have {expensive_count} expensive activities planned.",
            )
        )

    trip_days = trip_duration_days(trip.start_date, trip.end_date)
    days_with_activities = len({a.date for a in activities})
    free_days = trip_days - days_with_activities
    if free_days > 0:
        recommendations.append(
            Advisory(
                type=AdvisoryType.success,
                category=AdvisoryCategory.planning,
                message=(
                    f"You have {free_days} free days which could help with budget management."
                ),
            )
        )

    return Forecast(
        total_budget=total_budget,
        current_spending=current_spending,
        remaining_budget=remaining_budget,
        spending_percentage=spending_percentage,
        recommendations=recommendations,
        trip_days=trip_days,
        days_with_activities=days_with_activities,
        free_days=free_days,
        expensive_activities_count=expensive_count,
    )
