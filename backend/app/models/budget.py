"""Budget models - reconciled breakdowns, forecasts and exports."""

import uuid
from datetime import date
from enum import Enum

from pydantic import BaseModel, Field

from backend.app.models.activity import Activity
from backend.app.models.common import Currency
from backend.app.models.trip import Budget, BudgetBreakdown


class DailyBreakdown(BaseModel):
    """Spend attributed to one trip day."""

    activities: float = 0.0
    accommodation: float = 0.0
    transportation: float = 0.0
    food: float = 0.0
    other: float = 0.0
    total: float = 0.0


class BudgetSummary(BaseModel):
    """Reconciled budget view returned by GET /budget/{trip_id}."""

    trip_id: uuid.UUID
    trip_name: str
    currency: Currency
    total_budget: float
    total: float
    breakdown: BudgetBreakdown
    daily_breakdown: dict[str, DailyBreakdown]
    activity_count: int
    trip_days: int


class LumpBreakdownPatch(BaseModel):
    """Owner-editable lump categories.

    ``activities`` is accepted so callers can send a full breakdown back, but
    it is always ignored; that figure is derived from activity costs.
    """

    accommodation: float | None = Field(None, ge=0)
    transportation: float | None = Field(None, ge=0)
    food: float | None = Field(None, ge=0)
    other: float | None = Field(None, ge=0)
    activities: float | None = None


class BudgetPatch(BaseModel):
    """Partial budget update."""

    total: float | None = Field(None, ge=0)
    currency: Currency | None = None
    breakdown: LumpBreakdownPatch | None = None


class AdvisoryType(str, Enum):
    """Severity of a forecast advisory."""

    warning = "warning"
    danger = "danger"
    info = "info"
    success = "success"


class AdvisoryCategory(str, Enum):
    """Area a forecast advisory is about."""

    budget = "budget"
    activities = "activities"
    planning = "planning"


class Advisory(BaseModel):
    """Single forecast recommendation."""

    type: AdvisoryType
    category: AdvisoryCategory
    message: str


class Forecast(BaseModel):
    """Spending forecast derived from reconciled budget state."""

    total_budget: float
    current_spending: float
    remaining_budget: float
    spending_percentage: float
    recommendations: list[Advisory]
    trip_days: int
    days_with_activities: int
    free_days: int
    expensive_activities_count: int


class ExportedActivity(BaseModel):
    """Activity row in a budget export."""

    title: str
    date: date
    start_time: str
    location: str
    cost: float
    type: str

    @classmethod
    def from_activity(cls, activity: Activity) -> "ExportedActivity":
        return cls(
            title=activity.title,
            date=activity.date,
            start_time=activity.start_time,
            location=activity.location_name,
            cost=activity.cost.amount,
            type=activity.type.value,
        )


class ExportSummary(BaseModel):
    """Aggregates over exported activities."""

    total_activities: int
    total_cost: float
    average_cost_per_activity: float


class BudgetExport(BaseModel):
    """JSON budget export for a trip."""

    trip_name: str
    start_date: date
    end_date: date
    currency: Currency
    budget: Budget
    activities: list[ExportedActivity]
    summary: ExportSummary
