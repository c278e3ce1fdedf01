"""Models package - re-exports for convenience."""

from backend.app.models.activity import (
    Activity,
    ActivityDraft,
    ActivityPage,
    ActivityPatch,
    DestinationRef,
    Placement,
)
from backend.app.models.budget import (
    Advisory,
    AdvisoryCategory,
    AdvisoryType,
    BudgetExport,
    BudgetPatch,
    BudgetSummary,
    DailyBreakdown,
    ExportedActivity,
    ExportSummary,
    Forecast,
    LumpBreakdownPatch,
)
from backend.app.models.common import (
    LUMP_CATEGORIES,
    ActivityType,
    BudgetCategory,
    CollaboratorRole,
    Currency,
    Money,
)
from backend.app.models.itinerary import Collision, Itinerary
from backend.app.models.trip import (
    Budget,
    BudgetBreakdown,
    Collaborator,
    Destination,
    DestinationCandidate,
    DestinationPatch,
    Trip,
    TripDraft,
    TripPage,
    TripPatch,
)

__all__ = [
    # Common
    "Currency",
    "BudgetCategory",
    "LUMP_CATEGORIES",
    "CollaboratorRole",
    "ActivityType",
    "Money",
    # Trip
    "Trip",
    "TripDraft",
    "TripPatch",
    "TripPage",
    "Destination",
    "DestinationCandidate",
    "DestinationPatch",
    "Budget",
    "BudgetBreakdown",
    "Collaborator",
    # Activity
    "Activity",
    "ActivityDraft",
    "ActivityPatch",
    "ActivityPage",
    "DestinationRef",
    "Placement",
    # Itinerary
    "Itinerary",
    "Collision",
    # Budget
    "BudgetSummary",
    "DailyBreakdown",
    "BudgetPatch",
    "LumpBreakdownPatch",
    "Advisory",
    "AdvisoryType",
    "AdvisoryCategory",
    "Forecast",
    "BudgetExport",
    "ExportedActivity",
    "ExportSummary",
]
