"""Common types and enums shared across all models."""

from enum import Enum

from pydantic import BaseModel, Field


class Currency(str, Enum):
    """Supported budget currencies."""

    USD = "USD"
    EUR = "EUR"
    GBP = "GBP"
    JPY = "JPY"
    CAD = "CAD"
    AUD = "AUD"


class BudgetCategory(str, Enum):
    """Budget breakdown categories."""

    accommodation = "accommodation"
    transportation = "transportation"
    activities = "activities"
    food = "food"
    other = "other"


# Categories entered as one total rather than itemized per activity
LUMP_CATEGORIES: tuple[BudgetCategory, ...] = (
    BudgetCategory.accommodation,
    BudgetCategory.transportation,
    BudgetCategory.food,
    BudgetCategory.other,
)


class CollaboratorRole(str, Enum):
    """Role of a non-owner collaborator on a trip."""

    viewer = "viewer"
    editor = "editor"
    admin = "admin"


class ActivityType(str, Enum):
    """Kind of scheduled activity."""

    sightseeing = "sightseeing"
    food = "food"
    adventure = "adventure"
    culture = "culture"
    shopping = "shopping"
    relaxation = "relaxation"
    transport = "transport"
    other = "other"


class Money(BaseModel):
    """Non-negative monetary amount."""

    amount: float = Field(0.0, ge=0)
    currency: Currency = Currency.USD
