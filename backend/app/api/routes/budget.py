"""Budget endpoints - reconciled breakdown, owner edits, forecast and export."""

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends

from backend.app.api.auth import get_current_context
from backend.app.api.dependencies import get_trip_service
from backend.app.db.context import RequestContext
from backend.app.models.budget import BudgetExport, BudgetPatch, BudgetSummary, Forecast
from backend.app.models.trip import Budget
from backend.app.scheduling.service import TripService

router = APIRouter(prefix="/budget", tags=["budget"])


@router.get("/{trip_id}", response_model=BudgetSummary)
def get_budget(
    trip_id: uuid.UUID,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    service: Annotated[TripService, Depends(get_trip_service)],
) -> BudgetSummary:
    """Budget with ``breakdown.activities`` recomputed from activity costs."""
    return service.get_budget(ctx, trip_id)


@router.put("/{trip_id}", response_model=Budget)
def update_budget(
    trip_id: uuid.UUID,
    patch: BudgetPatch,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    service: Annotated[TripService, Depends(get_trip_service)],
) -> Budget:
    """Update total, currency and lump categories (owner only).

    Any ``breakdown.activities`` in the body is ignored.
    """
    return service.update_budget(ctx, trip_id, patch)


@router.get("/{trip_id}/forecast", response_model=Forecast)
def get_forecast(
    trip_id: uuid.UUID,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    service: Annotated[TripService, Depends(get_trip_service)],
) -> Forecast:
    return service.get_forecast(ctx, trip_id)


@router.get("/{trip_id}/export", response_model=BudgetExport)
def export_budget(
    trip_id: uuid.UUID,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    service: Annotated[TripService, Depends(get_trip_service)],
) -> BudgetExport:
    return service.export_budget(ctx, trip_id)
