"""FastAPI application."""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from backend.app.api.routes.activities import router as activities_router
from backend.app.api.routes.budget import router as budget_router
from backend.app.api.routes.destinations import router as destinations_router
from backend.app.api.routes.health import router as health_router
from backend.app.api.routes.metrics import router as metrics_router
from backend.app.api.routes.trips import router as trips_router
from backend.app.scheduling.errors import (
    AuthorizationError,
    ConcurrencyError,
    NotFoundError,
    OutOfBoundsError,
    OverlapError,
    SchedulingError,
    ValidationError,
)

app = FastAPI(title="Trip Scheduler API", version="0.1.0")

# Most specific class wins; anything unlisted falls back to 400
ERROR_STATUS: dict[type[SchedulingError], int] = {
    ValidationError: 400,
    OutOfBoundsError: 400,
    OverlapError: 409,
    NotFoundError: 404,
    AuthorizationError: 403,
    ConcurrencyError: 409,
}


def status_for(error: SchedulingError) -> int:
    """HTTP status for an engine error."""
    for cls in type(error).__mro__:
        if cls in ERROR_STATUS:
            return ERROR_STATUS[cls]
    return 400


@app.exception_handler(SchedulingError)
async def scheduling_error_handler(request: Request, exc: SchedulingError) -> JSONResponse:
    return JSONResponse(status_code=status_for(exc), content=exc.to_dict())


# Register routes
app.include_router(health_router, tags=["health"])
app.include_router(metrics_router, tags=["metrics"])
app.include_router(trips_router)
app.include_router(destinations_router)
app.include_router(activities_router)
app.include_router(budget_router)


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {"message": "Trip Scheduler API", "version": "0.1.0"}
