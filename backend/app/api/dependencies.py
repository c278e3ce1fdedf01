"""FastAPI dependencies wiring repositories into the trip service."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.orm import Session

from backend.app.config import Settings, get_settings
from backend.app.db.engine import get_session
from backend.app.db.sql_repositories import (
    SqlActivityRepository,
    SqlTripRepository,
    SqlUnitOfWork,
)
from backend.app.scheduling.service import TripService


def get_trip_service(
    session: Annotated[Session, Depends(get_session)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> TripService:
    """Request-scoped service over SQL repositories sharing one session."""
    return TripService(
        SqlTripRepository(session),
        SqlActivityRepository(session),
        SqlUnitOfWork(session),
        settings=settings,
    )
