"""Shared pytest fixtures for all test suites."""

from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

from backend.app.api.dependencies import get_trip_service
from backend.app.config import Settings
from backend.app.db.context import RequestContext
from backend.app.db.inmemory import (
    InMemoryActivityRepository,
    InMemoryTripRepository,
    InMemoryUnitOfWork,
)
from backend.app.db.models import Base
from backend.app.main import app
from backend.app.scheduling.service import TripService
from tests.factories import OWNER_ID


@pytest.fixture
def owner_ctx() -> RequestContext:
    return RequestContext(user_id=OWNER_ID)


@pytest.fixture
def trip_repo() -> InMemoryTripRepository:
    return InMemoryTripRepository()


@pytest.fixture
def activity_repo() -> InMemoryActivityRepository:
    return InMemoryActivityRepository()


@pytest.fixture
def unit_of_work(
    trip_repo: InMemoryTripRepository, activity_repo: InMemoryActivityRepository
) -> InMemoryUnitOfWork:
    return InMemoryUnitOfWork(trip_repo, activity_repo)


@pytest.fixture
def service(
    trip_repo: InMemoryTripRepository,
    activity_repo: InMemoryActivityRepository,
    unit_of_work: InMemoryUnitOfWork,
) -> TripService:
    """Trip service over in-memory repositories with default settings."""
    return TripService(trip_repo, activity_repo, unit_of_work, settings=Settings())


@pytest.fixture
def client(service: TripService) -> Generator[TestClient, None, None]:
    """Test client whose routes share the in-memory ``service`` fixture."""
    app.dependency_overrides[get_trip_service] = lambda: service
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def sqlite_engine() -> Generator[Engine, None, None]:
    """In-memory SQLite engine with the schema created."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def sqlite_session(sqlite_engine: Engine) -> Generator[Session, None, None]:
    with Session(sqlite_engine, expire_on_commit=False) as session:
        yield session
