"""Pytest configuration and fixtures for engine tests."""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from travelme.engine.db.base import Base
from travelme.engine.db.models import CityRow, PlaceRow  # noqa: F401  register tables
from travelme.engine.metrics.registry import MetricsClient
from tests.helpers import almaty_catalog, make_settings


@pytest.fixture
def settings():
    """Test settings with an API key and short deadlines."""
    return make_settings()


@pytest.fixture
def no_key_settings():
    """Test settings with the placeholder API key."""
    return make_settings(openai_api_key="dummy-openai-api-key-for-tests")


@pytest.fixture
def metrics() -> MetricsClient:
    """Create a fresh metrics client."""
    return MetricsClient()


@pytest.fixture
def catalog():
    """Almaty catalog plus one Astana place."""
    return almaty_catalog()


@pytest.fixture(scope="function")
def test_db_engine():
    """Create a test database engine with in-memory SQLite."""
    # StaticPool shares the single in-memory connection across threads
    engine = create_engine(
        "sqlite:///:memory:",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    Base.metadata.create_all(engine)

    yield engine

    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture(scope="function")
def session_factory(test_db_engine):
    """Session factory bound to the test engine."""
    return sessionmaker(bind=test_db_engine, expire_on_commit=False)
