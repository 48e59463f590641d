"""Pytest configuration for store service tests."""

import fakeredis
import pytest
from fastapi.testclient import TestClient

from services.store_service.cart_repository import CartRepository
from services.store_service.cart_service import CartService
from services.store_service.catalog_service import CatalogService
from services.store_service.main import Settings, create_app
from shared.database import build_engine, build_session_factory, init_db

from .factories import RecordingProducer


@pytest.fixture
def redis_client():
    """Fresh in-memory Redis per test."""
    return fakeredis.FakeRedis(server=fakeredis.FakeServer(), decode_responses=True)


@pytest.fixture
def session_factory():
    """Fresh in-memory SQLite database per test."""
    engine = build_engine("sqlite://")
    init_db(engine)
    yield build_session_factory(engine)
    engine.dispose()


@pytest.fixture
def catalog(session_factory):
    return CatalogService(session_factory)


@pytest.fixture
def carts(redis_client, catalog):
    return CartService(CartRepository(redis_client), catalog)


@pytest.fixture
def producer():
    return RecordingProducer()


@pytest.fixture
def settings():
    return Settings(database_url="sqlite://", seed_demo_data=False, kafka_bootstrap_servers="")


@pytest.fixture
def client(settings, redis_client, producer):
    """TestClient with the lifespan running (services on app.state)."""
    app = create_app(settings, redis_client=redis_client, producer=producer)
    with TestClient(app) as test_client:
        yield test_client
