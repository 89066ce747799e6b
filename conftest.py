"""
Pytest configuration and shared fixtures
"""
import itertools
import pytest
from fastapi.testclient import TestClient

from app import database
from app.database import get_store
from app.services.api_client import ApiClient
from app.services.local_storage import MemoryStorage
from app.services.notification_service import NotificationService
from app.store import RelationalStore
from main import app
from seed_all import build_seed

# Base URL the TestClient answers on
TEST_API_URL = "http://testserver/api"


def sequential_ids():
    """Id factory producing user-1, team-2, ... in creation order"""
    counter = itertools.count(1)
    return lambda prefix: f"{prefix}-{next(counter)}"


@pytest.fixture
def notifier():
    return NotificationService()


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def store(storage, notifier):
    """Empty store with predictable ids"""
    return RelationalStore(storage=storage, notifier=notifier, id_factory=sequential_ids())


@pytest.fixture
def seeded_store():
    """Store holding the demo organisation, reporting to the server's notifier"""
    return RelationalStore.load(
        MemoryStorage(),
        seed=build_seed(),
        notifier=database.notifier,
        id_factory=sequential_ids()
    )


@pytest.fixture
def client(seeded_store):
    """Demo server test client backed by the seeded store"""
    app.dependency_overrides[get_store] = lambda: seeded_store
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def api(client):
    """ApiClient talking to the demo server through the test client"""
    return ApiClient(base_url=TEST_API_URL, storage=MemoryStorage(), session=client, timeout=0)
