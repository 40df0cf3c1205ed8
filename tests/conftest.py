"""Shared pytest fixtures for mind map tests."""

import pytest
from httpx import ASGITransport, AsyncClient

from mindmap.db.connection import Database
from mindmap.main import app
from mindmap.maps.router import get_mindmap_service
from mindmap.maps.service import MindMapService
from mindmap.persistence.slots import SlotStore
from tests.fixtures import make_session


@pytest.fixture
def session():
    """Fresh session with deterministic ids (1, 2, 3, ...)."""
    s = make_session()
    yield s
    s.close()


@pytest.fixture
async def db():
    """In-memory database for tests."""
    database = await Database.connect(":memory:")
    yield database
    await database.close()


@pytest.fixture
async def slots(db):
    return SlotStore(db)


@pytest.fixture
async def service(db):
    return MindMapService(db, slot="test", session=make_session())


@pytest.fixture
async def client(service):
    """Async test client with an in-memory slot database wired into the app."""
    app.dependency_overrides[get_mindmap_service] = lambda: service
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client
    app.dependency_overrides.clear()
