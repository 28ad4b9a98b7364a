import pytest
from fastapi.testclient import TestClient

from core import db
from main import app


class FakePool:
    """
    Stands in for the asyncpg pool in HTTP tests. Repository functions are
    monkeypatched, so nothing ever queries it.
    """


@pytest.fixture
def fake_pool():
    return FakePool()


@pytest.fixture
def client(fake_pool):
    # No `with` block: the lifespan (real pool + bootstrap) is not run.
    app.dependency_overrides[db.get_pool] = lambda: fake_pool
    yield TestClient(app)
    app.dependency_overrides.clear()
