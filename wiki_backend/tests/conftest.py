import os
from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient

# Ensure we default to memory backend for tests to avoid filesystem dependencies
os.environ.setdefault("PERSISTENCE_BACKEND", "memory")

from src.wiki.db import SQLiteRepository  # noqa: E402
from src.wiki.main import create_app  # noqa: E402
from src.wiki.repositories import InMemoryRepository  # noqa: E402
from src.wiki.settings import Settings  # noqa: E402


class FakeClock:
    """A clock that only moves when told to."""

    def __init__(self, start=datetime(2025, 1, 1, 12, 0, 0)):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds=1):
        self.now = self.now + timedelta(seconds=seconds)
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def repo(clock):
    return InMemoryRepository(clock=clock)


@pytest.fixture(params=["memory", "sqlite"])
def any_repo(request, tmp_path, clock):
    if request.param == "memory":
        return InMemoryRepository(clock=clock)
    return SQLiteRepository(str(tmp_path / "wiki.db"), clock=clock)


@pytest.fixture
def settings():
    return Settings()


@pytest.fixture
def client(settings, repo):
    app = create_app(settings=settings, repository=repo)
    with TestClient(app) as c:
        yield c
