"""Pytest fixtures for server module testing."""

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from navstate import Settings, SnapshotStore
from server.main import create_app
from tests.server.helpers import ControlledSource


@pytest.fixture
def source() -> ControlledSource:
    return ControlledSource()


@pytest.fixture
def store() -> SnapshotStore:
    return SnapshotStore(recent_lines=5)


@pytest.fixture
def client(source: ControlledSource, store: SnapshotStore) -> Iterator[TestClient]:
    settings = Settings(reconnect_delay=0.01, log_level="DEBUG")
    app = create_app(settings=settings, source_factory=lambda: source, store=store)
    with TestClient(app) as test_client:
        yield test_client
