"""Shared pytest fixtures for banktrack tests."""

import pytest
from fastapi.testclient import TestClient

from banktrack.api.app import create_app, get_backend
from banktrack.config import Settings
from spans import FakeBackend


@pytest.fixture
def settings():
    """Settings with defaults, independent of the environment."""
    return Settings.from_env({})


@pytest.fixture
def fake_backend():
    """Empty in-memory backend; tests assign corpus/aggregation/error."""
    return FakeBackend()


@pytest.fixture
def client(settings, fake_backend):
    """TestClient whose app uses fake_backend."""
    app = create_app(settings=settings, backend=fake_backend)
    app.dependency_overrides[get_backend] = lambda: fake_backend
    return TestClient(app)
