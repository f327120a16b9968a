"""
Pytest fixtures for User Registry tests. Each test gets a fresh registry and app.
"""

from __future__ import annotations

import pytest

TEST_TOKEN = "test-secret"


@pytest.fixture
def settings():
    from user_registry.config import Settings

    return Settings(api_token=TEST_TOKEN)


@pytest.fixture
def registry():
    from user_registry.registry import UserRegistry

    return UserRegistry()


@pytest.fixture
def app(settings, registry):
    from user_registry.api_server.server import create_app

    return create_app(settings=settings, registry=registry)


@pytest.fixture
def client(app):
    """FastAPI TestClient over a fresh app; no Authorization header by default."""
    from fastapi.testclient import TestClient

    return TestClient(app)


@pytest.fixture
def auth_headers():
    return {"Authorization": f"Bearer {TEST_TOKEN}"}


@pytest.fixture
def log_events(app):
    """
    Capture structlog event dicts emitted while the test runs.

    Depends on app so create_app()'s configure_logging() has already run.
    """
    from structlog.testing import capture_logs

    with capture_logs() as captured:
        yield captured


@pytest.fixture
def log_stream(app):
    """Route rendered log lines to a buffer; restore stdout/JSON/INFO afterwards."""
    import io

    from user_registry.registry_logging import configure_logging

    buf = io.StringIO()
    configure_logging("INFO", "json", file=buf)
    yield buf
    configure_logging()
