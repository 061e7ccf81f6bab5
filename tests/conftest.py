"""Pytest configuration and shared fixtures for James OS tests."""

import tempfile
from pathlib import Path

import pytest

from src.app import create_app
from src.services.config_service import reset_config_service
from src.services.event_bus import EventBus
from src.services.log_store import FileLogStore, LogStore


@pytest.fixture(autouse=True)
def reset_singletons(monkeypatch):
    """Keep config and environment from leaking between tests."""
    for name in ("PORT", "HOST", "LOG_STORE_BACKEND", "LOG_STORE_CAPACITY", "LOG_STORE_FILE"):
        monkeypatch.delenv(name, raising=False)
    reset_config_service()
    yield
    reset_config_service()


@pytest.fixture
def temp_dir():
    """Create a temporary directory."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def event_bus():
    """Create an EventBus instance."""
    return EventBus(buffer_size=10)


@pytest.fixture
def store(event_bus):
    """Create an in-memory LogStore wired to an event bus."""
    return LogStore(event_bus=event_bus)


@pytest.fixture
def file_store(temp_dir):
    """Create a FileLogStore backed by a temporary file."""
    return FileLogStore(temp_dir / "logs.json")


@pytest.fixture
def app(temp_dir, store):
    """Create a test Flask application serving the in-memory store."""
    app = create_app(str(temp_dir / "config.yaml"), log_store=store)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()
