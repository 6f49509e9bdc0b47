import os

# Must be set before importing app so nothing touches the real data file or static dir.
os.environ.setdefault("TODO_DATA_FILE", os.path.join(os.path.dirname(__file__), "unused-todos.json"))
os.environ.setdefault("TODO_STATIC_DIR", os.path.join(os.path.dirname(__file__), "no-static"))

import httpx
import pytest
from fastapi.testclient import TestClient

from api_client import TodoApiClient
from app import app, get_store
from controller import TodoController
from store import FileTaskStore, LocalTaskStore
from tests.fakes import API_URL, SwitchableTransport


@pytest.fixture
def store(tmp_path):
    """An empty server-side store in a per-test temp file (not initialized)."""
    return FileTaskStore(tmp_path / "todos.json")


@pytest.fixture
def local_store(tmp_path):
    """The client's fallback store, empty."""
    return LocalTaskStore(tmp_path / "local-storage.json")


@pytest.fixture
def api_app(store):
    """
    The FastAPI app with get_store overridden to the per-test store.

    The app's startup event is never run: tests use TestClient without the
    context manager and httpx.ASGITransport, neither of which sends lifespan
    events. Tests that want the default tasks call store.initialize().
    """
    app.dependency_overrides[get_store] = lambda: store
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(api_app):
    return TestClient(api_app, raise_server_exceptions=True)


@pytest.fixture
def transport(api_app):
    """ASGI transport into the app that a test can switch off to simulate an outage."""
    return SwitchableTransport(api_app)


@pytest.fixture
def controller(transport, local_store):
    """A controller talking to the in-process API, with a local fallback store."""
    http = httpx.AsyncClient(transport=transport)
    return TodoController(TodoApiClient(API_URL, client=http), local_store)
