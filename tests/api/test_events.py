"""Tests for change notification endpoints."""

import time

import pytest
from fastapi.testclient import TestClient

from tasklists.api.app import create_app
from tasklists.container import get_container, reset_container


@pytest.fixture(autouse=True)
def setup_container(store, settings):
    """Set up container with an in-memory store for testing."""
    reset_container()
    container = get_container()
    container.configure_document_store(lambda: store)
    container.configure_task_lists_settings(settings)
    yield
    reset_container()


@pytest.fixture
def client():
    """Create test client."""
    with TestClient(create_app()) as client:
        yield client


def wait_for_runs(client, runs: int, timeout: float = 2.0) -> dict:
    """Poll the queue state until the given number of runs finished."""
    deadline = time.monotonic() + timeout
    while True:
        state = client.get("/events/pending").json()
        if state["runs"] >= runs or time.monotonic() > deadline:
            return state
        time.sleep(0.01)


class TestPostEvent:
    """Tests for POST /events endpoint."""

    def test_event_triggers_run(self, client, store):
        """Should queue a run that rebuilds the aggregate."""
        store.add_document("Tasks.md", "- [ ] a")

        response = client.post("/events", json={"kind": "created", "path": "Tasks.md"})

        assert response.status_code == 202
        assert response.json()["status"] == "queued"
        state = wait_for_runs(client, 1)
        assert state["running"] is True
        assert store.contents_of("TODO.md") == "- [Tasks](Tasks.md)\n\t- [ ] a\n"

    def test_aggregate_edit_syncs_back(self, client, store):
        """Should sync an edited aggregate before rebuilding it."""
        store.add_document("Tasks.md", "- [ ] a")
        store.add_document("TODO.md", "- [Tasks](Tasks.md)\n\t- [x] a\n")

        client.post("/events", json={"kind": "modified", "path": "TODO.md"})
        wait_for_runs(client, 1)

        assert store.contents_of("Tasks.md") == "- [x] a"
        assert store.contents_of("TODO.md") == ""

    def test_invalid_kind(self, client):
        """Should reject unknown event kinds."""
        response = client.post("/events", json={"kind": "exploded", "path": "a.md"})

        assert response.status_code == 422


class TestPendingEvents:
    """Tests for GET /events/pending endpoint."""

    def test_idle_queue(self, client):
        response = client.get("/events/pending")

        assert response.json() == {"pending": 0, "running": True, "runs": 0}
