# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from task_tracker.connectors.task_client import LocalTaskClient
from task_tracker.core.state import AppState
from task_tracker.tasks.task_store import InMemoryTaskStore, JsonTaskStore
from task_tracker.users.user_store import UserStore
from task_tracker.web.app import create_app


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the bootstrap.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="task-tracker-test",
        log_level="DEBUG",
        data_dir=tmp_path,
        store_backend="memory",
        tasks_path=tmp_path / "tasks.json",
        users_path=tmp_path / "users.json",
        server_enabled=False,
        http_host="127.0.0.1",
        http_port=0,
        console_enabled=False,
        console_transport="local",
        api_base_url="http://testserver",
    )


@pytest.fixture(params=["memory", "json"])
def task_store(request, tmp_path: Path) -> InMemoryTaskStore:
    """Both backends must behave identically from the caller's point of view."""
    if request.param == "json":
        return JsonTaskStore(tmp_path / "tasks.json")
    return InMemoryTaskStore()


@pytest.fixture()
def user_store() -> UserStore:
    users = UserStore(None)
    users.add_user("alice", "alice-pw")
    users.add_user("bob", "bob-pw")
    return users


@pytest.fixture()
def state(settings: SimpleNamespace, user_store: UserStore) -> AppState:
    """
    AppState wired with a real in-memory engine.

    The engine is cheap and its correctness is part of what we want to test,
    so there is no fake task store here.
    """
    store = InMemoryTaskStore()
    return AppState(
        settings=settings,
        task_store=store,
        user_store=user_store,
        task_client=LocalTaskClient(store),
    )


@pytest.fixture()
def app(state: AppState):
    flask_app = create_app(state)
    flask_app.config.update(TESTING=True)
    return flask_app


@pytest.fixture()
def client(app):
    return app.test_client()
