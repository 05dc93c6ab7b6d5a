# src/task_tracker/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures the local (gitignored) data directory exists,
- picks the task backend and the console transport at construction time,
- wires everything into AppState.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..connectors.task_client import HttpTaskClient, LocalTaskClient
from ..core.ports import TaskClient
from ..core.state import AppState
from ..tasks.task_store import create_task_store
from ..users.user_store import UserStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    if settings.store_backend == "json":
        settings.tasks_path.parent.mkdir(parents=True, exist_ok=True)
    settings.users_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().

    Raises TaskPersistenceError / UserStoreError when an existing data file
    cannot be loaded; callers treat that as fatal.
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    task_store = create_task_store(settings.store_backend, settings.tasks_path)
    user_store = UserStore(settings.users_path)

    task_client: TaskClient
    if settings.console_transport == "http":
        task_client = HttpTaskClient(settings.api_base_url)
        logger.info("Console talks to the REST API at %s", settings.api_base_url)
    else:
        task_client = LocalTaskClient(task_store)

    return AppState(
        settings=settings,
        task_store=task_store,
        user_store=user_store,
        task_client=task_client,
    )
