# src/task_tracker/core/state.py

from __future__ import annotations

from dataclasses import dataclass

from .ports import TaskClient, TaskRepo, UserRepo


@dataclass
class AppState:
    # Settings live on the state so connectors do not read global config.
    settings: object

    task_store: TaskRepo
    user_store: UserRepo
    task_client: TaskClient

    # Console session only; the HTTP layer always takes the username per request.
    username: str | None = None
