# src/task_tracker/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used across the app.

The HTTP layer and the console depend on Protocols instead of concrete classes.
This keeps the two task backends (and the two console transports) swappable
and makes testing easier.
"""

from typing import Protocol

from ..tasks.task_models import Task


class TaskRepo(Protocol):
    """
    Storage engine contract, implemented by InMemoryTaskStore and JsonTaskStore.

    Every fallible operation raises TaskNotFoundError when no live task with the
    id is owned by the user (unknown id and foreign id look the same).
    """

    def add_task(self, username: str, title: str, description: str) -> Task: ...
    def remove_task(self, username: str, task_id: int) -> None: ...
    def list_tasks(self, username: str) -> list[Task]: ...
    def get_task(self, username: str, task_id: int) -> Task: ...
    def complete_task(self, username: str, task_id: int) -> None: ...


class UserRepo(Protocol):
    def add_user(self, username: str, password: str) -> object: ...
    def check_password(self, username: str, password: str) -> None: ...
    def user_exists(self, username: str) -> bool: ...
    def list_users(self) -> list[str]: ...


class TaskClient(Protocol):
    """
    What the console talks to: the engine in-process, or the REST API.

    Same operations and the same TaskNotFoundError semantics as TaskRepo.
    """

    def add_task(self, username: str, title: str, description: str) -> Task: ...
    def remove_task(self, username: str, task_id: int) -> None: ...
    def list_tasks(self, username: str) -> list[Task]: ...
    def get_task(self, username: str, task_id: int) -> Task: ...
    def complete_task(self, username: str, task_id: int) -> None: ...
