# src/task_tracker/tasks/errors.py

from __future__ import annotations


class TaskStoreError(Exception):
    """Base class for task engine failures."""


class TaskNotFoundError(TaskStoreError):
    """
    No live task with this id is owned by this user.

    Raised both for ids that were never issued and for ids owned by someone
    else, so callers cannot probe other users' task ids.
    """

    def __init__(self, username: str, task_id: int) -> None:
        super().__init__(f"task {task_id} not found for user {username!r}")
        self.username = username
        self.task_id = task_id


class TaskPersistenceError(TaskStoreError):
    """The backing file could not be read at startup or written after a mutation."""
