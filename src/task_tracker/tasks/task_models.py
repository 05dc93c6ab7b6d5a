# src/task_tracker/tasks/task_models.py

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class Task:
    """
    A single personal task.

    Records are immutable: the store replaces a stored task with an updated copy
    (only `completed` ever changes), so callers can never mutate engine state.
    """

    id: int
    title: str
    description: str
    completed: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "completed": self.completed,
        }

    @classmethod
    def from_dict(cls, raw: Any) -> Task:
        if not isinstance(raw, Mapping):
            raise ValueError(f"task must be an object, got {type(raw).__name__}")

        task_id = raw.get("id")
        # bool is an int subclass; reject it explicitly.
        if not isinstance(task_id, int) or isinstance(task_id, bool) or task_id <= 0:
            raise ValueError(f"task id must be a positive integer, got {task_id!r}")

        title = raw.get("title", "")
        description = raw.get("description", "")
        completed = raw.get("completed", False)
        if not isinstance(title, str):
            raise ValueError(f"task {task_id}: title must be a string")
        if not isinstance(description, str):
            raise ValueError(f"task {task_id}: description must be a string")
        if not isinstance(completed, bool):
            raise ValueError(f"task {task_id}: completed must be a boolean")

        return cls(id=task_id, title=title, description=description, completed=completed)
