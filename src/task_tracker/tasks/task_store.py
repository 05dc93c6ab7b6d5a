# src/task_tracker/tasks/task_store.py

from __future__ import annotations

import json
import logging
import os
import threading
from dataclasses import replace
from pathlib import Path
from typing import Any

from .errors import TaskNotFoundError, TaskPersistenceError
from .id_allocator import IdAllocator
from .task_models import Task

logger = logging.getLogger(__name__)

STORE_BACKENDS = ("memory", "json")


class InMemoryTaskStore:
    """
    Task store held entirely in process memory.

    Layout: username -> {task_id -> Task}. Ids come from one allocator shared
    by all users, so an id is live for at most one user at a time.

    Thread-safety:
    - one lock per instance, held for the full duration of every operation
      (including the persist step of subclasses), so operations are linearizable.
    - coarse on purpose: unrelated users serialize too. Higher write throughput
      would need sharding by user or a real embedded database.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._tasks: dict[str, dict[int, Task]] = {}
        self._ids = IdAllocator()

    # ---- hooks / helpers (lock must be held) ----

    def _persist(self) -> None:
        """Called after every successful mutation while the lock is held."""
        return

    def _owned_task(self, username: str, task_id: int) -> Task:
        task = self._tasks.get(username, {}).get(task_id)
        if task is None:
            raise TaskNotFoundError(username, task_id)
        return task

    # ---- public API ----

    def count_tasks(self) -> int:
        with self._lock:
            return sum(len(user_tasks) for user_tasks in self._tasks.values())

    def add_task(self, username: str, title: str, description: str) -> Task:
        with self._lock:
            task = Task(id=self._ids.allocate(), title=title, description=description)
            self._tasks.setdefault(username, {})[task.id] = task
            logger.debug("Task added id=%s user=%s", task.id, username)
            self._persist()
            return task

    def remove_task(self, username: str, task_id: int) -> None:
        with self._lock:
            self._owned_task(username, task_id)

            user_tasks = self._tasks[username]
            del user_tasks[task_id]
            if not user_tasks:
                del self._tasks[username]
            self._ids.reclaim(task_id)

            logger.debug("Task removed id=%s user=%s", task_id, username)
            self._persist()

    def list_tasks(self, username: str) -> list[Task]:
        with self._lock:
            return list(self._tasks.get(username, {}).values())

    def get_task(self, username: str, task_id: int) -> Task:
        with self._lock:
            return self._owned_task(username, task_id)

    def complete_task(self, username: str, task_id: int) -> None:
        with self._lock:
            task = self._owned_task(username, task_id)
            self._tasks[username][task_id] = replace(task, completed=True)
            logger.debug("Task completed id=%s user=%s", task_id, username)
            self._persist()


class JsonTaskStore(InMemoryTaskStore):
    """
    Task store mirrored to a single JSON document.

    File layout:
        {"<username>": {"<task id>": {"id", "title", "description", "completed"}}}

    Every mutation rewrites the whole document before the call returns
    (temp file + os.replace, under the store lock). A failed write raises
    TaskPersistenceError but leaves the in-memory change in place.

    Startup:
    - missing file -> created holding {}
    - unreadable / malformed file -> TaskPersistenceError (fatal for the app)
    """

    def __init__(self, path: str | Path = "tasks.json") -> None:
        super().__init__()
        self._path = Path(path)

        if self._path.exists():
            self._load()
        else:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._write({})

        logger.info(
            "JsonTaskStore ready path=%s total=%s high_water_mark=%s free=%d",
            self._path,
            self.count_tasks(),
            self._ids.high_water_mark,
            len(self._ids.free_ids),
        )

    @property
    def path(self) -> Path:
        return self._path

    # ---- load / save ----

    def _load(self) -> None:
        try:
            data = json.loads(self._path.read_text("utf-8"))
        except (OSError, ValueError) as exc:
            raise TaskPersistenceError(f"cannot read task file {self._path}: {exc}") from exc

        try:
            tasks = self._parse_document(data)
        except ValueError as exc:
            raise TaskPersistenceError(f"malformed task file {self._path}: {exc}") from exc

        self._tasks = tasks
        self._ids = IdAllocator.from_live_ids(
            task_id for user_tasks in tasks.values() for task_id in user_tasks
        )

    @staticmethod
    def _parse_document(data: Any) -> dict[str, dict[int, Task]]:
        if not isinstance(data, dict):
            raise ValueError("top level must be an object keyed by username")

        out: dict[str, dict[int, Task]] = {}
        owners: dict[int, str] = {}
        for username, raw_tasks in data.items():
            if not isinstance(raw_tasks, dict):
                raise ValueError(f"tasks of user {username!r} must be an object keyed by id")

            user_tasks: dict[int, Task] = {}
            for key, raw in raw_tasks.items():
                task = Task.from_dict(raw)
                if key != str(task.id):
                    raise ValueError(f"key {key!r} does not match task id {task.id}")
                if task.id in owners:
                    raise ValueError(
                        f"task id {task.id} is held by both {owners[task.id]!r} and {username!r}"
                    )
                owners[task.id] = username
                user_tasks[task.id] = task

            if user_tasks:
                out[username] = user_tasks
        return out

    def _snapshot(self) -> dict[str, dict[str, dict[str, Any]]]:
        return {
            username: {str(task_id): task.to_dict() for task_id, task in sorted(user_tasks.items())}
            for username, user_tasks in sorted(self._tasks.items())
        }

    def _write(self, document: dict[str, Any]) -> None:
        tmp = self._path.with_suffix(".tmp")
        try:
            tmp.write_text(json.dumps(document, ensure_ascii=False, indent=2), "utf-8")
            os.replace(tmp, self._path)
        except OSError as exc:
            raise TaskPersistenceError(f"cannot write task file {self._path}: {exc}") from exc

    def _persist(self) -> None:
        self._write(self._snapshot())
        logger.debug("Task file saved path=%s users=%d", self._path, len(self._tasks))


def create_task_store(backend: str, tasks_path: str | Path) -> InMemoryTaskStore:
    """Pick the backend once, at construction time."""
    name = (backend or "").strip().lower()
    if name == "memory":
        logger.info("Using in-memory task store (state is lost on exit).")
        return InMemoryTaskStore()
    if name == "json":
        return JsonTaskStore(tasks_path)
    raise ValueError(f"unknown task store backend {backend!r}; expected one of {STORE_BACKENDS}")
