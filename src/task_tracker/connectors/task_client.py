# src/task_tracker/connectors/task_client.py

"""
Console transports.

LocalTaskClient calls the engine in-process; HttpTaskClient speaks the REST
contract of web.app. Both raise TaskNotFoundError for a missing/foreign task
so command handlers do not care which one they got.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from ..core.ports import TaskRepo
from ..tasks.errors import TaskNotFoundError
from ..tasks.task_models import Task

logger = logging.getLogger(__name__)


class TaskClientError(Exception):
    """Transport failure or unexpected HTTP status."""


class LocalTaskClient:
    def __init__(self, task_store: TaskRepo) -> None:
        self._store = task_store

    def add_task(self, username: str, title: str, description: str) -> Task:
        return self._store.add_task(username, title, description)

    def remove_task(self, username: str, task_id: int) -> None:
        self._store.remove_task(username, task_id)

    def list_tasks(self, username: str) -> list[Task]:
        return self._store.list_tasks(username)

    def get_task(self, username: str, task_id: int) -> Task:
        return self._store.get_task(username, task_id)

    def complete_task(self, username: str, task_id: int) -> None:
        self._store.complete_task(username, task_id)


class HttpTaskClient:
    def __init__(
        self,
        base_url: str,
        *,
        client: httpx.Client | None = None,
        timeout: float = 10.0,
    ) -> None:
        self._client = client or httpx.Client(base_url=base_url, timeout=timeout)

    def close(self) -> None:
        self._client.close()

    def _request(
        self,
        method: str,
        path: str,
        username: str,
        *,
        task_id: int | None = None,
        json: Any = None,
    ) -> httpx.Response:
        try:
            resp = self._client.request(method, path, params={"username": username}, json=json)
        except httpx.HTTPError as e:
            logger.debug("HTTP %s %s failed", method, path, exc_info=True)
            raise TaskClientError(f"request failed: {e}") from e

        if resp.status_code == 404 and task_id is not None:
            raise TaskNotFoundError(username, task_id)
        if resp.is_error:
            raise TaskClientError(f"{method} {path} -> {resp.status_code}: {_error_text(resp)}")
        return resp

    def add_task(self, username: str, title: str, description: str) -> Task:
        resp = self._request(
            "POST", "/tasks", username, json={"title": title, "description": description}
        )
        return Task.from_dict(resp.json())

    def remove_task(self, username: str, task_id: int) -> None:
        self._request("DELETE", f"/tasks/{task_id}", username, task_id=task_id)

    def list_tasks(self, username: str) -> list[Task]:
        resp = self._request("GET", "/tasks", username)
        return [Task.from_dict(raw) for raw in resp.json()]

    def get_task(self, username: str, task_id: int) -> Task:
        resp = self._request("GET", f"/tasks/{task_id}", username, task_id=task_id)
        return Task.from_dict(resp.json())

    def complete_task(self, username: str, task_id: int) -> None:
        self._request("PUT", f"/tasks/{task_id}", username, task_id=task_id)


def _error_text(resp: httpx.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        return resp.text.strip() or resp.reason_phrase
    if isinstance(body, dict) and "error" in body:
        return str(body["error"])
    return resp.reason_phrase
