# tests/fakes.py

from __future__ import annotations

from collections.abc import Iterable

from task_tracker.connectors.task_client import TaskClientError
from task_tracker.tasks.task_models import Task


class ScriptedInput:
    """
    Deterministic replacement for input() in console tests.

    - Captures prompts for assertions
    - Raises EOFError once the script is exhausted (like a closed stdin)
    """

    def __init__(self, lines: Iterable[str]) -> None:
        self._lines = list(lines)
        self.prompts: list[str] = []

    def __call__(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if not self._lines:
            raise EOFError
        return self._lines.pop(0)


class OutputCollector:
    def __init__(self) -> None:
        self.lines: list[str] = []

    def __call__(self, text: str) -> None:
        self.lines.append(text)

    @property
    def text(self) -> str:
        return "\n".join(self.lines)


class UnreachableTaskClient:
    """TaskClient whose server is down: every call fails at the transport level."""

    def _fail(self) -> None:
        raise TaskClientError("request failed: connection refused")

    def add_task(self, username: str, title: str, description: str) -> Task:
        self._fail()
        raise AssertionError("unreachable")

    def remove_task(self, username: str, task_id: int) -> None:
        self._fail()

    def list_tasks(self, username: str) -> list[Task]:
        self._fail()
        return []

    def get_task(self, username: str, task_id: int) -> Task:
        self._fail()
        raise AssertionError("unreachable")

    def complete_task(self, username: str, task_id: int) -> None:
        self._fail()
