# src/task_tracker/cli/commands.py

from __future__ import annotations

import logging
import shlex
from collections.abc import Callable

from ..connectors.task_client import TaskClientError
from ..core.state import AppState
from ..tasks.errors import TaskNotFoundError, TaskPersistenceError
from ..tasks.task_models import Task

CommandHandler = Callable[[AppState, list[str]], str]

logger = logging.getLogger(__name__)


class UsageError(Exception):
    """Bad arguments; the message is shown to the user as-is."""


class CommandRegistry:
    """Console command registry (add, list, complete, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, tuple[str, str]] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        usage: str = "",
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = (usage or key, help_text)
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(self, state: AppState, line: str) -> str | None:
        """
        Handle a line like `complete 3` or `add "Buy milk" "2%"`.
        Returns the reply text, or None for a blank line.
        """
        try:
            parts = shlex.split(line)
        except ValueError:
            return "Unbalanced quotes. Wrap multi-word values in double quotes."
        if not parts:
            return None

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: {name}. Type 'help' for available commands."

        try:
            return handler(state, args)
        except UsageError as e:
            return str(e)
        except TaskNotFoundError as e:
            return f"Task {e.task_id} not found."
        except (TaskClientError, TaskPersistenceError) as e:
            logger.info("Command %s failed: %s", name, e)
            return f"Error: {e}"

    def build_help(self) -> str:
        width = max((len(usage) for usage, _ in self._help.values()), default=0)
        lines = ["Commands:"]
        for usage, help_text in self._help.values():
            lines.append(f"  {usage.ljust(width)}  {help_text}")
        lines.append(f"  {'exit'.ljust(width)}  Exit the program")
        return "\n".join(lines)


registry = CommandRegistry()


def format_task(task: Task) -> str:
    return (
        f"ID: {task.id}, Title: {task.title}, Description: {task.description}, "
        f"Completed: {'true' if task.completed else 'false'}"
    )


def _require_login(state: AppState) -> str:
    if not state.username:
        raise UsageError("You must be logged in to manage tasks.")
    return state.username


def _task_id_arg(args: list[str], usage: str) -> int:
    if len(args) != 1:
        raise UsageError(f"Usage: {usage}")
    raw = args[0]
    if not (raw.isascii() and raw.isdigit()) or int(raw) <= 0:
        raise UsageError(f"Invalid task id: {raw}")
    return int(raw)


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_add(state: AppState, args: list[str]) -> str:
    """
    add "<title>" "<description>"

    Title is the first argument; everything after it is the description.
    """
    username = _require_login(state)
    if not args:
        raise UsageError('Usage: add "<title>" "<description>"')

    title = args[0].strip()
    if not title:
        raise UsageError("Title must not be empty.")
    description = " ".join(args[1:])

    task = state.task_client.add_task(username, title, description)
    return f"Task {task.id} added."


def cmd_list(state: AppState, args: list[str]) -> str:
    username = _require_login(state)
    tasks = sorted(state.task_client.list_tasks(username), key=lambda t: t.id)
    if not tasks:
        return "No tasks found."
    return "\n".join(format_task(t) for t in tasks)


def cmd_get(state: AppState, args: list[str]) -> str:
    username = _require_login(state)
    task_id = _task_id_arg(args, "get <id>")
    return format_task(state.task_client.get_task(username, task_id))


def cmd_complete(state: AppState, args: list[str]) -> str:
    username = _require_login(state)
    task_id = _task_id_arg(args, "complete <id>")
    state.task_client.complete_task(username, task_id)
    return f"Task {task_id} marked as completed."


def cmd_delete(state: AppState, args: list[str]) -> str:
    username = _require_login(state)
    task_id = _task_id_arg(args, "delete <id>")
    state.task_client.remove_task(username, task_id)
    return f"Task {task_id} deleted."


def cmd_users(state: AppState, args: list[str]) -> str:
    names = state.user_store.list_users()
    if not names:
        return "No users found."
    return "Users:\n" + "\n".join(f"  {n}" for n in names)


def cmd_whoami(state: AppState, args: list[str]) -> str:
    return f"Logged in as {state.username}." if state.username else "Not logged in."


registry.register("help", cmd_help, "Show this help message", aliases=["h", "?"])
registry.register("add", cmd_add, "Add a new task", usage='add "<title>" "<description>"')
registry.register("list", cmd_list, "List your tasks", aliases=["ls"])
registry.register("get", cmd_get, "Show a single task", usage="get <id>")
registry.register("complete", cmd_complete, "Mark a task as completed", usage="complete <id>", aliases=["done"])
registry.register("delete", cmd_delete, "Delete a task", usage="delete <id>", aliases=["rm"])
registry.register("users", cmd_users, "List registered users", aliases=["listusers"])
registry.register("whoami", cmd_whoami, "Show the logged-in user")
