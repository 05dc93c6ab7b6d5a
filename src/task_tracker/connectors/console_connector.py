# src/task_tracker/connectors/console_connector.py

from __future__ import annotations

import logging
from collections.abc import Callable

from ..cli.commands import registry as command_registry
from ..core.state import AppState
from ..users.user_store import AuthenticationError, UserExistsError, UserStoreError

logger = logging.getLogger(__name__)

InputFn = Callable[[str], str]
OutputFn = Callable[[str], None]

EXIT_COMMANDS = ("exit", "quit")


class _ConsoleClosed(Exception):
    """EOF / Ctrl+C on a prompt."""


def _ask(input_fn: InputFn, prompt: str) -> str:
    try:
        return input_fn(prompt)
    except (EOFError, KeyboardInterrupt) as e:
        raise _ConsoleClosed from e


def _login(state: AppState, input_fn: InputFn, output: OutputFn) -> bool:
    username = _ask(input_fn, "Enter username: ").strip()
    password = _ask(input_fn, "Enter password: ")
    try:
        state.user_store.check_password(username, password)
    except AuthenticationError as e:
        output(f"Login failed: {e}")
        return False

    state.username = username
    logger.info("Console login user=%s", username)
    output("Login successful!")
    return True


def _register(state: AppState, input_fn: InputFn, output: OutputFn) -> bool:
    username = _ask(input_fn, "Enter username: ").strip()
    password = _ask(input_fn, "Enter password: ")
    try:
        state.user_store.add_user(username, password)
    except (UserExistsError, ValueError, UserStoreError) as e:
        output(f"Registration failed: {e}")
        return False

    output("Registration successful! You can now log in.")
    return _login(state, input_fn, output)


def login_or_register(state: AppState, input_fn: InputFn, output: OutputFn) -> bool:
    """Loop until the user is logged in. Returns False if the console was closed."""
    output("Welcome to the Task Manager!")
    try:
        while state.username is None:
            output("Would you like to (1) Login or (2) Register?")
            choice = _ask(input_fn, "> ").strip()
            if choice == "1":
                _login(state, input_fn, output)
            elif choice == "2":
                _register(state, input_fn, output)
            elif choice.lower() in EXIT_COMMANDS:
                return False
            else:
                output("Invalid option. Please enter 1 to Login or 2 to Register.")
    except _ConsoleClosed:
        return False
    return True


def run_console_loop(
    state: AppState,
    *,
    input_fn: InputFn = input,
    output: OutputFn = print,
) -> None:
    logger.info("Console connector started (transport=%s).", type(state.task_client).__name__)

    if state.username is None and not login_or_register(state, input_fn, output):
        logger.info("Console closed before login.")
        return

    output(command_registry.build_help())

    while True:
        try:
            line = _ask(input_fn, "> ").strip()
        except _ConsoleClosed:
            logger.info("Console EOF/interrupt received, exiting.")
            output("")
            break

        if not line:
            continue

        if line.lower() in EXIT_COMMANDS:
            logger.info("Console exit command received.")
            output("Exiting Task Manager.")
            break

        try:
            reply = command_registry.handle(state, line)
        except Exception:
            logger.exception("Command handler crashed.")
            reply = "Internal error while handling a command."

        if reply is not None:
            output(reply)

    logger.info("Console connector finished.")
