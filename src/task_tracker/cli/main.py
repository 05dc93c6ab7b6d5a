# src/task_tracker/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, then starts:
- the REST API + HTML views in a background thread (optional),
- the console REPL in the main thread (optional).
"""

from __future__ import annotations

import dataclasses
import logging
import signal
import threading

import click

from ..cli.bootstrap import create_initial_state
from ..config import Settings, get_settings
from ..connectors.console_connector import run_console_loop
from ..logging_setup import setup_logging
from ..tasks.errors import TaskPersistenceError
from ..users.user_store import UserStoreError
from ..web.app import create_app
from ..web.server import ServerBackgroundRunner, run_server_in_background

logger = logging.getLogger(__name__)


def _apply_overrides(settings: Settings, **overrides) -> Settings:
    changes = {k: v for k, v in overrides.items() if v is not None}
    # Follow --port only while the API URL is still the one derived from host:port.
    derived_url = f"http://{settings.http_host}:{settings.http_port}"
    if "http_port" in changes and settings.api_base_url == derived_url:
        changes["api_base_url"] = f"http://{settings.http_host}:{changes['http_port']}"
    return dataclasses.replace(settings, **changes) if changes else settings


def _shutdown(state) -> None:
    """Best-effort shutdown (no exceptions should escape)."""
    try:
        client = getattr(state, "task_client", None)
        if client is not None and hasattr(client, "close"):
            client.close()
    except Exception:
        logger.debug("Task client close failed.", exc_info=True)


@click.command()
@click.option(
    "--store",
    "store_backend",
    type=click.Choice(["memory", "json"]),
    default=None,
    help="Task store backend (default: TASKTRACKER_STORE or memory).",
)
@click.option("--port", "http_port", type=int, default=None, help="HTTP port (default: 8080).")
@click.option(
    "--transport",
    "console_transport",
    type=click.Choice(["local", "http"]),
    default=None,
    help="How the console reaches the task engine.",
)
@click.option("--no-server", is_flag=True, help="Do not start the REST API.")
@click.option("--no-console", is_flag=True, help="Run the REST API only.")
def main(
    store_backend: str | None,
    http_port: int | None,
    console_transport: str | None,
    no_server: bool,
    no_console: bool,
) -> None:
    settings = _apply_overrides(
        get_settings(),
        store_backend=store_backend,
        http_port=http_port,
        console_transport=console_transport,
        server_enabled=False if no_server else None,
        console_enabled=False if no_console else None,
    )

    level_name = str(settings.log_level).upper()
    console_level = getattr(logging, level_name, logging.INFO)
    setup_logging(log_dir=settings.data_dir, console_level=console_level)

    logger.info("Starting %s (store=%s)...", settings.app_name, settings.store_backend)

    try:
        state = create_initial_state(settings=settings)
    except (TaskPersistenceError, UserStoreError) as e:
        logger.error("Cannot load data files: %s", e)
        raise SystemExit(1) from e

    server: ServerBackgroundRunner | None = None
    if settings.server_enabled:
        try:
            server = run_server_in_background(create_app(state), settings.http_host, settings.http_port)
        except OSError as e:
            logger.error("Cannot start REST API on %s:%s: %s", settings.http_host, settings.http_port, e)
            raise SystemExit(1) from e

    stop_main = threading.Event()

    def _handle_signal(signum, _frame) -> None:
        logger.info("Signal %s received, shutting down...", signum)
        stop_main.set()

    try:
        if settings.console_enabled:
            run_console_loop(state)
        elif server is not None:
            # Signal handlers only when the console does not own Ctrl+C.
            signal.signal(signal.SIGINT, _handle_signal)
            signal.signal(signal.SIGTERM, _handle_signal)
            logger.info("Console disabled. Serving the REST API only. Press Ctrl+C to stop.")
            stop_main.wait()
        else:
            logger.warning("Both the console and the REST API are disabled; nothing to do.")
    finally:
        if server is not None:
            server.stop()
            server.join(timeout=10.0)

        _shutdown(state)
        logger.info("Bye.")


if __name__ == "__main__":
    main()
