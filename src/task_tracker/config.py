# src/task_tracker/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app (normal "settings layer").
- Nothing is read at import time except the local .env file.
- CLI flags override single fields via dataclasses.replace, never by mutation.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "TASKTRACKER"

load_dotenv(override=False)


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_choice(name: str, choices: tuple[str, ...], default: str) -> str:
    raw = _env(name, default).strip().lower()
    return raw if raw in choices else default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Storage ----
    data_dir: Path
    store_backend: str  # "memory" | "json"
    tasks_path: Path
    users_path: Path

    # ---- HTTP server ----
    server_enabled: bool
    http_host: str
    http_port: int

    # ---- Console ----
    console_enabled: bool
    console_transport: str  # "local" | "http"
    api_base_url: str

    @staticmethod
    def from_env() -> Settings:
        app_name = _env(_k("APP_NAME"), "task-tracker").strip() or "task-tracker"
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/task-tracker"))
        store_backend = _env_choice(_k("STORE"), ("memory", "json"), "memory")
        tasks_path = _env_path(_k("TASKS_PATH"), data_dir / "tasks.json")
        users_path = _env_path(_k("USERS_PATH"), data_dir / "users.json")

        server_enabled = _env_bool(_k("SERVER_ENABLED"), True)
        http_host = _env(_k("HTTP_HOST"), "127.0.0.1").strip() or "127.0.0.1"
        http_port = _env_int(_k("HTTP_PORT"), 8080)

        console_enabled = _env_bool(_k("CONSOLE_ENABLED"), True)
        console_transport = _env_choice(_k("CONSOLE_TRANSPORT"), ("local", "http"), "local")
        # Default follows host/port so the console finds our own server.
        api_base_url = _env(_k("API_BASE_URL"), f"http://{http_host}:{http_port}").rstrip("/")

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            store_backend=store_backend,
            tasks_path=tasks_path,
            users_path=users_path,
            server_enabled=server_enabled,
            http_host=http_host,
            http_port=http_port,
            console_enabled=console_enabled,
            console_transport=console_transport,
            api_base_url=api_base_url,
        )


_SETTINGS: Settings | None = None


def get_settings() -> Settings:
    global _SETTINGS
    if _SETTINGS is None:
        _SETTINGS = Settings.from_env()
    return _SETTINGS
