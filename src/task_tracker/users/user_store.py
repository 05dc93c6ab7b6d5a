# src/task_tracker/users/user_store.py

from __future__ import annotations

import json
import logging
import os
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


class UserStoreError(Exception):
    """User file could not be read or written."""


class UserExistsError(Exception):
    def __init__(self, username: str) -> None:
        super().__init__(f"user {username!r} already exists")
        self.username = username


class AuthenticationError(Exception):
    """Login failed (unknown user or wrong password)."""


class UnknownUserError(AuthenticationError):
    def __init__(self, username: str) -> None:
        super().__init__(f"user {username!r} not found")
        self.username = username


class InvalidPasswordError(AuthenticationError):
    def __init__(self, username: str) -> None:
        super().__init__("invalid password")
        self.username = username


@dataclass(frozen=True, slots=True)
class User:
    username: str
    password: str

    def to_dict(self) -> dict[str, str]:
        return {"username": self.username, "password": self.password}


class UserStore:
    """
    Flat username -> password map.

    Passwords are stored and compared in clear text; there are no sessions.
    With a path the map is mirrored to JSON ({"<username>": {"username", "password"}})
    after every registration; path=None keeps users in memory only.
    """

    def __init__(self, path: str | Path | None = None) -> None:
        self._lock = threading.Lock()
        self._users: dict[str, User] = {}
        self._path = Path(path) if path is not None else None

        if self._path is not None:
            if self._path.exists():
                self._load(self._path)
            else:
                self._path.parent.mkdir(parents=True, exist_ok=True)
                self._save()

        logger.info("UserStore ready path=%s users=%d", self._path, len(self._users))

    def _load(self, path: Path) -> None:
        try:
            data = json.loads(path.read_text("utf-8"))
        except (OSError, ValueError) as exc:
            raise UserStoreError(f"cannot read user file {path}: {exc}") from exc

        if not isinstance(data, dict):
            raise UserStoreError(f"malformed user file {path}: expected an object")

        users: dict[str, User] = {}
        for username, raw in data.items():
            password = raw.get("password") if isinstance(raw, dict) else None
            if not isinstance(password, str):
                raise UserStoreError(
                    f"malformed user file {path}: bad entry for {username!r}"
                )
            users[username] = User(username=username, password=password)
        self._users = users

    def _save(self) -> None:
        if self._path is None:
            return
        document: dict[str, Any] = {name: u.to_dict() for name, u in sorted(self._users.items())}
        tmp = self._path.with_suffix(".tmp")
        try:
            tmp.write_text(json.dumps(document, ensure_ascii=False, indent=2), "utf-8")
            os.replace(tmp, self._path)
        except OSError as exc:
            raise UserStoreError(f"cannot write user file {self._path}: {exc}") from exc

    # ---- public API ----

    def add_user(self, username: str, password: str) -> User:
        username = (username or "").strip()
        if not username:
            raise ValueError("username is required")

        with self._lock:
            if username in self._users:
                raise UserExistsError(username)
            user = User(username=username, password=password)
            self._users[username] = user
            self._save()

        logger.info("User registered username=%s", username)
        return user

    def check_password(self, username: str, password: str) -> None:
        with self._lock:
            user = self._users.get(username)
        if user is None:
            raise UnknownUserError(username)
        if user.password != password:
            raise InvalidPasswordError(username)

    def user_exists(self, username: str) -> bool:
        with self._lock:
            return username in self._users

    def list_users(self) -> list[str]:
        with self._lock:
            return sorted(self._users)
