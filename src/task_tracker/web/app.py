# src/task_tracker/web/app.py

"""
HTTP layer: REST API for tasks/users plus a thin HTML front end.

Routes only translate requests into engine calls and serialize results.
The username gate (missing -> 400, unknown -> 404) runs before the engine.
"""

from __future__ import annotations

import logging
import uuid
from typing import Any

from flask import Blueprint, Flask, current_app, g, jsonify, redirect, render_template, request, url_for
from werkzeug.wrappers import Request

from ..core.state import AppState
from ..tasks.errors import TaskNotFoundError, TaskPersistenceError
from ..users.user_store import AuthenticationError, UserExistsError, UserStoreError

logger = logging.getLogger(__name__)

STATE_KEY = "task_tracker"
FORM_OVERRIDE_KEY = "task_tracker.method_override"

api = Blueprint("api", __name__)
views = Blueprint("views", __name__)


class ApiError(Exception):
    def __init__(self, status: int, message: str) -> None:
        super().__init__(message)
        self.status = status
        self.message = message


class MethodOverrideMiddleware:
    """
    HTML forms can only POST. `POST ...?_method=PUT|DELETE` is rewritten
    to the real method before Flask routes the request.
    """

    allowed_methods = frozenset({"PUT", "DELETE"})

    def __init__(self, app: Any) -> None:
        self.app = app

    def __call__(self, environ: dict[str, Any], start_response: Any) -> Any:
        if environ.get("REQUEST_METHOD", "").upper() == "POST":
            # Only the query string is read; the body stays untouched.
            method = Request(environ).args.get("_method", "").upper()
            if method in self.allowed_methods:
                environ["REQUEST_METHOD"] = method
                environ[FORM_OVERRIDE_KEY] = True
        return self.app(environ, start_response)


def _state() -> AppState:
    return current_app.extensions[STATE_KEY]


def _trace_id() -> str:
    return getattr(g, "trace_id", "-")


def _require_user() -> str:
    username = (request.args.get("username") or "").strip()
    if not username:
        raise ApiError(400, "username is required")
    if not _state().user_store.user_exists(username):
        raise ApiError(404, f"unknown user {username!r}")
    return username


def _parse_task_id(raw: str) -> int:
    if not (raw.isascii() and raw.isdigit()) or int(raw) <= 0:
        raise ApiError(400, "invalid task id")
    return int(raw)


def _json_object() -> dict[str, Any]:
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        raise ApiError(400, "request body must be a JSON object")
    return body


def _string_field(body: dict[str, Any], name: str) -> str:
    value = body.get(name, "")
    if not isinstance(value, str):
        raise ApiError(400, f"{name} must be a string")
    return value


def _back_to_view(username: str) -> Any:
    return redirect(url_for("views.task_view", username=username), code=303)


# ---- REST API: tasks ----


@api.route("/tasks", methods=["GET", "POST"])
def tasks_collection() -> Any:
    username = _require_user()
    store = _state().task_store

    if request.method == "GET":
        logger.info("Listing tasks user=%s trace_id=%s", username, _trace_id())
        return jsonify([t.to_dict() for t in store.list_tasks(username)])

    body = _json_object()
    title = _string_field(body, "title")
    description = _string_field(body, "description")
    task = store.add_task(username, title, description)
    logger.info("Added task id=%s user=%s trace_id=%s", task.id, username, _trace_id())
    return jsonify(task.to_dict()), 201


@api.route("/tasks/<task_id>", methods=["GET", "PUT", "DELETE"])
def single_task(task_id: str) -> Any:
    tid = _parse_task_id(task_id)
    username = _require_user()
    store = _state().task_store

    if request.method == "GET":
        logger.info("Fetching task id=%s user=%s trace_id=%s", tid, username, _trace_id())
        return jsonify(store.get_task(username, tid).to_dict())

    from_form = bool(request.environ.get(FORM_OVERRIDE_KEY))
    try:
        if request.method == "PUT":
            logger.info("Completing task id=%s user=%s trace_id=%s", tid, username, _trace_id())
            store.complete_task(username, tid)
            ack = {"id": tid, "completed": True}
        else:
            logger.info("Deleting task id=%s user=%s trace_id=%s", tid, username, _trace_id())
            store.remove_task(username, tid)
            ack = {"id": tid, "deleted": True}
    except TaskNotFoundError:
        if not from_form:
            raise
        # Stale page (e.g. a delete clicked twice): just show the current list.
        logger.info("Form action on missing task id=%s user=%s trace_id=%s", tid, username, _trace_id())
        return _back_to_view(username)

    if from_form:
        return _back_to_view(username)
    return jsonify(ack)


# ---- REST API: users ----


@api.route("/users", methods=["POST"])
def add_user() -> Any:
    body = _json_object()
    username = _string_field(body, "username")
    password = _string_field(body, "password")
    try:
        user = _state().user_store.add_user(username, password)
    except UserExistsError as e:
        raise ApiError(409, str(e)) from e
    except ValueError as e:
        raise ApiError(400, str(e)) from e
    return jsonify({"username": user.username}), 201


@api.route("/users/list", methods=["GET"])
def list_users() -> Any:
    return jsonify(_state().user_store.list_users())


# ---- HTML front end ----


@views.route("/")
def index() -> Any:
    return redirect(url_for("views.login"))


@views.route("/login", methods=["GET", "POST"])
def login() -> Any:
    if request.method == "GET":
        return render_template("login.html")

    username = (request.form.get("username") or "").strip()
    password = request.form.get("password") or ""
    try:
        _state().user_store.check_password(username, password)
    except AuthenticationError:
        logger.info("Login failed user=%s trace_id=%s", username, _trace_id())
        return render_template("login.html", error="Invalid credentials", username=username)

    logger.info("Login ok user=%s trace_id=%s", username, _trace_id())
    return _back_to_view(username)


@views.route("/register", methods=["GET", "POST"])
def register() -> Any:
    if request.method == "GET":
        return render_template("register.html")

    username = (request.form.get("username") or "").strip()
    password = request.form.get("password") or ""
    try:
        _state().user_store.add_user(username, password)
    except UserExistsError:
        return render_template("register.html", error="User already exists", username=username)
    except ValueError:
        return render_template("register.html", error="Username is required")

    return redirect(url_for("views.login"), code=303)


@views.route("/tasks/view", methods=["GET", "POST"])
def task_view() -> Any:
    username = _require_user()
    store = _state().task_store

    if request.method == "POST":
        title = (request.form.get("title") or "").strip()
        description = request.form.get("description") or ""
        if title:
            task = store.add_task(username, title, description)
            logger.info("Added task id=%s user=%s trace_id=%s", task.id, username, _trace_id())
        return _back_to_view(username)

    tasks = sorted(store.list_tasks(username), key=lambda t: t.id)
    return render_template("tasks.html", username=username, tasks=tasks)


# ---- app factory ----


def create_app(state: AppState) -> Flask:
    """Build the Flask app around an already constructed AppState."""
    app = Flask(__name__)
    app.extensions[STATE_KEY] = state
    app.wsgi_app = MethodOverrideMiddleware(app.wsgi_app)  # type: ignore[method-assign]

    @app.before_request
    def _start_trace() -> None:
        g.trace_id = str(uuid.uuid4())
        logger.info(
            "Request received method=%s url=%s trace_id=%s",
            request.method,
            request.full_path.rstrip("?"),
            g.trace_id,
        )

    @app.after_request
    def _trace_header(response: Any) -> Any:
        response.headers["X-Trace-Id"] = _trace_id()
        return response

    @app.errorhandler(ApiError)
    def _api_error(e: ApiError) -> Any:
        logger.info("Request rejected status=%s error=%s trace_id=%s", e.status, e.message, _trace_id())
        return jsonify({"error": e.message}), e.status

    @app.errorhandler(TaskNotFoundError)
    def _not_found(e: TaskNotFoundError) -> Any:
        logger.info("Task not found id=%s user=%s trace_id=%s", e.task_id, e.username, _trace_id())
        return jsonify({"error": "task not found"}), 404

    @app.errorhandler(TaskPersistenceError)
    @app.errorhandler(UserStoreError)
    def _storage_failed(e: Exception) -> Any:
        logger.error("Storage write failed trace_id=%s: %s", _trace_id(), e)
        return jsonify({"error": "failed to persist change"}), 500

    app.register_blueprint(views)
    app.register_blueprint(api)
    return app
