# tests/test_task_client.py

from __future__ import annotations

import httpx
import pytest

from task_tracker.connectors.task_client import HttpTaskClient, LocalTaskClient, TaskClientError
from task_tracker.tasks.errors import TaskNotFoundError


@pytest.fixture()
def http_client(app):
    """HttpTaskClient driving the real Flask app in-process (no sockets)."""
    transport = httpx.WSGITransport(app=app)
    client = HttpTaskClient(
        "http://testserver",
        client=httpx.Client(transport=transport, base_url="http://testserver"),
    )
    yield client
    client.close()


def test_http_client_full_cycle(http_client, state) -> None:
    task = http_client.add_task("alice", "Buy milk", "2%")
    assert task.id == 1
    assert state.task_store.get_task("alice", 1) == task

    assert http_client.list_tasks("alice") == [task]
    assert http_client.get_task("alice", 1) == task

    http_client.complete_task("alice", 1)
    http_client.complete_task("alice", 1)
    assert http_client.get_task("alice", 1).completed is True

    http_client.remove_task("alice", 1)
    assert http_client.list_tasks("alice") == []


def test_http_client_maps_404_to_not_found(http_client) -> None:
    bobs = http_client.add_task("bob", "private", "")

    with pytest.raises(TaskNotFoundError) as e:
        http_client.get_task("alice", bobs.id)
    assert e.value.task_id == bobs.id

    with pytest.raises(TaskNotFoundError):
        http_client.complete_task("alice", 424242)
    with pytest.raises(TaskNotFoundError):
        http_client.remove_task("alice", 424242)


def test_http_client_reports_gate_rejection_as_client_error(http_client) -> None:
    with pytest.raises(TaskClientError) as e:
        http_client.list_tasks("mallory")
    assert "404" in str(e.value)


def test_http_client_transport_failure() -> None:
    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = HttpTaskClient(
        "http://down",
        client=httpx.Client(transport=httpx.MockTransport(refuse), base_url="http://down"),
    )
    with pytest.raises(TaskClientError):
        client.list_tasks("alice")


def test_local_client_delegates_to_store(state) -> None:
    local = LocalTaskClient(state.task_store)
    task = local.add_task("alice", "t", "d")
    local.complete_task("alice", task.id)

    assert state.task_store.get_task("alice", task.id).completed is True
    with pytest.raises(TaskNotFoundError):
        local.get_task("bob", task.id)
