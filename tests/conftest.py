"""Shared fixtures: an in-memory remote task store behind httpx.MockTransport."""

import asyncio
import json
from typing import Any, Dict, List, Optional

import httpx
import pytest

from todo_bridge.config import reset_config
from todo_bridge.remote import RemoteTaskStore
from todo_bridge.synchronizer import TaskSynchronizer

BASE_URL = "http://tasks.test/tasks"


class FakeTaskServer:
    """
    Minimal /tasks resource.

    Records every request for assertions. Individual methods can be made to
    answer with an error status (fail_status) or to raise a transport error
    (fail_transport).
    """

    def __init__(self, tasks: Optional[List[Dict[str, Any]]] = None) -> None:
        self.tasks = [dict(t) for t in tasks or []]
        self.requests: List[httpx.Request] = []
        self.fail_status: Dict[str, int] = {}
        self.fail_transport: set = set()
        self._next_id = max((int(t["id"]) for t in self.tasks), default=0) + 1

    @property
    def methods(self) -> List[str]:
        return [r.method for r in self.requests]

    @property
    def mutations(self) -> List[httpx.Request]:
        return [r for r in self.requests if r.method != "GET"]

    def _find(self, task_id: str) -> Optional[Dict[str, Any]]:
        for task in self.tasks:
            if str(task["id"]) == task_id:
                return task
        return None

    async def handler(self, request: httpx.Request) -> httpx.Response:
        # yield once so overlapping operations can interleave
        await asyncio.sleep(0)
        self.requests.append(request)

        if request.method in self.fail_transport:
            raise httpx.ConnectError("connection refused", request=request)
        if request.method in self.fail_status:
            return httpx.Response(self.fail_status[request.method])

        parts = request.url.path.strip("/").split("/")
        if len(parts) == 1:
            if request.method == "GET":
                return httpx.Response(200, json=self.tasks)
            if request.method == "POST":
                body = json.loads(request.content)
                task = {"id": self._next_id, **body}
                self._next_id += 1
                self.tasks.append(task)
                return httpx.Response(201, json=task)
            return httpx.Response(405)

        task = self._find(parts[1])
        if task is None:
            return httpx.Response(404)
        if request.method == "PUT":
            task.update(json.loads(request.content))
            return httpx.Response(200, json=task)
        if request.method == "DELETE":
            self.tasks.remove(task)
            return httpx.Response(204)
        return httpx.Response(405)


@pytest.fixture(autouse=True)
def fresh_config(monkeypatch):
    for name in ("TODO_API_URL", "DARK_MODE", "DISPLAY_TIMEZONE", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    reset_config()
    yield
    reset_config()


@pytest.fixture()
def server() -> FakeTaskServer:
    return FakeTaskServer(
        [
            {"id": 1, "text": "buy milk", "completed": False},
            {"id": 2, "text": "walk dog", "completed": True},
            {"id": 3, "text": "write report", "completed": False},
        ]
    )


@pytest.fixture()
def store(server: FakeTaskServer) -> RemoteTaskStore:
    client = httpx.AsyncClient(transport=httpx.MockTransport(server.handler))
    return RemoteTaskStore(BASE_URL, client=client)


@pytest.fixture()
def synchronizer(store: RemoteTaskStore) -> TaskSynchronizer:
    return TaskSynchronizer(store)


def request_json(request: httpx.Request) -> Dict[str, Any]:
    return json.loads(request.content)
