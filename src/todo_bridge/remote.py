"""Remote task store: async HTTP client for the /tasks resource."""

import logging
import time
from typing import Any, List, Optional

import httpx

from .constants import JSON_HEADERS
from .exceptions import RemoteStoreError
from .filters import normalize_tasks
from .models import Task, TaskId, TaskPayload

logger = logging.getLogger(__name__)


class RemoteTaskStore:
    """
    List/create/update/delete over a REST task collection.

    Transport failures and non-2xx responses both raise RemoteStoreError.
    No retries, no auth headers, no timeout beyond httpx's own default.
    """

    def __init__(self, base_url: str, client: Optional[httpx.AsyncClient] = None):
        self.base_url = base_url.rstrip("/")
        self._owns_client = client is None
        self._client = client if client is not None else httpx.AsyncClient()

    def _item_url(self, task_id: TaskId) -> str:
        return f"{self.base_url}/{task_id}"

    async def _request(
        self, method: str, url: str, payload: Optional[TaskPayload] = None
    ) -> httpx.Response:
        start_time = time.time()
        try:
            if payload is None:
                response = await self._client.request(method, url)
            else:
                response = await self._client.request(
                    method, url, json=payload.model_dump(), headers=JSON_HEADERS
                )
        except httpx.HTTPError as e:
            raise RemoteStoreError(f"{method} {url} failed: {e}") from e

        duration_ms = int((time.time() - start_time) * 1000)
        logger.debug(f"{method} {url} -> {response.status_code} ({duration_ms}ms)")
        if not response.is_success:
            raise RemoteStoreError(f"{method} {url} returned {response.status_code}")
        return response

    async def list_tasks(self) -> List[Task]:
        response = await self._request("GET", self.base_url)
        try:
            data: Any = response.json()
        except ValueError as e:
            raise RemoteStoreError(f"GET {self.base_url} returned invalid JSON: {e}") from e
        return normalize_tasks(data)

    async def create_task(self, payload: TaskPayload) -> None:
        # The created record's id is not needed; the following resync picks it up.
        await self._request("POST", self.base_url, payload)

    async def update_task(self, task_id: TaskId, payload: TaskPayload) -> None:
        await self._request("PUT", self._item_url(task_id), payload)

    async def delete_task(self, task_id: TaskId) -> None:
        await self._request("DELETE", self._item_url(task_id))

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
