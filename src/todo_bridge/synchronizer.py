"""Task synchronizer: mutate the remote store, then resync local state from it.

Policy: no optimistic updates. Every successful mutation is followed by a full
fetch, and ``state.tasks`` is only ever replaced by a fetch result. Failures are
logged and leave the last known good list in place; nothing is retried.
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import List, Optional, Union

from .config import get_config
from .exceptions import RemoteStoreError, TaskNotFoundError
from .filters import apply_filter, lookup
from .models import FilterMode, SyncState, Task, TaskId, TaskPayload
from .remote import RemoteTaskStore

logger = logging.getLogger(__name__)


class TaskSynchronizer:
    def __init__(self, store: RemoteTaskStore, dark_mode: bool = False):
        self.store = store
        self.state = SyncState(dark_mode=dark_mode)
        # Mutations are serialized: one in-flight request plus its resync at a
        # time, later calls wait on the lock. Without it, two overlapping saves
        # can have their resyncs land out of order and leave an older list in
        # state.tasks. Local transitions never take the lock.
        self._lock = asyncio.Lock()

    # ---- derived view ----

    def lookup(self, task_id: TaskId) -> Optional[Task]:
        return lookup(self.state.tasks, task_id)

    def visible_tasks(self) -> List[Task]:
        """Tasks selected by the current filter. Recomputed on every call."""
        return apply_filter(self.state.tasks, self.state.filter_mode)

    # ---- local transitions ----

    def begin_edit(self, task_id: TaskId, current_text: str) -> None:
        self.state.draft_text = current_text
        self.state.editing_id = task_id

    def set_draft(self, text: str) -> None:
        self.state.draft_text = text

    def set_filter(self, mode: Union[FilterMode, str]) -> None:
        self.state.filter_mode = FilterMode(mode)

    def toggle_dark_mode(self) -> bool:
        self.state.dark_mode = not self.state.dark_mode
        return self.state.dark_mode

    # ---- remote operations ----

    def _require(self, task_id: TaskId) -> Task:
        task = self.lookup(task_id)
        if task is None:
            raise TaskNotFoundError(task_id)
        return task

    def _record_failure(self, message: str, error: Exception) -> None:
        self.state.last_error = f"{message}: {error}"
        logger.error(self.state.last_error)

    async def _fetch_all(self) -> bool:
        try:
            tasks = await self.store.list_tasks()
        except RemoteStoreError as e:
            self.state.sync_ok = False
            self._record_failure("Error fetching tasks", e)
            return False

        self.state.tasks = tasks
        self.state.sync_ok = True
        self.state.last_sync_at = datetime.now(timezone.utc)
        self.state.last_error = None
        logger.info(f"Fetched {len(tasks)} tasks")
        return True

    async def fetch_all(self) -> bool:
        """Replace state.tasks with the remote list. On failure the old list stays."""
        async with self._lock:
            return await self._fetch_all()

    async def save(self, draft_text: str, editing_id: Optional[TaskId] = None) -> bool:
        """
        Create a task (editing_id is None) or update the task being edited.

        Whitespace-only text is a no-op. An update keeps the task's existing
        completed flag. On success the draft and edit state are cleared and the
        list is resynced; on failure they are kept for a retry.

        Returns:
            True if the remote store accepted the mutation
        """
        async with self._lock:
            return await self._save(draft_text, editing_id)

    async def save_draft(self) -> bool:
        """Save the staged draft. The draft is read once the lock is held."""
        async with self._lock:
            return await self._save(self.state.draft_text, self.state.editing_id)

    async def _save(self, draft_text: str, editing_id: Optional[TaskId]) -> bool:
        if not draft_text or not draft_text.strip():
            logger.debug("Ignoring save of empty draft")
            return False

        try:
            if editing_id is None:
                await self.store.create_task(TaskPayload(text=draft_text, completed=False))
            else:
                task = self._require(editing_id)
                await self.store.update_task(
                    task.id, TaskPayload(text=draft_text, completed=task.completed)
                )
        except (TaskNotFoundError, RemoteStoreError) as e:
            self._record_failure("Error saving task", e)
            return False

        self.state.draft_text = ""
        self.state.editing_id = None
        await self._fetch_all()
        return True

    async def toggle_completion(self, task_id: TaskId) -> bool:
        async with self._lock:
            try:
                task = self._require(task_id)
                await self.store.update_task(
                    task.id, TaskPayload(text=task.text, completed=not task.completed)
                )
            except (TaskNotFoundError, RemoteStoreError) as e:
                self._record_failure("Error toggling task completion", e)
                return False

            await self._fetch_all()
            return True

    async def delete_task(self, task_id: TaskId) -> bool:
        """Delete immediately; there is no confirmation step."""
        async with self._lock:
            try:
                await self.store.delete_task(task_id)
            except RemoteStoreError as e:
                self._record_failure("Error deleting task", e)
                return False

            await self._fetch_all()
            return True

    async def close(self) -> None:
        await self.store.aclose()


_synchronizer: Optional[TaskSynchronizer] = None


def get_synchronizer() -> TaskSynchronizer:
    global _synchronizer
    if _synchronizer is None:
        config = get_config()
        _synchronizer = TaskSynchronizer(
            RemoteTaskStore(config.api_url), dark_mode=config.dark_mode
        )
    return _synchronizer


async def shutdown_synchronizer() -> None:
    global _synchronizer
    if _synchronizer is not None:
        await _synchronizer.close()
        _synchronizer = None
