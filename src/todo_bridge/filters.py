"""Record normalization, lookup by id, and the filter-mode view."""

import logging
from typing import Any, List, Optional

from pydantic import ValidationError

from .exceptions import RemoteStoreError
from .models import FilterMode, Task, TaskId, same_id

logger = logging.getLogger(__name__)


def normalize_tasks(raw: Any) -> List[Task]:
    """JSON array from GET /tasks → Task models, skipping malformed records."""
    if not isinstance(raw, list):
        raise RemoteStoreError(f"Expected a JSON array of tasks, got {type(raw).__name__}")

    tasks = []
    for item in raw:
        try:
            tasks.append(Task.model_validate(item))
        except ValidationError as e:
            item_id = item.get("id", "unknown") if isinstance(item, dict) else "unknown"
            logger.warning(f"Skipping task {item_id}: normalization failed: {e}")
            continue
    return tasks


def lookup(tasks: List[Task], task_id: TaskId) -> Optional[Task]:
    """First task with a matching id, or None. Callers must handle None."""
    for task in tasks:
        if same_id(task.id, task_id):
            return task
    return None


def apply_filter(tasks: List[Task], mode: FilterMode) -> List[Task]:
    """Subsequence of tasks selected by mode, order preserved."""
    if mode == FilterMode.COMPLETED:
        return [task for task in tasks if task.completed]
    if mode == FilterMode.PENDING:
        return [task for task in tasks if not task.completed]
    return list(tasks)
