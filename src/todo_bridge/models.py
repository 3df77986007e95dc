"""Pydantic models for tasks, synchronizer state and API bodies."""

from datetime import datetime
from enum import Enum
from typing import List, Optional, Union
from zoneinfo import ZoneInfo

from pydantic import BaseModel, Field

from .constants import FILTER_ALL, FILTER_COMPLETED, FILTER_PENDING

UTC = ZoneInfo("UTC")

# Server-assigned and opaque; compared by string form (see same_id).
TaskId = Union[int, str]


class FilterMode(str, Enum):
    """View-only predicate selecting which tasks are displayed."""

    ALL = FILTER_ALL
    COMPLETED = FILTER_COMPLETED
    PENDING = FILTER_PENDING


class Task(BaseModel):
    """Task record as held by the remote store."""

    id: TaskId = Field(..., description="Server-assigned identifier")
    text: str = Field(..., min_length=1, description="Display text")
    completed: bool = Field(..., description="Completion flag")


class TaskPayload(BaseModel):
    """Body of create and update requests. Updates always resend both fields."""

    text: str
    completed: bool


class SyncState(BaseModel):
    """State owned by the TaskSynchronizer."""

    tasks: List[Task] = Field(default_factory=list)
    draft_text: str = ""
    editing_id: Optional[TaskId] = None
    filter_mode: FilterMode = FilterMode.ALL
    dark_mode: bool = False

    sync_ok: bool = False
    last_sync_at: Optional[datetime] = None
    last_error: Optional[str] = None

    @property
    def is_editing(self) -> bool:
        return self.editing_id is not None


class SyncMeta(BaseModel):
    """Metadata about the last resync."""

    sync_ok: bool = Field(..., description="Whether the last fetch succeeded")
    stale: bool = Field(..., description="Whether the shown list may be out of date")
    last_sync_at: Optional[str] = Field(
        None, description="Last successful fetch timestamp (ISO 8601) or null"
    )
    last_error: Optional[str] = Field(None, description="Last logged failure, if any")


class ViewResponse(BaseModel):
    """Everything the presentation layer needs to render."""

    meta: SyncMeta
    mode: str = Field(..., description="create or edit")
    draft_text: str
    editing_id: Optional[TaskId] = None
    filter: FilterMode
    dark_mode: bool
    total: int = Field(..., description="Number of tasks before filtering")
    tasks: List[Task] = Field(..., description="Tasks visible under the current filter")


class DraftRequest(BaseModel):
    text: str


class EditRequest(BaseModel):
    text: Optional[str] = Field(None, description="Text to edit; defaults to the task's current text")


class FilterRequest(BaseModel):
    mode: FilterMode


class HealthResponse(BaseModel):
    """Response for /health endpoint."""

    status: str = Field(..., description="Service status")
    api_url: str = Field(..., description="Remote task collection URL")
    last_sync_at: Optional[str] = Field(
        None, description="Last successful fetch timestamp (ISO 8601) or null"
    )


def same_id(a: TaskId, b: TaskId) -> bool:
    return str(a) == str(b)


def format_timestamp(dt: Optional[datetime], tz: ZoneInfo = UTC) -> Optional[str]:
    """
    Convert datetime to ISO 8601 string in the given timezone.

    Args:
        dt: Datetime object (naive values are assumed UTC) or None
        tz: Target timezone

    Returns:
        ISO 8601 formatted string with timezone offset, or None
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt.astimezone(tz).isoformat()
