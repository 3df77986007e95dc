"""FastAPI app: view model + user intents over the task synchronizer, /health."""

import logging
import time
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware

from .config import get_config
from .constants import MODE_CREATE, MODE_EDIT
from .exceptions import ConfigurationError
from .models import (
    DraftRequest,
    EditRequest,
    FilterRequest,
    HealthResponse,
    SyncMeta,
    ViewResponse,
    format_timestamp,
)
from .synchronizer import TaskSynchronizer, get_synchronizer, shutdown_synchronizer

# Configure structured logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting todo-bridge")
    try:
        config = get_config()
        logging.getLogger().setLevel(config.log_level)
        logger.info("Configuration loaded successfully")
        logger.info(f"  Task store: {config.api_url}")
        logger.info(f"  Dark mode: {config.dark_mode}")
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}", exc_info=True)
        raise

    # Initial resync; a failure here only leaves the list empty.
    await get_synchronizer().fetch_all()
    yield
    logger.info("Shutting down todo-bridge")
    await shutdown_synchronizer()


app = FastAPI(
    title="Todo Bridge",
    description="Task-list client state over a remote REST task store",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS middleware (allow all origins - adjust as needed)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def logging_middleware(request: Request, call_next):
    start_time = time.time()
    logger.info(f"Request: {request.method} {request.url.path}")
    response = await call_next(request)
    duration_ms = int((time.time() - start_time) * 1000)
    logger.info(f"Response: {response.status_code} ({duration_ms}ms)")
    return response


def build_view(synchronizer: TaskSynchronizer) -> ViewResponse:
    state = synchronizer.state
    tz = get_config().display_timezone
    meta = SyncMeta(
        sync_ok=state.sync_ok,
        stale=not state.sync_ok,
        last_sync_at=format_timestamp(state.last_sync_at, tz),
        last_error=state.last_error,
    )
    return ViewResponse(
        meta=meta,
        mode=MODE_EDIT if state.is_editing else MODE_CREATE,
        draft_text=state.draft_text,
        editing_id=state.editing_id,
        filter=state.filter_mode,
        dark_mode=state.dark_mode,
        total=len(state.tasks),
        tasks=synchronizer.visible_tasks(),
    )


@app.get("/view", response_model=ViewResponse)
async def get_view(synchronizer: TaskSynchronizer = Depends(get_synchronizer)) -> ViewResponse:
    """Current view; does not contact the task store."""
    return build_view(synchronizer)


@app.post("/refresh", response_model=ViewResponse)
async def refresh(synchronizer: TaskSynchronizer = Depends(get_synchronizer)) -> ViewResponse:
    """Resync from the task store; on failure returns the last known list."""
    await synchronizer.fetch_all()
    return build_view(synchronizer)


@app.put("/draft", response_model=ViewResponse)
async def set_draft(
    body: DraftRequest, synchronizer: TaskSynchronizer = Depends(get_synchronizer)
) -> ViewResponse:
    synchronizer.set_draft(body.text)
    return build_view(synchronizer)


@app.post("/save", response_model=ViewResponse)
async def save(synchronizer: TaskSynchronizer = Depends(get_synchronizer)) -> ViewResponse:
    """Create or update from the staged draft. Remote failures keep the draft."""
    await synchronizer.save_draft()
    return build_view(synchronizer)


@app.post("/tasks/{task_id}/edit", response_model=ViewResponse)
async def begin_edit(
    task_id: str,
    body: EditRequest,
    synchronizer: TaskSynchronizer = Depends(get_synchronizer),
) -> ViewResponse:
    """Stage a task for editing. A later save of an unknown id is rejected locally."""
    task = synchronizer.lookup(task_id)
    if task is not None:
        text = task.text if body.text is None else body.text
        synchronizer.begin_edit(task.id, text)
    elif body.text is not None:
        synchronizer.begin_edit(task_id, body.text)
    else:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Task not found: {task_id}",
        )
    return build_view(synchronizer)


@app.post("/tasks/{task_id}/toggle", response_model=ViewResponse)
async def toggle_completion(
    task_id: str, synchronizer: TaskSynchronizer = Depends(get_synchronizer)
) -> ViewResponse:
    await synchronizer.toggle_completion(task_id)
    return build_view(synchronizer)


@app.delete("/tasks/{task_id}", response_model=ViewResponse)
async def delete_task(
    task_id: str, synchronizer: TaskSynchronizer = Depends(get_synchronizer)
) -> ViewResponse:
    await synchronizer.delete_task(task_id)
    return build_view(synchronizer)


@app.put("/filter", response_model=ViewResponse)
async def set_filter(
    body: FilterRequest, synchronizer: TaskSynchronizer = Depends(get_synchronizer)
) -> ViewResponse:
    synchronizer.set_filter(body.mode)
    return build_view(synchronizer)


@app.post("/display/toggle", response_model=ViewResponse)
async def toggle_dark_mode(
    synchronizer: TaskSynchronizer = Depends(get_synchronizer),
) -> ViewResponse:
    synchronizer.toggle_dark_mode()
    return build_view(synchronizer)


@app.get("/health", response_model=HealthResponse)
async def health(
    synchronizer: TaskSynchronizer = Depends(get_synchronizer),
) -> HealthResponse:
    """Liveness; does not contact the task store."""
    try:
        config = get_config()
        return HealthResponse(
            status="healthy",
            api_url=config.api_url,
            last_sync_at=format_timestamp(
                synchronizer.state.last_sync_at, config.display_timezone
            ),
        )
    except ConfigurationError as e:
        logger.error(f"Configuration error in health check: {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service misconfigured",
        ) from e
