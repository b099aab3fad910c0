"""
Base task class with common functionality.

Provides:
- Standardized success/failure logging
- A worker-local event loop for running async services
"""
import asyncio
import logging
from celery import Task

logger = logging.getLogger(__name__)


class BaseTask(Task):
    """Base task with common functionality for all workers."""

    abstract = True

    # Polls are never retried; a failed tick is simply recorded.
    max_retries = 0

    track_started = True

    def on_failure(self, exc, task_id, args, kwargs, einfo):
        """Called when task fails."""
        logger.error(f"Task {self.name}[{task_id}] failed: {exc}")

    def on_success(self, retval, task_id, args, kwargs):
        """Called when task succeeds."""
        logger.info(f"Task {self.name}[{task_id}] succeeded")


# ============================================
# Async Helper
# ============================================
_worker_loop: asyncio.AbstractEventLoop | None = None


def get_worker_loop() -> asyncio.AbstractEventLoop:
    """
    Event loop owned by this worker process.

    Created after fork, so each worker gets its own. It stays open between
    tasks because the shared HTTP client's pooled connections are bound to it.
    """
    global _worker_loop
    if _worker_loop is None or _worker_loop.is_closed():
        _worker_loop = asyncio.new_event_loop()
    return _worker_loop


def run_async(coro):
    """
    Run async function in sync context.

    Use this to call async methods from Celery tasks.
    """
    loop = get_worker_loop()
    asyncio.set_event_loop(loop)
    return loop.run_until_complete(coro)
