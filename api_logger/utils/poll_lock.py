"""
Poll lock — optional Redis lock so at most one poll tick runs at a time.

Only used when POLL_EXCLUSIVE=true. The lock is a SET NX EX key that expires
after POLL_LOCK_TTL seconds, so a crashed worker cannot hold it forever.
"""
import logging

import redis

from api_logger.core.config import settings

logger = logging.getLogger(__name__)

POLL_LOCK_KEY = "api_logger:poll_lock"


def _get_redis() -> redis.Redis:
    """Create a Redis client from the configured URL."""
    return redis.Redis.from_url(settings.redis_url, decode_responses=True)


def acquire_poll_lock(task_id: str = "unknown") -> bool:
    """Acquire the poll lock (SET NX EX).

    Returns True if this task should proceed, False if another poll holds it.
    """
    r = _get_redis()
    acquired = r.set(POLL_LOCK_KEY, task_id, nx=True, ex=settings.poll_lock_ttl)

    if acquired:
        logger.info(f"Poll lock ACQUIRED: task={task_id}, ttl={settings.poll_lock_ttl}s")
    else:
        holder = r.get(POLL_LOCK_KEY)
        logger.info(f"Poll lock HELD: holder={holder}, skipping tick")

    return bool(acquired)


def release_poll_lock(task_id: str = "unknown") -> None:
    """Release the poll lock if this task still holds it."""
    r = _get_redis()
    if r.get(POLL_LOCK_KEY) == task_id:
        r.delete(POLL_LOCK_KEY)
        logger.debug(f"Poll lock released: task={task_id}")
