"""
Polling task — fetch the public API once and record the outcome.

Triggered by Celery Beat on the configured crontab, or on demand via
POST /poll/trigger. The task itself never raises: every failure is logged
and reflected in the returned outcome.
"""
import logging

from api_logger.celery_app.celery_config import POLL_TASK_NAME, celery_app
from api_logger.celery_app.tasks.base import BaseTask, run_async
from api_logger.container import get_poller_service
from api_logger.core.config import settings
from api_logger.schemas.polling import PollOutcome
from api_logger.utils.poll_lock import acquire_poll_lock, release_poll_lock

logger = logging.getLogger(__name__)


@celery_app.task(
    bind=True,
    base=BaseTask,
    name=POLL_TASK_NAME,
    max_retries=0,
)
def fetch_and_store(self):
    """Run one poll tick and return its outcome as a dict."""
    task_id = self.request.id or "local"

    if settings.poll_exclusive:
        try:
            if not acquire_poll_lock(task_id):
                return PollOutcome(skipped=True).model_dump()
        except Exception as e:
            logger.error(f"Poll lock unavailable, skipping tick: {e}")
            return PollOutcome(skipped=True, error=str(e)).model_dump()

    try:
        outcome = run_async(get_poller_service().poll_once())
    except Exception as e:
        # Wiring failures (e.g. missing Supabase credentials) end the tick too
        logger.error(f"Poll tick could not run: {e}")
        outcome = PollOutcome(error=str(e))
    finally:
        if settings.poll_exclusive:
            try:
                release_poll_lock(task_id)
            except Exception as e:
                logger.warning(f"Could not release poll lock: {e}")

    return outcome.model_dump()
