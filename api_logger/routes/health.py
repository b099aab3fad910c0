"""
Health routes — liveness probe and poller status.
"""
import logging

from fastapi import APIRouter

from api_logger.container import get_attempt_log_store
from api_logger.core.config import settings
from api_logger.schemas.logs import AttemptRecord, PollerStatusResponse

logger = logging.getLogger(__name__)
router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check():
    """Basic health check endpoint."""
    return {"status": "healthy"}


@router.get("/health/poller", response_model=PollerStatusResponse)
async def poller_status():
    """
    Poller schedule plus the most recent attempt record.

    Store errors are reported inline so the probe itself never fails.
    """
    result = PollerStatusResponse(
        enabled=settings.poll_enabled,
        schedule_minute=settings.poll_cron_minute,
        exclusive=settings.poll_exclusive,
    )
    try:
        row = await get_attempt_log_store().latest()
        if row:
            result.last_attempt = AttemptRecord.from_row(row)
    except Exception as e:
        logger.warning(f"Could not read last attempt: {e}")
        result.error = str(e)
    return result
