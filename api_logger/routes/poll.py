"""
Poll routes — queue an immediate poll outside the beat schedule.
"""
import logging

from fastapi import APIRouter, Depends, HTTPException

from api_logger.core.auth import require_function_key
from api_logger.schemas.polling import PollTriggerResponse

logger = logging.getLogger(__name__)
router = APIRouter(
    prefix="/poll",
    tags=["poll"],
    dependencies=[Depends(require_function_key)],
)


@router.post("/trigger", response_model=PollTriggerResponse)
async def trigger_poll():
    """
    Queue one poll tick now.

    Runs on the polling queue like a scheduled tick and is recorded the same way.
    """
    from api_logger.celery_app.tasks.polling import fetch_and_store

    try:
        result = fetch_and_store.delay()
    except Exception as e:
        logger.error(f"Error queuing poll: {e}")
        raise HTTPException(status_code=500, detail=str(e))

    return PollTriggerResponse(status="queued", task_id=result.id)
