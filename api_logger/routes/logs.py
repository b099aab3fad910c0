"""
Log routes — attempt record listing and stored payload retrieval.

Errors are not described to callers: a missing payload is 404, anything else
(including an unparseable date) is an empty 500 response.
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from api_logger.container import get_query_service
from api_logger.core.auth import require_function_key
from api_logger.core.constants import PAYLOAD_CONTENT_TYPE
from api_logger.core.exceptions import NotFoundError
from api_logger.schemas.logs import AttemptRecord
from api_logger.services.query_service import QueryService

logger = logging.getLogger(__name__)
router = APIRouter(
    prefix="/logs",
    tags=["logs"],
    dependencies=[Depends(require_function_key)],
)


@router.get("", response_model=List[AttemptRecord])
async def get_logs(
    from_: Optional[str] = Query(None, alias="from"),
    to: Optional[str] = Query(None),
    service: QueryService = Depends(get_query_service),
):
    """List attempt records whose day bucket lies in [from, to]."""
    try:
        return await service.list_attempts(from_, to)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error getting logs: {e}", exc_info=True)
        return Response(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)


@router.get("/{log_id}/payload")
async def get_payload(
    log_id: str,
    service: QueryService = Depends(get_query_service),
):
    """Return the stored response body for a payload id as raw text."""
    try:
        payload = await service.get_payload(log_id)
        return Response(content=payload, media_type=PAYLOAD_CONTENT_TYPE)
    except NotFoundError:
        return Response(status_code=status.HTTP_404_NOT_FOUND)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error getting payload {log_id}: {e}", exc_info=True)
        return Response(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)
