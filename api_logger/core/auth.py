"""
Authentication — request-scoped function key check for route protection.

No identity is established here. When FUNCTION_KEY is configured, callers
must present it either as the x-functions-key header or as the ?code= query
parameter. When it is not configured, every request passes through.
"""
import hmac
import logging
from typing import Optional

from fastapi import Header, HTTPException, Query, status

from api_logger.core.config import settings
from api_logger.core.constants import FUNCTION_KEY_HEADER, FUNCTION_KEY_QUERY_PARAM

logger = logging.getLogger(__name__)


async def require_function_key(
    x_functions_key: Optional[str] = Header(None, alias=FUNCTION_KEY_HEADER),
    code: Optional[str] = Query(None, alias=FUNCTION_KEY_QUERY_PARAM),
) -> None:
    expected = settings.function_key
    if not expected:
        return

    presented = x_functions_key or code
    if not presented or not hmac.compare_digest(presented, expected):
        logger.warning("Function key rejected (presented=%s)", bool(presented))
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={
                "code": "UNAUTHORIZED",
                "message": "Missing or invalid function key",
            },
        )
