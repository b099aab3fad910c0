"""
Route aggregation module.

Combines the log query and poll routers; health is exported separately for
main.py to mount without the function key check.
"""
from fastapi import APIRouter

from api_logger.routes.logs import router as logs_router
from api_logger.routes.poll import router as poll_router
from api_logger.routes.health import router as health_router

api_router = APIRouter()

api_router.include_router(logs_router)
api_router.include_router(poll_router)

__all__ = ["api_router", "health_router"]
