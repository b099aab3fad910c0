"""
Celery tasks package.
"""
from api_logger.celery_app.tasks.polling import fetch_and_store

__all__ = ["fetch_and_store"]
