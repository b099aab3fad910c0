"""
Lazy DI container — singleton access to clients, stores, and services.

Every getter builds from the same settings object, so the poller (write path)
and the query routes (read path) always talk to the same table and bucket.
Works in both FastAPI (async) and Celery (sync) contexts.
"""

from functools import lru_cache

from api_logger.core.config import settings
from api_logger.clients.supabase_client import SupabaseClient
from api_logger.clients.public_api_client import PublicApiClient
from api_logger.db.attempt_log_store import AttemptLogStore
from api_logger.db.payload_store import PayloadStore
from api_logger.services.poller_service import PollerService
from api_logger.services.query_service import QueryService


# -- Clients ---------------------------------------------------------------

@lru_cache(maxsize=1)
def get_supabase_client():
    return SupabaseClient(settings)


@lru_cache(maxsize=1)
def get_public_api_client():
    return PublicApiClient(settings)


# -- Stores ----------------------------------------------------------------

@lru_cache(maxsize=1)
def get_attempt_log_store():
    return AttemptLogStore(
        get_supabase_client(),
        table=settings.attempt_log_table,
        page_size=settings.attempt_log_page_size,
    )


@lru_cache(maxsize=1)
def get_payload_store():
    return PayloadStore(get_supabase_client(), bucket=settings.payload_bucket)


# -- Services --------------------------------------------------------------

@lru_cache(maxsize=1)
def get_poller_service():
    return PollerService(
        client=get_public_api_client(),
        attempt_store=get_attempt_log_store(),
        payload_store=get_payload_store(),
    )


@lru_cache(maxsize=1)
def get_query_service():
    return QueryService(
        attempt_store=get_attempt_log_store(),
        payload_store=get_payload_store(),
    )
