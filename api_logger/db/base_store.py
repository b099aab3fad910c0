"""
Base store — shared Supabase client access for the attempt log and payload stores.

Provides insert / paged-select primitives over PostgREST and a handle to
Supabase Storage. PostgREST errors are translated into the store exception
hierarchy; nothing here raises HTTPException, the routes decide the status.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from postgrest.exceptions import APIError

from api_logger.clients.supabase_client import SupabaseClient
from api_logger.core.config import settings
from api_logger.core.exceptions import StoreError, StoreUnavailableError

logger = logging.getLogger("base_store")


class BaseStore:
    """Base class for Supabase-backed stores."""

    store_name = "supabase"

    def __init__(self, supabase_client: SupabaseClient | None = None) -> None:
        self._supabase_client = supabase_client or SupabaseClient(settings)

    @property
    def _client(self):
        """Get the Supabase client instance."""
        return self._supabase_client.client

    @property
    def _storage(self):
        return self._client.storage

    def _map_api_error(self, table: str, error: APIError, row: Optional[Dict[str, Any]] = None) -> StoreError:
        """Translate a PostgREST error. Subclasses refine this for known codes."""
        return StoreUnavailableError(self.store_name, f"{table}: {error}")

    async def _insert(self, table: str, rows: List[Dict[str, Any]]) -> None:
        """Insert rows into a table."""
        if not rows:
            return
        try:
            self._client.table(table).insert(rows).execute()
        except APIError as e:
            logger.info("supabase error table=%s detail=%s", table, str(e))
            raise self._map_api_error(table, e, rows[0]) from e

    async def _select_page(
        self,
        table: str,
        start: int,
        end: int,
        columns: str = "*",
        gte: Optional[Tuple[str, Any]] = None,
        lt: Optional[Tuple[str, Any]] = None,
        order_by: Tuple[str, ...] = (),
        descending: bool = False,
    ) -> List[Dict[str, Any]]:
        """Select one inclusive [start, end] page of rows with optional range filters."""
        try:
            query = self._client.table(table).select(columns)
            if gte is not None:
                query = query.gte(gte[0], gte[1])
            if lt is not None:
                query = query.lt(lt[0], lt[1])
            for column in order_by:
                query = query.order(column, desc=descending)
            response = query.range(start, end).execute()
            return response.data or []
        except APIError as e:
            logger.info("supabase error table=%s detail=%s", table, str(e))
            raise self._map_api_error(table, e) from e
