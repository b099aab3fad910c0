"""
Attempt log store — append-only api_attempt_log table operations.

Rows are keyed by (partition_key, row_key): the UTC day bucket and a UUID.
There is no update or delete path.

The timestamp column is written by the poller from the same clock that picks
the day bucket, so a record always lands in the UTC day of its own timestamp.
The column default in the migration only covers manual inserts.
"""

import logging
from datetime import datetime
from typing import Any, AsyncIterator, Dict, Optional

from postgrest.exceptions import APIError

from api_logger.clients.supabase_client import SupabaseClient
from api_logger.core.config import settings
from api_logger.core.constants import (
    COL_PARTITION_KEY,
    COL_PAYLOAD_ID,
    COL_ROW_KEY,
    COL_STATUS_CODE,
    COL_SUCCESS,
    COL_TIMESTAMP,
    PG_UNDEFINED_TABLE,
    PG_UNIQUE_VIOLATION,
)
from api_logger.core.exceptions import ConflictError, StoreError, StoreUnavailableError
from api_logger.db.base_store import BaseStore

logger = logging.getLogger("attempt_log_store")


class AttemptLogStore(BaseStore):
    """Append and range-scan attempt records."""

    store_name = "attempt_log"

    def __init__(
        self,
        supabase_client: SupabaseClient | None = None,
        table: str | None = None,
        page_size: int | None = None,
    ) -> None:
        super().__init__(supabase_client)
        self._table = table or settings.attempt_log_table
        self._page_size = page_size or settings.attempt_log_page_size

    @property
    def table(self) -> str:
        return self._table

    def _map_api_error(self, table: str, error: APIError, row: Optional[Dict[str, Any]] = None) -> StoreError:
        if error.code == PG_UNIQUE_VIOLATION and row is not None:
            return ConflictError(row.get(COL_PARTITION_KEY), row.get(COL_ROW_KEY))
        if error.code == PG_UNDEFINED_TABLE:
            return StoreUnavailableError(
                self.store_name,
                f"table {table} does not exist; apply migrations/001_api_attempt_log.sql",
            )
        return super()._map_api_error(table, error, row)

    async def ensure_exists(self) -> None:
        """
        Probe the table. PostgREST cannot run DDL, so the table is created by
        the SQL migration; a missing table raises StoreUnavailableError.
        """
        await self._select_page(self._table, 0, 0, columns=COL_ROW_KEY)
        logger.info("attempt log table ready table=%s", self._table)

    async def append(
        self,
        bucket_key: str,
        record_id: str,
        success: bool,
        timestamp: datetime,
        payload_id: Optional[str] = None,
        status_code: Optional[int] = None,
    ) -> None:
        row = {
            COL_PARTITION_KEY: bucket_key,
            COL_ROW_KEY: record_id,
            COL_SUCCESS: success,
            COL_TIMESTAMP: timestamp.isoformat(),
            COL_PAYLOAD_ID: payload_id,
            COL_STATUS_CODE: status_code,
        }
        await self._insert(self._table, [row])
        logger.info(
            "attempt logged partition_key=%s row_key=%s success=%s",
            bucket_key,
            record_id,
            success,
        )

    async def query_range(
        self, from_bucket: str, to_bucket_exclusive: str
    ) -> AsyncIterator[Dict[str, Any]]:
        """
        Yield rows with from_bucket <= partition_key < to_bucket_exclusive,
        in arrival order, one page at a time.
        """
        start = 0
        while True:
            page = await self._select_page(
                self._table,
                start,
                start + self._page_size - 1,
                gte=(COL_PARTITION_KEY, from_bucket),
                lt=(COL_PARTITION_KEY, to_bucket_exclusive),
                order_by=(COL_TIMESTAMP, COL_ROW_KEY),
            )
            for row in page:
                yield row
            if len(page) < self._page_size:
                return
            start += self._page_size

    async def latest(self) -> Optional[Dict[str, Any]]:
        """Most recently written record, or None when the log is empty."""
        rows = await self._select_page(
            self._table, 0, 0, order_by=(COL_TIMESTAMP,), descending=True
        )
        return rows[0] if rows else None
