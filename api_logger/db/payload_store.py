"""
Payload store — Supabase Storage operations for raw API response bodies.

One private bucket; each object is named by its blob id and holds the UTF-8
text of one successful response. Objects are never overwritten or deleted.
"""

import logging

from storage3.exceptions import StorageApiError

from api_logger.clients.supabase_client import SupabaseClient
from api_logger.core.config import settings
from api_logger.core.constants import PAYLOAD_CONTENT_TYPE
from api_logger.core.exceptions import NotFoundError, StoreUnavailableError
from api_logger.db.base_store import BaseStore

logger = logging.getLogger("payload_store")


def _is_not_found(exc: StorageApiError) -> bool:
    status = str(getattr(exc, "status", "") or "")
    return status in ("400", "404") or "not found" in str(exc).lower()


def _is_duplicate(exc: StorageApiError) -> bool:
    status = str(getattr(exc, "status", "") or "")
    message = str(exc).lower()
    return status == "409" or "already exists" in message or "duplicate" in message


class PayloadStore(BaseStore):
    """Put / get / exists for payload blobs."""

    store_name = "payload"

    def __init__(
        self,
        supabase_client: SupabaseClient | None = None,
        bucket: str | None = None,
    ) -> None:
        super().__init__(supabase_client)
        self._bucket = bucket or settings.payload_bucket

    @property
    def bucket(self) -> str:
        return self._bucket

    def _objects(self):
        return self._storage.from_(self._bucket)

    async def ensure_exists(self) -> None:
        """Create the bucket if it is absent. Safe to call repeatedly."""
        try:
            existing = {b.name for b in self._storage.list_buckets()}
            if self._bucket in existing:
                return
            self._storage.create_bucket(self._bucket, options={"public": False})
            logger.info("payload bucket created bucket=%s", self._bucket)
        except StorageApiError as e:
            if _is_duplicate(e):
                return
            logger.info("storage error bucket=%s detail=%s", self._bucket, str(e))
            raise StoreUnavailableError(self.store_name, str(e)) from e

    async def put(self, blob_id: str, content: str) -> None:
        data = content.encode("utf-8")
        try:
            self._objects().upload(
                path=blob_id,
                file=data,
                file_options={"content-type": PAYLOAD_CONTENT_TYPE, "upsert": "false"},
            )
        except StorageApiError as e:
            logger.info("storage upload error path=%s detail=%s", blob_id, str(e))
            raise StoreUnavailableError(self.store_name, str(e)) from e
        logger.info(
            "payload stored bucket=%s path=%s size=%s", self._bucket, blob_id, len(data)
        )

    async def get(self, blob_id: str) -> str:
        try:
            data = self._objects().download(blob_id)
        except StorageApiError as e:
            if _is_not_found(e):
                raise NotFoundError(blob_id) from e
            logger.info("storage download error path=%s detail=%s", blob_id, str(e))
            raise StoreUnavailableError(self.store_name, str(e)) from e
        return data.decode("utf-8")

    async def exists(self, blob_id: str) -> bool:
        try:
            return bool(self._objects().exists(blob_id))
        except StorageApiError as e:
            if _is_not_found(e):
                return False
            raise StoreUnavailableError(self.store_name, str(e)) from e
