"""
Query service — read-only access to attempt records and stored payloads.
"""
import logging
from datetime import date, datetime, timedelta
from typing import List, Optional

from api_logger.core.constants import ACCEPTED_DATE_FORMATS, BUCKET_KEY_FORMAT
from api_logger.core.exceptions import NotFoundError, ValidationError
from api_logger.db.attempt_log_store import AttemptLogStore
from api_logger.db.payload_store import PayloadStore
from api_logger.schemas.logs import AttemptRecord

logger = logging.getLogger(__name__)


def parse_day(value: Optional[str]) -> date:
    """Parse YYYYMMDD, YYYY-MM-DD or an ISO-8601 datetime into a calendar day."""
    if not value or not value.strip():
        raise ValidationError("date value is required")
    text = value.strip()
    for fmt in ACCEPTED_DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text).date()
    except ValueError as e:
        raise ValidationError(f"invalid date: {value!r}") from e


def bucket_range(from_value: Optional[str], to_value: Optional[str]) -> tuple[str, str]:
    """[from, to] inclusive at day granularity as a half-open bucket key range."""
    start = parse_day(from_value)
    end_exclusive = parse_day(to_value) + timedelta(days=1)
    return start.strftime(BUCKET_KEY_FORMAT), end_exclusive.strftime(BUCKET_KEY_FORMAT)


class QueryService:
    def __init__(self, attempt_store: AttemptLogStore, payload_store: PayloadStore) -> None:
        self._attempt_store = attempt_store
        self._payload_store = payload_store

    async def list_attempts(self, from_value: Optional[str], to_value: Optional[str]) -> List[AttemptRecord]:
        from_bucket, to_bucket = bucket_range(from_value, to_value)
        records = [
            AttemptRecord.from_row(row)
            async for row in self._attempt_store.query_range(from_bucket, to_bucket)
        ]
        logger.info(
            "Listed %s attempts for buckets [%s, %s)", len(records), from_bucket, to_bucket
        )
        return records

    async def get_payload(self, blob_id: str) -> str:
        if not await self._payload_store.exists(blob_id):
            raise NotFoundError(blob_id)
        return await self._payload_store.get(blob_id)
