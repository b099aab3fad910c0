"""
Attempt log schemas — Pydantic models for the /logs endpoints.

Field names follow the generic table-entity shape (partitionKey, rowKey,
timestamp, eTag) the log API has always exposed.
"""
from datetime import datetime
from typing import Any, Dict, Optional
from urllib.parse import quote

from pydantic import BaseModel, ConfigDict, Field

from api_logger.core.constants import (
    COL_PARTITION_KEY,
    COL_PAYLOAD_ID,
    COL_ROW_KEY,
    COL_STATUS_CODE,
    COL_SUCCESS,
    COL_TIMESTAMP,
)


def make_etag(timestamp: Optional[datetime]) -> Optional[str]:
    """Weak etag derived from the record timestamp: W/"datetime'<iso>'"."""
    if timestamp is None:
        return None
    return "W/\"datetime'%s'\"" % quote(timestamp.isoformat(), safe="")


class AttemptRecord(BaseModel):
    """One logged outcome of a single poll cycle."""
    model_config = ConfigDict(populate_by_name=True)

    partition_key: str = Field(alias="partitionKey")
    row_key: str = Field(alias="rowKey")
    success: bool
    timestamp: Optional[datetime] = None
    etag: Optional[str] = Field(default=None, alias="eTag")
    payload_id: Optional[str] = Field(default=None, alias="payloadId")
    status_code: Optional[int] = Field(default=None, alias="statusCode")

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "AttemptRecord":
        record = cls(
            partition_key=row[COL_PARTITION_KEY],
            row_key=row[COL_ROW_KEY],
            success=bool(row[COL_SUCCESS]),
            timestamp=row.get(COL_TIMESTAMP),
            payload_id=row.get(COL_PAYLOAD_ID),
            status_code=row.get(COL_STATUS_CODE),
        )
        record.etag = make_etag(record.timestamp)
        return record


class PollerStatusResponse(BaseModel):
    """Poller health surface: schedule plus the last recorded attempt."""
    enabled: bool
    schedule_minute: str
    exclusive: bool
    last_attempt: Optional[AttemptRecord] = None
    error: Optional[str] = None
