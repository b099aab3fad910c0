"""
Polling schemas — fetch results and per-tick poll outcomes.
"""
from typing import Optional

from pydantic import BaseModel


class FetchResult(BaseModel):
    """One response from the public API."""
    status_code: int
    body: str

    @property
    def success(self) -> bool:
        return 200 <= self.status_code < 300


class PollOutcome(BaseModel):
    """Result of a single poll tick, returned by the Celery task."""
    success: bool = False
    record_id: Optional[str] = None
    bucket_key: Optional[str] = None
    payload_id: Optional[str] = None
    status_code: Optional[int] = None
    error: Optional[str] = None
    skipped: bool = False


class PollTriggerResponse(BaseModel):
    """Response after queuing an immediate poll."""
    status: str
    task_id: str
