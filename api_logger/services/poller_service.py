"""
Poller service — one fetch of the public API per tick, recorded and stored.

Each tick runs strictly in order:
1. GET the public API
2. Append one attempt record (success flag, status code, payload id)
3. On success only, upload the response body under the payload id

Every failure is logged and swallowed; the tick has no caller to report to.
The PollOutcome returned describes what happened for logs and the Celery
result backend.
"""
import logging
import uuid
from datetime import datetime, timezone
from typing import Callable, Optional

from api_logger.clients.public_api_client import PublicApiClient
from api_logger.core.constants import BUCKET_KEY_FORMAT
from api_logger.core.exceptions import FetchError
from api_logger.db.attempt_log_store import AttemptLogStore
from api_logger.db.payload_store import PayloadStore
from api_logger.schemas.polling import FetchResult, PollOutcome

logger = logging.getLogger(__name__)


def bucket_key_for(moment: datetime) -> str:
    """UTC day bucket (YYYYMMDD) for a timestamp."""
    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc)
    return moment.strftime(BUCKET_KEY_FORMAT)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid.uuid4())


class PollerService:
    def __init__(
        self,
        client: PublicApiClient,
        attempt_store: AttemptLogStore,
        payload_store: PayloadStore,
        clock: Callable[[], datetime] = _utcnow,
        id_factory: Callable[[], str] = _new_id,
    ) -> None:
        self._client = client
        self._attempt_store = attempt_store
        self._payload_store = payload_store
        self._clock = clock
        self._new_id = id_factory

    async def _fetch(self) -> Optional[FetchResult]:
        """Fetch once; a transport failure counts as an unsuccessful attempt."""
        try:
            return await self._client.fetch()
        except FetchError as e:
            logger.warning("Public API fetch failed: %s", e)
            return None

    async def poll_once(self) -> PollOutcome:
        outcome = PollOutcome()
        try:
            result = await self._fetch()
            success = result is not None and result.success
            now = self._clock()

            outcome.success = success
            outcome.status_code = result.status_code if result is not None else None
            outcome.record_id = self._new_id()
            outcome.bucket_key = bucket_key_for(now)
            if success:
                outcome.payload_id = self._new_id()

            await self._attempt_store.append(
                bucket_key=outcome.bucket_key,
                record_id=outcome.record_id,
                success=success,
                timestamp=now,
                payload_id=outcome.payload_id,
                status_code=outcome.status_code,
            )

            if success:
                await self._payload_store.put(outcome.payload_id, result.body)

            logger.info(
                "Poll complete success=%s status=%s record=%s/%s payload=%s",
                outcome.success,
                outcome.status_code,
                outcome.bucket_key,
                outcome.record_id,
                outcome.payload_id,
            )
        except Exception as e:
            logger.exception("Error fetching and storing API data: %s", e)
            outcome.error = str(e) or e.__class__.__name__
        return outcome
