"""
Public API HTTP client — the single outbound GET made on every poll.

Holds one long-lived httpx.AsyncClient. It is created on first use and
reused for the life of the process; call aclose() on shutdown.
"""
import logging
from typing import Optional

import httpx

from api_logger.core.config import Settings
from api_logger.core.constants import PUBLIC_API_SERVICE_NAME
from api_logger.core.exceptions import FetchError
from api_logger.schemas.polling import FetchResult

logger = logging.getLogger("public_api_client")


class PublicApiClient:
    def __init__(
        self,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._url = settings.public_api_url
        self._timeout = settings.public_api_timeout
        self._transport = transport
        self._http: httpx.AsyncClient | None = None

    def _get_http(self) -> httpx.AsyncClient:
        if self._http is None or self._http.is_closed:
            self._http = httpx.AsyncClient(
                timeout=httpx.Timeout(self._timeout, connect=10.0),
                follow_redirects=True,
                transport=self._transport,
            )
            logger.info("public api http client initialized url=%s", self._url)
        return self._http

    async def fetch(self) -> FetchResult:
        """GET the configured URL. Raises FetchError on transport failure."""
        try:
            resp = await self._get_http().get(self._url)
        except httpx.TimeoutException as exc:
            raise FetchError(PUBLIC_API_SERVICE_NAME, f"timeout: {exc!r}") from exc
        except httpx.RequestError as exc:
            raise FetchError(PUBLIC_API_SERVICE_NAME, repr(exc)) from exc

        logger.info(
            "public api response status=%s content_length=%s",
            resp.status_code,
            len(resp.content),
        )
        return FetchResult(status_code=resp.status_code, body=resp.text)

    async def aclose(self) -> None:
        if self._http is not None and not self._http.is_closed:
            await self._http.aclose()
        self._http = None
