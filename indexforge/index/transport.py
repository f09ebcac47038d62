"""HTTP transport for index downloads."""

from __future__ import annotations

import logging
from typing import Protocol

import httpx

from indexforge.task import NetworkError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_USER_AGENT = "indexforge/0.1"


class Transport(Protocol):
    def fetch(self, url: str) -> bytes: ...


class HttpTransport:
    """Blocking httpx client; one request at a time, no retries."""

    def __init__(
        self,
        *,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        user_agent: str = DEFAULT_USER_AGENT,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._client = httpx.Client(
            timeout=httpx.Timeout(timeout_seconds),
            headers={"User-Agent": user_agent},
            transport=transport,
            follow_redirects=True,
        )

    def fetch(self, url: str) -> bytes:
        try:
            response = self._client.get(url)
        except httpx.TimeoutException as exc:
            logger.warning("Timeout fetching %s", url)
            raise NetworkError(url, "timeout") from exc
        except httpx.HTTPError as exc:
            logger.warning("HTTP error fetching %s: %s", url, exc)
            raise NetworkError(url, str(exc) or type(exc).__name__) from exc
        except httpx.InvalidURL as exc:
            raise NetworkError(url, f"invalid URL: {exc}") from exc
        except UnicodeError as exc:
            # Raised by the idna codec for hosts with empty or oversized labels.
            raise NetworkError(url, f"invalid host: {exc}") from exc

        if not response.is_success:
            raise NetworkError(url, f"HTTP {response.status_code}")

        logger.debug("Fetched %d bytes from %s", len(response.content), url)
        return response.content

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> HttpTransport:
        return self

    def __exit__(self, *_: object) -> None:
        self.close()
