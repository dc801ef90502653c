"""Streaming HTTP client for local agent endpoints."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import httpx

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 5.0
DEFAULT_USER_AGENT = "ecs-bootstrap"


@dataclass(slots=True)
class FetchResult:
    """Result of an HTTP fetch operation."""

    url: str
    status_code: int
    content: str
    is_success: bool
    error: str | None = None


class HttpFetcher:
    """HTTP client wrapper that drains the response body chunk by chunk.

    The fetcher performs a single request per call. Retrying is left to the
    caller, so the underlying transport is built without retries.
    """

    def __init__(
        self,
        *,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        user_agent: str = DEFAULT_USER_AGENT,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._timeout = httpx.Timeout(timeout_seconds)
        self._client = httpx.Client(
            timeout=self._timeout,
            headers={"User-Agent": user_agent},
            transport=transport or httpx.HTTPTransport(retries=0),
        )

    def fetch(self, url: str) -> FetchResult:
        """Fetch URL content, returning structured result.

        ``status_code`` is 0 when the request failed before a status was
        received or while the body was streamed; ``error`` then carries the
        transport's message.
        """

        try:
            with self._client.stream("GET", url) as response:
                if response.status_code != httpx.codes.OK:
                    return FetchResult(
                        url=url,
                        status_code=response.status_code,
                        content="",
                        is_success=False,
                        error=f"HTTP {response.status_code}",
                    )
                chunks: list[str] = []
                for chunk in response.iter_text():
                    chunks.append(chunk)
                return FetchResult(
                    url=url,
                    status_code=response.status_code,
                    content="".join(chunks),
                    is_success=True,
                )
        except httpx.TimeoutException:
            logger.warning("Timeout fetching %s", url)
            return FetchResult(
                url=url,
                status_code=0,
                content="",
                is_success=False,
                error="timeout",
            )
        except httpx.HTTPError as exc:
            logger.warning("HTTP error fetching %s: %s", url, exc)
            return FetchResult(
                url=url,
                status_code=0,
                content="",
                is_success=False,
                error=str(exc),
            )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> HttpFetcher:
        return self

    def __exit__(self, *_: object) -> None:
        self.close()
