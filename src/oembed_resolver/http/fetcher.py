"""Blocking HTTP client with a short connect timeout and no retries."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol

import httpx

from oembed_resolver import __version__

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_CONNECT_TIMEOUT_SECONDS = 5.0
DEFAULT_USER_AGENT = f"oembed-resolver/{__version__}"


@dataclass(slots=True)
class FetchResult:
    """Result of an HTTP fetch operation."""

    url: str
    status_code: int
    content: bytes
    content_type: str
    is_success: bool
    error: str | None = None

    @property
    def text(self) -> str:
        return self.content.decode("utf-8", errors="replace")


class UrlFetcher(Protocol):
    """Anything able to GET a URL into a FetchResult."""

    def fetch(self, url: str) -> FetchResult: ...


class HttpFetcher:
    """HTTP client wrapper with timeout, redirect and user-agent configuration."""

    def __init__(
        self,
        *,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        connect_timeout_seconds: float = DEFAULT_CONNECT_TIMEOUT_SECONDS,
        user_agent: str = DEFAULT_USER_AGENT,
        headers: dict[str, str] | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._timeout = httpx.Timeout(timeout_seconds, connect=connect_timeout_seconds)
        base_headers = {"User-Agent": user_agent}
        if headers:
            base_headers.update(headers)
        self._client = httpx.Client(
            timeout=self._timeout,
            headers=base_headers,
            transport=transport or httpx.HTTPTransport(retries=0),
            follow_redirects=True,
        )

    def fetch(self, url: str) -> FetchResult:
        """Fetch URL content, returning structured result."""

        try:
            response = self._client.get(url)
            # oEmbed endpoints signal "no embed" with any non-200 status.
            is_success = response.status_code == httpx.codes.OK
            return FetchResult(
                url=url,
                status_code=response.status_code,
                content=response.content,
                content_type=response.headers.get("content-type", ""),
                is_success=is_success,
                error=None if is_success else f"HTTP {response.status_code}",
            )
        except httpx.TimeoutException:
            logger.warning("Timeout fetching %s", url)
            return FetchResult(
                url=url,
                status_code=0,
                content=b"",
                content_type="",
                is_success=False,
                error="timeout",
            )
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            logger.warning("HTTP error fetching %s: %s", url, exc)
            return FetchResult(
                url=url,
                status_code=0,
                content=b"",
                content_type="",
                is_success=False,
                error=str(exc),
            )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> HttpFetcher:
        return self

    def __exit__(self, *_: object) -> None:
        self.close()
