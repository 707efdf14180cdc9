"""Shared test fixtures."""

from __future__ import annotations

import json
from io import BytesIO

import pytest
from PIL import Image

from oembed_resolver.config import OembedSettings
from oembed_resolver.http.fetcher import FetchResult
from oembed_resolver.oembed.providers import parse_provider_table


class FakeFetcher:
    """In-memory fetcher recording every requested URL."""

    def __init__(self, responses: dict[str, tuple[int, bytes | str | dict]] | None = None) -> None:
        self.responses = dict(responses or {})
        self.calls: list[str] = []

    def add(self, url: str, body: bytes | str | dict, status: int = 200) -> None:
        self.responses[url] = (status, body)

    def fetch(self, url: str) -> FetchResult:
        self.calls.append(url)
        status, body = self.responses.get(url, (404, b""))
        if isinstance(body, dict):
            body = json.dumps(body)
        if isinstance(body, str):
            body = body.encode("utf-8")
        return FetchResult(
            url=url,
            status_code=status,
            content=body,
            content_type="",
            is_success=status == 200,
            error=None if status == 200 else f"HTTP {status}",
        )


@pytest.fixture()
def fetcher() -> FakeFetcher:
    return FakeFetcher()


@pytest.fixture()
def png_bytes() -> bytes:
    buffer = BytesIO()
    Image.new("RGB", (64, 48), (200, 30, 30)).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture()
def settings() -> OembedSettings:
    return OembedSettings(
        enabled=True,
        autodiscover=False,
        providers=parse_provider_table(
            {
                "http://*.youtube.com/watch*": {
                    "http": "http://www.youtube.com/oembed/",
                    "https": "https://www.youtube.com/oembed/?scheme=https",
                },
                "http://*.flickr.com/*": "http://www.flickr.com/services/oembed/",
                "http://*.facebook.com/*": True,
            },
        ),
    )
