"""Lazily fetched oEmbed resource descriptors."""

from __future__ import annotations

import json
import logging
import posixpath
import re
from collections.abc import Mapping
from html import escape
from io import BytesIO
from typing import Any
from urllib.parse import unquote, urlsplit

from PIL import Image, features

from oembed_resolver.http.fetcher import FetchResult, UrlFetcher

logger = logging.getLogger(__name__)

HOTLINK_INFO = (
    "Info: This image will be hotlinked. Please ensure you have permissions from the"
    " original site creator to do so."
)

_FACEBOOK_ID_RE = re.compile(r".*/(\d+?)/?(?:$|\?.*)", re.DOTALL)
_REQUIRED_CODECS = ("jpg", "zlib")


class ImageSupportError(RuntimeError):
    """Pillow cannot decode the raster formats hotlinked images arrive in."""


def ensure_image_support() -> None:
    """Fail fast when the imaging stack is missing raster decoders."""

    missing = [codec for codec in _REQUIRED_CODECS if not features.check_codec(codec)]
    if missing:
        raise ImageSupportError(
            f"Pillow was built without {', '.join(missing)} support; "
            "install a Pillow wheel with JPEG and PNG decoders.",
        )


def find_thumbnail(data: Mapping[str, Any]) -> str | None:
    """Return the thumbnail URL for ``data``, guessing one when it is omitted."""

    if data.get("thumbnail_url"):
        return str(data["thumbnail_url"])
    if data.get("provider_name") == "Facebook":
        match = _FACEBOOK_ID_RE.fullmatch(str(data.get("url", "")))
        if match:
            return f"https://graph.facebook.com/{match.group(1)}/picture"
    return None


def _decode_image(body: bytes) -> tuple[int, int] | None:
    try:
        with Image.open(BytesIO(body)) as image:
            image.load()
            return image.size
    except (OSError, ValueError, Image.DecompressionBombError) as exc:
        logger.debug("Payload is neither JSON nor a decodable image: %s", exc)
        return None


class OembedResult:
    """One embeddable resource.

    ``url`` is the oEmbed request URL (or the image itself for hotlinks) and
    ``origin`` the human-readable URL it was resolved from. The payload is
    fetched on first access and cached for the lifetime of the instance.
    ``prefetched`` is a response for ``url`` already in hand; it is consumed
    instead of fetching again.
    """

    def __init__(
        self,
        url: str,
        origin: str | None = None,
        expected_type: str | None = None,
        options: Mapping[str, Any] | None = None,
        *,
        fetcher: UrlFetcher,
        prefetched: FetchResult | None = None,
    ) -> None:
        options = options or {}
        self._url = url
        self._origin = origin
        self._expected_type = expected_type or None
        self._fetcher = fetcher
        self._extra_class = str(options["class"]) if options.get("class") else ""
        self._width = options.get("width")
        self._height = options.get("height")
        self._data: dict[str, Any] | None = None
        self._prefetched = prefetched

    @property
    def oembed_url(self) -> str:
        return self._url

    @property
    def origin(self) -> str | None:
        return self._origin

    @property
    def expected_type(self) -> str | None:
        return self._expected_type

    @property
    def extra_class(self) -> str:
        return self._extra_class

    def _load_data(self) -> dict[str, Any]:
        if self._data is not None:
            return self._data

        result = self._prefetched if self._prefetched is not None else self._fetcher.fetch(self._url)
        self._prefetched = None
        if not result.is_success or not result.content:
            logger.debug("No oEmbed data at %s: %s", self._url, result.error or "empty body")
            self._data = {}
            return self._data

        data = self._parse_body(result.content)
        data = {str(key).lower(): value for key, value in data.items()}

        thumbnail = find_thumbnail(data)
        if thumbnail:
            data["thumbnail_url"] = thumbnail

        if self._expected_type and data.get("type") != self._expected_type:
            logger.debug(
                "Discarding oEmbed data for %s: type %r does not match %r",
                self._url,
                data.get("type"),
                self._expected_type,
            )
            data = {}

        self._data = data
        return self._data

    def _parse_body(self, body: bytes) -> dict[str, Any]:
        try:
            data = json.loads(body)
        except ValueError:
            data = None
        if isinstance(data, dict) and data:
            return data

        # Not JSON: a direct link may have returned the image bytes themselves.
        size = _decode_image(body)
        if size is None:
            return {}
        parts = urlsplit(self._url)
        host = parts.netloc
        filename = posixpath.basename(unquote(parts.path)) or self._url
        width, height = size
        return {
            "type": "photo",
            "title": f"{filename} ({host})",
            "url": self._url,
            "provider_url": f"{parts.scheme}://{host}" if parts.scheme else host,
            "width": width,
            "height": height,
            "info": HOTLINK_INFO,
        }

    @property
    def fields(self) -> dict[str, Any]:
        return dict(self._load_data())

    def has_field(self, name: str) -> bool:
        return name.lower() in self._load_data()

    def get_field(self, name: str, default: Any = None) -> Any:
        return self._load_data().get(name.lower(), default)

    def exists(self) -> bool:
        return bool(self._load_data())

    def render(self) -> str:
        """Render the resource as an HTML fragment; unknown types render as ''."""

        data = self._load_data()
        resource_type = data.get("type")
        if resource_type in ("video", "rich"):
            css = f"media {self._extra_class}" if self._extra_class else "media"
            return f"<div class='{escape(css)}'>{data.get('html', '')}</div>"
        if resource_type == "link":
            return (
                f'<a class="{escape(self._extra_class)}" href="{escape(self._origin or self._url)}">'
                f"{escape(str(data.get('title', '')))}</a>"
            )
        if resource_type == "photo":
            width = data.get("width", self._width)
            height = data.get("height", self._height)
            return (
                f"<img src='{escape(str(data.get('url', '')))}'"
                f" width='{escape(_attr(width))}' height='{escape(_attr(height))}'"
                f" class='{escape(self._extra_class)}' />"
            )
        return ""

    def __repr__(self) -> str:
        return f"OembedResult(url={self._url!r}, origin={self._origin!r}, expected_type={self._expected_type!r})"


def _attr(value: Any) -> str:
    return "" if value is None else str(value)
