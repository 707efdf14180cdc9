"""Resolution of human-readable URLs into oEmbed resource descriptors."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from html import escape
from typing import Any
from urllib.parse import parse_qsl, quote, urlencode, urlsplit, urlunsplit

from oembed_resolver.config import OembedSettings, Settings
from oembed_resolver.files import is_image_url
from oembed_resolver.http.fetcher import FetchResult, HttpFetcher, UrlFetcher
from oembed_resolver.oembed.discovery import Autodiscoverer
from oembed_resolver.oembed.providers import Autodiscover, Found, resolve_endpoint
from oembed_resolver.oembed.result import OembedResult, ensure_image_support

logger = logging.getLogger(__name__)

# Rendering-only options, never sent to the provider.
_LOCAL_OPTIONS = frozenset({"class"})


def join_query(url: str, params: Mapping[str, Any]) -> str:
    """Append ``params`` to the querystring of ``url``.

    Existing pairs are kept in order, repeated keys included, unless ``params``
    overrides their key.
    """

    parts = urlsplit(url)
    query = [(key, value) for key, value in parse_qsl(parts.query, keep_blank_values=True) if key not in params]
    query.extend((key, str(value)) for key, value in params.items())
    return urlunsplit(parts._replace(query=urlencode(query, quote_via=quote)))


def request_options(options: Mapping[str, Any]) -> dict[str, Any]:
    """Options forwarded to the provider, with maxwidth/maxheight filled in."""

    params = {key: value for key, value in options.items() if key not in _LOCAL_OPTIONS and value is not None}
    if "width" in params and "maxwidth" not in params:
        params["maxwidth"] = params["width"]
    if "height" in params and "maxheight" not in params:
        params["maxheight"] = params["height"]
    return params


class OembedResolver:
    """Single entry point turning a URL into an :class:`OembedResult`."""

    def __init__(
        self,
        settings: OembedSettings,
        fetcher: UrlFetcher,
        *,
        is_secure: Callable[[], bool] | None = None,
    ) -> None:
        ensure_image_support()
        self._settings = settings
        self._fetcher = fetcher
        self._is_secure = is_secure or (lambda: False)
        self._autodiscoverer = Autodiscoverer(fetcher)
        self._owned_fetcher: HttpFetcher | None = None

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        *,
        is_secure: Callable[[], bool] | None = None,
    ) -> OembedResolver:
        fetcher = HttpFetcher(
            timeout_seconds=settings.http.timeout_seconds,
            connect_timeout_seconds=settings.http.connect_timeout_seconds,
            user_agent=settings.http.user_agent,
        )
        resolver = cls(settings.oembed, fetcher, is_secure=is_secure)
        resolver._owned_fetcher = fetcher
        return resolver

    @property
    def settings(self) -> OembedSettings:
        return self._settings

    @property
    def fetcher(self) -> UrlFetcher:
        return self._fetcher

    def close(self) -> None:
        if self._owned_fetcher is not None:
            self._owned_fetcher.close()

    def __enter__(self) -> OembedResolver:
        return self

    def __exit__(self, *_: object) -> None:
        self.close()

    def find_oembed_url(self, url: str) -> str | None:
        """Return the bare oEmbed request URL for ``url``, discovering it if allowed."""

        return self._locate(url)[0]

    def _locate(self, url: str) -> tuple[str | None, FetchResult | None]:
        # Second item: the page autodiscovery fetched, if it ran.
        endpoint = resolve_endpoint(url, self._settings.providers, secure=self._is_secure())
        if isinstance(endpoint, Found):
            return join_query(endpoint.endpoint, {"format": "json", "url": url}), None
        if isinstance(endpoint, Autodiscover) or self._settings.autodiscover:
            return self._autodiscoverer.discover_with_response(url)
        logger.debug("No oEmbed provider for %s and autodiscovery is disabled", url)
        return None, None

    def resolve(
        self,
        url: str,
        expected_type: str | None = None,
        options: Mapping[str, Any] | None = None,
    ) -> OembedResult | None:
        if not self._settings.enabled:
            return None

        options = dict(options or {})
        oembed_url, page = self._locate(url)

        if oembed_url is None:
            if is_image_url(url):
                logger.debug("Falling back to hotlinking image %s", url)
                return OembedResult(url, url, expected_type, options, fetcher=self._fetcher, prefetched=page)
            return None

        params = request_options(options)
        if params:
            try:
                oembed_url = join_query(oembed_url, params)
            except ValueError as exc:
                logger.debug("Discarding malformed oEmbed URL %s: %s", oembed_url, exc)
                return None
        return OembedResult(oembed_url, url, expected_type, options, fetcher=self._fetcher)


def render_embed(resolver: OembedResolver, url: str, arguments: Mapping[str, Any] | None = None) -> str:
    """Render an ``[embed]`` for ``url``, falling back to a plain link."""

    options = dict(arguments or {})
    expected_type = options.pop("type", None)
    result = resolver.resolve(url, expected_type, options)
    if result is not None and result.exists():
        return result.render()
    return f'<a href="{escape(url)}">{escape(url)}</a>'
