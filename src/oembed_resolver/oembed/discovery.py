"""oEmbed endpoint autodiscovery from HTML pages."""

from __future__ import annotations

import html
import logging
import re

from oembed_resolver.http.fetcher import FetchResult, UrlFetcher

logger = logging.getLogger(__name__)

# Only the first discovery <link> is considered. The href may sit before or
# after the type attribute; a trailing href wins when both are captured.
_OEMBED_LINK_RE = re.compile(
    r"<link[^>]+?(?:href=['\"](?P<first>[^'\"]+?)['\"][^>]+?)?"
    r"type=[\"']application/json\+oembed[\"']"
    r"(?:[^>]+?href=['\"](?P<second>[^'\"]+?)['\"])?",
)


def autodiscover_from_body(body: str) -> str | None:
    """Return the oEmbed URL declared by the first discovery link in ``body``."""

    match = _OEMBED_LINK_RE.search(body)
    if match is None:
        return None
    href = match.group("second") or match.group("first")
    if not href:
        return None
    return html.unescape(href)


class Autodiscoverer:
    """Fetch a page and read its oEmbed discovery link."""

    def __init__(self, fetcher: UrlFetcher) -> None:
        self._fetcher = fetcher

    def discover(self, url: str) -> str | None:
        return self.discover_with_response(url)[0]

    def discover_with_response(self, url: str) -> tuple[str | None, FetchResult]:
        """Like :meth:`discover`, also handing back the fetched page for reuse."""

        result = self._fetcher.fetch(url)
        if not result.is_success or not result.content:
            logger.debug("oEmbed autodiscovery skipped for %s: %s", url, result.error or "empty body")
            return None, result
        oembed_url = autodiscover_from_body(result.text)
        if oembed_url is None:
            logger.debug("No oEmbed discovery link found on %s", url)
        else:
            logger.debug("Discovered oEmbed URL %s for %s", oembed_url, url)
        return oembed_url, result
