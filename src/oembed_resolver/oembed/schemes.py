"""Matching of human-readable URLs against provider URL patterns."""

from __future__ import annotations

import logging
import re
from functools import lru_cache
from urllib.parse import urlsplit

logger = logging.getLogger(__name__)

_CASE_INSENSITIVE_COMPONENTS = frozenset({"scheme", "host"})


def url_components(url: str) -> dict[str, str]:
    """Split a URL into its non-empty components.

    Keys are ``scheme``, ``user``, ``pass``, ``host``, ``port``, ``path``,
    ``query`` and ``fragment``. The port is kept as text so patterns may carry
    a wildcard there.
    """

    parts = urlsplit(url)
    components = {
        "scheme": parts.scheme,
        "path": parts.path,
        "query": parts.query,
        "fragment": parts.fragment,
    }
    netloc = parts.netloc
    if "@" in netloc:
        userinfo, netloc = netloc.rsplit("@", 1)
        user, _, password = userinfo.partition(":")
        components["user"] = user
        components["pass"] = password
    if netloc.startswith("["):
        host, _, rest = netloc[1:].partition("]")
        port = rest[1:] if rest.startswith(":") else ""
    else:
        host, _, port = netloc.partition(":")
    components["host"] = host
    components["port"] = port
    return {key: value for key, value in components.items() if value}


@lru_cache(maxsize=512)
def _wildcard_regex(value: str, component: str) -> re.Pattern[str]:
    pieces = value.split("*")
    regex = [re.escape(pieces[0])]
    for piece in pieces[1:]:
        if component == "host" and piece.startswith("."):
            # "*.example.com" also covers the bare "example.com"
            regex.append(r"(?:.*\.)?" + re.escape(piece[1:]))
        else:
            regex.append(".*" + re.escape(piece))
    flags = re.IGNORECASE if component in _CASE_INSENSITIVE_COMPONENTS else 0
    return re.compile("".join(regex), flags)


def matches_scheme(url: str, scheme: str) -> bool:
    """Return True when ``url`` satisfies every component present in ``scheme``.

    Components that contain ``*`` must match the whole URL component;
    the others are compared case-insensitively.
    """

    try:
        url_info = url_components(url)
        pattern_info = url_components(scheme)
    except ValueError as exc:
        logger.debug("Cannot match %s against %s: %s", url, scheme, exc)
        return False
    for key, expected in pattern_info.items():
        actual = url_info.get(key)
        if actual is None:
            return False
        if "*" in expected:
            if not _wildcard_regex(expected, key).fullmatch(actual):
                return False
        elif actual.lower() != expected.lower():
            return False
    return True
