"""Runtime configuration for oEmbed resolution."""

from __future__ import annotations

import json
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from oembed_resolver.http.fetcher import (
    DEFAULT_CONNECT_TIMEOUT_SECONDS,
    DEFAULT_TIMEOUT_SECONDS,
    DEFAULT_USER_AGENT,
)
from oembed_resolver.oembed.providers import ProviderTable, parse_provider_table

DEFAULT_PROVIDERS: dict[str, object] = {
    "http://*.youtube.com/watch*": {
        "http": "http://www.youtube.com/oembed/",
        "https": "https://www.youtube.com/oembed/?scheme=https",
    },
    "https://*.youtube.com/watch*": {
        "http": "http://www.youtube.com/oembed/",
        "https": "https://www.youtube.com/oembed/?scheme=https",
    },
    "http://*.flickr.com/*": "http://www.flickr.com/services/oembed/",
    "http://*.viddler.com/*": "http://lab.viddler.com/services/oembed/",
    "http://*.revision3.com/*": "http://revision3.com/api/oembed/",
    "http://*.hulu.com/watch/*": "http://www.hulu.com/api/oembed.json",
    "http://*.vimeo.com/*": "http://vimeo.com/api/oembed.json",
    "https://*.vimeo.com/*": "https://vimeo.com/api/oembed.json",
    "http://twitter.com/*": "https://api.twitter.com/1/statuses/oembed.json",
    "https://twitter.com/*": "https://api.twitter.com/1/statuses/oembed.json",
    "http://*.facebook.com/*": True,
    "https://*.facebook.com/*": True,
}


def _default_providers() -> ProviderTable:
    return parse_provider_table(DEFAULT_PROVIDERS)


@dataclass(slots=True)
class OembedSettings:
    """Feature switches and the ordered provider table."""

    enabled: bool = True
    autodiscover: bool = True
    providers: ProviderTable = field(default_factory=_default_providers)


@dataclass(slots=True)
class HttpSettings:
    """Outbound HTTP settings shared by autodiscovery and data fetches."""

    connect_timeout_seconds: float = DEFAULT_CONNECT_TIMEOUT_SECONDS
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    user_agent: str = DEFAULT_USER_AGENT


@dataclass(slots=True)
class Settings:
    """Application settings grouped by domain concerns."""

    oembed: OembedSettings = field(default_factory=OembedSettings)
    http: HttpSettings = field(default_factory=HttpSettings)

    @classmethod
    def from_env(cls, providers_path: Path | None = None) -> Settings:
        """Load settings from environment with sane defaults."""

        path = providers_path or _env_path("OEMBED_PROVIDERS_PATH")
        settings = cls(
            oembed=OembedSettings(
                enabled=_env_bool("OEMBED_ENABLED", default=True),
                autodiscover=_env_bool("OEMBED_AUTODISCOVER", default=True),
                providers=load_providers(path) if path else _default_providers(),
            ),
            http=HttpSettings(
                connect_timeout_seconds=float(
                    os.getenv(
                        "OEMBED_HTTP_CONNECT_TIMEOUT_SECONDS",
                        str(DEFAULT_CONNECT_TIMEOUT_SECONDS),
                    ),
                ),
                timeout_seconds=float(
                    os.getenv("OEMBED_HTTP_TIMEOUT_SECONDS", str(DEFAULT_TIMEOUT_SECONDS)),
                ),
                user_agent=os.getenv("OEMBED_HTTP_USER_AGENT", DEFAULT_USER_AGENT),
            ),
        )
        settings.validate()
        return settings

    def validate(self) -> None:
        """Raise configuration error for unusable HTTP settings."""

        if self.http.connect_timeout_seconds <= 0:
            raise ValueError("OEMBED_HTTP_CONNECT_TIMEOUT_SECONDS must be > 0.")
        if self.http.timeout_seconds <= 0:
            raise ValueError("OEMBED_HTTP_TIMEOUT_SECONDS must be > 0.")
        if not self.http.user_agent.strip():
            raise ValueError("OEMBED_HTTP_USER_AGENT must not be empty.")


def load_providers(path: Path) -> ProviderTable:
    """Read an ordered provider table from a JSON object file."""

    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as error:
        raise ValueError(f"Cannot read oEmbed providers from {path}: {error}") from error
    if not isinstance(raw, Mapping):
        raise ValueError(
            f"Invalid oEmbed providers file {path}: expected a JSON object of pattern -> endpoint.",
        )
    return parse_provider_table(raw)


def _env_path(name: str) -> Path | None:
    value = os.getenv(name, "").strip()
    return Path(value) if value else None


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"0", "false", "no", "off"}:
        return False
    raise ValueError(f"Invalid boolean value for {name}: {value!r}")
