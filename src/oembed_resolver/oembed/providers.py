"""Provider table model and endpoint lookup."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass

from oembed_resolver.oembed.schemes import matches_scheme

logger = logging.getLogger(__name__)

PROTOCOLS = ("http", "https")


@dataclass(frozen=True, slots=True)
class Template:
    """A single oEmbed endpoint URL."""

    url: str


@dataclass(frozen=True, slots=True)
class AutodiscoverMarker:
    """Discover the endpoint from the page even if global autodiscovery is off."""


@dataclass(frozen=True, slots=True)
class ProtocolVariants:
    """Endpoint URLs keyed by protocol, in configured order."""

    endpoints: tuple[tuple[str, str], ...]

    def select(self, protocol: str) -> str:
        for name, url in self.endpoints:
            if name == protocol:
                return url
        return self.endpoints[0][1]


EndpointSpec = Template | AutodiscoverMarker | ProtocolVariants

# Ordered: the first matching pattern wins.
ProviderTable = tuple[tuple[str, EndpointSpec], ...]


@dataclass(frozen=True, slots=True)
class Found:
    endpoint: str


@dataclass(frozen=True, slots=True)
class Autodiscover:
    pass


@dataclass(frozen=True, slots=True)
class NotFound:
    pass


EndpointResult = Found | Autodiscover | NotFound


def parse_endpoint_spec(scheme: str, value: object) -> EndpointSpec:
    """Turn a raw configuration value into an endpoint spec."""

    if value is True:
        return AutodiscoverMarker()
    if isinstance(value, str) and value.strip():
        return Template(value.strip())
    if isinstance(value, Mapping) and value:
        endpoints: list[tuple[str, str]] = []
        for protocol, url in value.items():
            if protocol not in PROTOCOLS:
                raise ValueError(
                    f"Invalid protocol {protocol!r} for oEmbed provider {scheme!r}. "
                    f"Expected one of {', '.join(PROTOCOLS)}.",
                )
            if not isinstance(url, str) or not url.strip():
                raise ValueError(
                    f"Invalid {protocol} endpoint for oEmbed provider {scheme!r}: {url!r}",
                )
            endpoints.append((protocol, url.strip()))
        return ProtocolVariants(tuple(endpoints))
    raise ValueError(
        f"Invalid endpoint for oEmbed provider {scheme!r}: {value!r}. "
        "Expected an URL, true, or a mapping of protocol to URL.",
    )


def parse_provider_table(raw: Mapping[str, object]) -> ProviderTable:
    """Build a provider table from an ordered pattern -> endpoint mapping."""

    table: list[tuple[str, EndpointSpec]] = []
    for scheme, value in raw.items():
        if not isinstance(scheme, str) or not scheme.strip():
            raise ValueError(f"Invalid oEmbed provider pattern: {scheme!r}")
        table.append((scheme.strip(), parse_endpoint_spec(scheme, value)))
    return tuple(table)


def resolve_endpoint(url: str, providers: ProviderTable, *, secure: bool = False) -> EndpointResult:
    """Return the endpoint of the first provider whose pattern matches ``url``."""

    for scheme, spec in providers:
        if not matches_scheme(url, scheme):
            continue
        logger.debug("oEmbed provider %s matched %s", scheme, url)
        if isinstance(spec, AutodiscoverMarker):
            return Autodiscover()
        if isinstance(spec, ProtocolVariants):
            return Found(spec.select("https" if secure else "http"))
        return Found(spec.url)
    return NotFound()
