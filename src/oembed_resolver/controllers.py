"""Controllers for oEmbed CLI commands."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path

from oembed_resolver.config import Settings
from oembed_resolver.oembed.discovery import Autodiscoverer
from oembed_resolver.oembed.providers import (
    Autodiscover,
    AutodiscoverMarker,
    Found,
    ProtocolVariants,
    resolve_endpoint,
)
from oembed_resolver.oembed.resolver import OembedResolver, render_embed


@dataclass(slots=True)
class RenderCommand:
    """CLI inputs for the render command."""

    url: str
    providers_path: Path | None
    expected_type: str | None
    width: int | None
    height: int | None
    css_class: str | None
    secure: bool


@dataclass(slots=True)
class DiscoverCommand:
    """CLI inputs for the discover command."""

    url: str
    providers_path: Path | None


@dataclass(slots=True)
class EndpointCommand:
    """CLI inputs for the endpoint command."""

    url: str
    providers_path: Path | None
    secure: bool


@dataclass(slots=True)
class CommandResult:
    lines: list[str]
    success: bool = True


class OembedCliController:
    """Coordinates oEmbed command execution."""

    def render(self, command: RenderCommand) -> CommandResult:
        settings = Settings.from_env(providers_path=command.providers_path)
        arguments: dict[str, object] = {}
        if command.expected_type:
            arguments["type"] = command.expected_type
        if command.width is not None:
            arguments["width"] = command.width
        if command.height is not None:
            arguments["height"] = command.height
        if command.css_class:
            arguments["class"] = command.css_class
        with _resolver(settings, secure=command.secure) as resolver:
            return CommandResult(lines=[render_embed(resolver, command.url, arguments)])

    def discover(self, command: DiscoverCommand) -> CommandResult:
        settings = Settings.from_env(providers_path=command.providers_path)
        with _resolver(settings, secure=False) as resolver:
            oembed_url = Autodiscoverer(resolver.fetcher).discover(command.url)
        if oembed_url is None:
            return CommandResult(lines=[f"No oEmbed discovery link found for {command.url}"], success=False)
        return CommandResult(lines=[oembed_url])

    def endpoint(self, command: EndpointCommand) -> CommandResult:
        settings = Settings.from_env(providers_path=command.providers_path)
        result = resolve_endpoint(command.url, settings.oembed.providers, secure=command.secure)
        if isinstance(result, Found):
            return CommandResult(lines=[f"endpoint: {result.endpoint}"])
        if isinstance(result, Autodiscover):
            return CommandResult(lines=["autodiscover"])
        fallback = "autodiscover" if settings.oembed.autodiscover else "none"
        return CommandResult(lines=[f"no provider matched; fallback: {fallback}"])

    def providers(self, providers_path: Path | None) -> CommandResult:
        settings = Settings.from_env(providers_path=providers_path)
        lines = [
            f"enabled={settings.oembed.enabled} autodiscover={settings.oembed.autodiscover}",
        ]
        for scheme, spec in settings.oembed.providers:
            if isinstance(spec, AutodiscoverMarker):
                target = "autodiscover"
            elif isinstance(spec, ProtocolVariants):
                target = ", ".join(f"{protocol}: {url}" for protocol, url in spec.endpoints)
            else:
                target = spec.url
            lines.append(f"{scheme} -> {target}")
        return CommandResult(lines=lines)


@contextmanager
def _resolver(settings: Settings, *, secure: bool) -> Iterator[OembedResolver]:
    resolver = OembedResolver.from_settings(settings, is_secure=lambda: secure)
    try:
        yield resolver
    finally:
        resolver.close()
