"""CLI entrypoint for oembed-resolver."""

import logging
from pathlib import Path

import rich_click as click

from oembed_resolver import __version__
from oembed_resolver.controllers import (
    DiscoverCommand,
    EndpointCommand,
    OembedCliController,
    RenderCommand,
)

click.rich_click.USE_MARKDOWN = True
CONTROLLER = OembedCliController()

_PROVIDERS_OPTION = click.option(
    "--providers",
    "providers_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="JSON provider table. Defaults to OEMBED_PROVIDERS_PATH or the built-in table.",
)


@click.group()
@click.version_option(version=__version__, prog_name="oembed-resolver")
@click.option("--verbose", "-v", is_flag=True, help="Log resolution decisions to stderr.")
def oembed_resolver(verbose: bool) -> None:
    """oEmbed resolution CLI."""

    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


@oembed_resolver.command("render")
@click.argument("url")
@_PROVIDERS_OPTION
@click.option("--type", "expected_type", default=None, help="Only embed resources of this oEmbed type.")
@click.option("--width", type=click.IntRange(min=1), default=None, help="Requested width.")
@click.option("--height", type=click.IntRange(min=1), default=None, help="Requested height.")
@click.option("--class", "css_class", default=None, help="Extra CSS class for the rendered element.")
@click.option("--https", "secure", is_flag=True, help="Resolve as if serving over https.")
def render(  # noqa: PLR0913
    url: str,
    providers_path: Path | None,
    expected_type: str | None,
    width: int | None,
    height: int | None,
    css_class: str | None,
    secure: bool,
) -> None:
    """Print the HTML embed for URL, or a plain link when nothing embeds."""

    result = CONTROLLER.render(
        RenderCommand(
            url=url,
            providers_path=providers_path,
            expected_type=expected_type,
            width=width,
            height=height,
            css_class=css_class,
            secure=secure,
        ),
    )
    _emit_lines(result.lines)


@oembed_resolver.command("discover")
@click.argument("url")
@_PROVIDERS_OPTION
def discover(url: str, providers_path: Path | None) -> None:
    """Fetch URL and print the oEmbed URL its discovery link declares."""

    result = CONTROLLER.discover(DiscoverCommand(url=url, providers_path=providers_path))
    _emit_lines(result.lines)
    if not result.success:
        raise click.ClickException("oEmbed autodiscovery failed.")


@oembed_resolver.command("endpoint")
@click.argument("url")
@_PROVIDERS_OPTION
@click.option("--https", "secure", is_flag=True, help="Resolve as if serving over https.")
def endpoint(url: str, providers_path: Path | None, secure: bool) -> None:
    """Show which configured provider endpoint URL resolves to."""

    _emit_lines(
        CONTROLLER.endpoint(
            EndpointCommand(url=url, providers_path=providers_path, secure=secure),
        ).lines,
    )


@oembed_resolver.command("providers")
@_PROVIDERS_OPTION
def providers(providers_path: Path | None) -> None:
    """List the provider table in match order."""

    _emit_lines(CONTROLLER.providers(providers_path).lines)


def _emit_lines(lines: list[str]) -> None:
    for line in lines:
        click.echo(line)


if __name__ == "__main__":  # pragma: no cover
    oembed_resolver()
