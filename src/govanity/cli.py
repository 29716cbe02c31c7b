"""CLI interface for govanity.

Serve vanity import pages, and render or resolve individual inputs for
checking a configuration by hand.
"""

import logging
import sys
from pathlib import Path

import click

from govanity.config import Config


@click.group()
def cli() -> None:
    """govanity - Go vanity imports with README landing pages."""


def _load_config(config_path: Path | None) -> Config:
    try:
        return Config.load(config_path)
    except (FileNotFoundError, ValueError) as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        sys.exit(1)


@cli.command()
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path to configuration file (default: auto-discover govanity.toml)",
)
@click.option(
    "--host",
    default=None,
    help="Host to bind to (overrides config)",
)
@click.option(
    "--port",
    "-p",
    type=int,
    default=None,
    help="Port to bind to (overrides config)",
)
@click.option(
    "--hostname",
    default=None,
    help="Hostname used in import paths (overrides config, default: request host)",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable debug logging",
)
def serve(
    config_path: Path | None,
    host: str | None,
    port: int | None,
    hostname: str | None,
    verbose: bool,
) -> None:
    """Start the vanity import server."""
    from govanity.server import run_server

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = _load_config(config_path).with_overrides(host=host, port=port, hostname=hostname)

    click.echo(f"Starting server on {config.server.host}:{config.server.port}")
    click.echo(f"Packages: {len(config.packages)}")
    if config.site.hostname:
        click.echo(f"Hostname: {config.site.hostname}")
    else:
        click.echo("Hostname: from request")
    click.echo(f"Highlighting: {'enabled' if config.render.highlight else 'disabled'}")

    try:
        run_server(config)
    except ValueError as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        sys.exit(1)


@cli.command()
@click.argument("markdown_file", type=click.Path(exists=True, path_type=Path))
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path to configuration file (default: auto-discover govanity.toml)",
)
@click.option(
    "--highlight/--no-highlight",
    default=None,
    help="Enable/disable syntax highlighting (overrides config)",
)
def render(markdown_file: Path, config_path: Path | None, highlight: bool | None) -> None:
    """Render a markdown file the way README pages are rendered."""
    from govanity.core.highlighter import LanguageRegistry, SyntaxHighlighter
    from govanity.core.markdown import MarkdownRenderer, plain_strategy, readme_strategy

    config = _load_config(config_path)
    use_highlight = config.render.highlight if highlight is None else highlight

    if use_highlight:
        try:
            languages = LanguageRegistry.builtin(config.render.languages)
        except ValueError as e:
            click.echo(click.style(f"Error: {e}", fg="red"), err=True)
            sys.exit(1)
        renderer = MarkdownRenderer(
            readme_strategy(SyntaxHighlighter(languages)),
            escape=config.render.escape_html,
        )
    else:
        renderer = MarkdownRenderer(plain_strategy(), escape=config.render.escape_html)

    click.echo(renderer.render(markdown_file.read_text(encoding="utf-8")), nl=False)


@cli.command()
@click.argument("hostname")
@click.argument("path")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path to configuration file (default: auto-discover govanity.toml)",
)
def resolve(hostname: str, path: str, config_path: Path | None) -> None:
    """Show the meta tags and documentation URL served for PATH."""
    from govanity.core.resolver import UnknownPackageError
    from govanity.core.resolver import resolve as resolve_import

    config = _load_config(config_path)
    try:
        resolved = resolve_import(config.build_registry(), hostname, f"/{path.lstrip('/')}")
    except (UnknownPackageError, ValueError) as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        sys.exit(1)

    click.echo(f"go-import: {resolved.go_import}")
    click.echo(f"go-source: {resolved.go_source}")
    click.echo(f"docs: {resolved.doc_redirect_url}")


if __name__ == "__main__":
    cli()
