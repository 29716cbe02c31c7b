"""aiohttp server for govanity.

Application factory and route registration.
"""

import logging
from collections.abc import AsyncIterator, Callable

import httpx
from aiohttp import web

from govanity.api.pages import create_pages_routes
from govanity.app_keys import composer_key, fetcher_key, hostname_key, registry_key, renderer_key
from govanity.assets import read_static
from govanity.config import Config
from govanity.core.composer import PageComposer
from govanity.core.fetcher import ReadmeFetcher
from govanity.core.highlighter import LanguageRegistry, SyntaxHighlighter
from govanity.core.markdown import MarkdownRenderer, plain_strategy, readme_strategy

logger = logging.getLogger(__name__)


def create_app(
    config: Config,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> web.Application:
    """Create aiohttp application.

    Args:
        config: Application configuration
        transport: Optional httpx transport for README fetches (used in tests)

    Returns:
        Configured aiohttp application

    Raises:
        ValueError: If the package list or language list is invalid
    """
    app = web.Application()

    registry = config.build_registry()
    stylesheet = read_static("style.css")

    if config.render.highlight:
        highlighter = SyntaxHighlighter(LanguageRegistry.builtin(config.render.languages))
        renderer = MarkdownRenderer(
            readme_strategy(highlighter),
            escape=config.render.escape_html,
        )
        stylesheet += highlighter.stylesheet()
    else:
        renderer = MarkdownRenderer(plain_strategy(), escape=config.render.escape_html)

    composer = PageComposer(
        avatar=config.site.avatar,
        description=config.site.description,
        stylesheet=stylesheet,
        refresh=config.site.refresh,
    )

    app[registry_key] = registry
    app[renderer_key] = renderer
    app[composer_key] = composer
    app[hostname_key] = config.site.hostname or ""

    app.cleanup_ctx.append(_readme_client(config.readme.timeout, transport))
    app.router.add_routes(create_pages_routes())

    logger.info(f"Serving {len(registry)} packages")
    return app


def _readme_client(
    timeout: float,
    transport: httpx.AsyncBaseTransport | None,
) -> Callable[[web.Application], AsyncIterator[None]]:
    """Own the shared httpx client for the application lifetime."""

    async def readme_client(app: web.Application) -> AsyncIterator[None]:
        async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
            app[fetcher_key] = ReadmeFetcher(client)
            yield

    return readme_client


def run_server(config: Config) -> None:
    """Run the server.

    Args:
        config: Application configuration
    """
    app = create_app(config)
    web.run_app(app, host=config.server.host, port=config.server.port)
