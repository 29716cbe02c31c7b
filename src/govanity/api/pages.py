"""Page endpoints.

Serves the package index and the per-package pages carrying go-import
and go-source meta tags.
"""

from aiohttp import web

from govanity.app_keys import composer_key, fetcher_key, hostname_key, registry_key, renderer_key
from govanity.core.resolver import UnknownPackageError, resolve


def create_pages_routes() -> list[web.RouteDef]:
    return [
        web.get("/", get_index),
        web.get("/{pkg}", get_package),
        web.get("/{pkg}/{rest:.*}", get_package),
    ]


async def get_index(request: web.Request) -> web.Response:
    registry = request.app[registry_key]
    composer = request.app[composer_key]

    document = composer.compose_index(_hostname(request), registry)
    return web.Response(text=document.html, content_type="text/html")


async def get_package(request: web.Request) -> web.Response:
    registry = request.app[registry_key]
    composer = request.app[composer_key]
    renderer = request.app[renderer_key]
    fetcher = request.app[fetcher_key]

    path = request.rel_url.raw_path
    try:
        resolved = resolve(registry, _hostname(request), path)
    except UnknownPackageError as e:
        raise web.HTTPNotFound(text=str(e)) from e

    # The go command only reads the meta tags
    readme_html = ""
    if request.query.get("go-get") != "1":
        package = registry.get(resolved.pkg)
        readme_text = await fetcher.fetch(package.readme if package else None)
        readme_html = renderer.render(readme_text)

    document = composer.compose_package(resolved, readme_html)
    return web.Response(text=document.html, content_type="text/html")


def _hostname(request: web.Request) -> str:
    """Configured hostname, or the request host without port."""
    return request.app[hostname_key] or request.url.host or ""
