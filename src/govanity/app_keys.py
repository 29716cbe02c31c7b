"""Application keys for type-safe app configuration access."""

from aiohttp import web

from govanity.core.composer import PageComposer
from govanity.core.fetcher import ReadmeFetcher
from govanity.core.markdown import MarkdownRenderer
from govanity.core.registry import PackageRegistry

registry_key = web.AppKey("registry", PackageRegistry)
renderer_key = web.AppKey("renderer", MarkdownRenderer)
composer_key = web.AppKey("composer", PageComposer)
fetcher_key = web.AppKey("fetcher", ReadmeFetcher)
hostname_key = web.AppKey("hostname", str)
