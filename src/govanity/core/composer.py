"""HTML page composition.

Renders the package index and per-package landing pages from the
bundled Jinja2 templates.
"""

from dataclasses import dataclass

from jinja2 import Environment, PackageLoader, select_autoescape
from markupsafe import Markup

from govanity.assets import read_static
from govanity.core.registry import PackageRegistry
from govanity.core.resolver import ResolvedImport, resolve_package


@dataclass(frozen=True)
class RenderedDocument:
    """A composed page."""

    title: str
    body_html: str
    stylesheet: str
    html: str


class PageComposer:
    """Compose complete HTML documents with a shared layout."""

    def __init__(
        self,
        *,
        avatar: str = "",
        description: str = "",
        stylesheet: str | None = None,
        refresh: bool = False,
    ) -> None:
        """Initialize composer.

        Args:
            avatar: Avatar image URL shown on every page ("" to omit)
            description: Site description shown on the index page
            stylesheet: CSS embedded in every page (default: bundled style.css)
            refresh: Add a meta refresh to the documentation on package pages
        """
        self.avatar = avatar
        self.description = description
        self.stylesheet = stylesheet if stylesheet is not None else read_static("style.css")
        self.refresh = refresh
        self._env = Environment(
            loader=PackageLoader("govanity", "templates"),
            autoescape=select_autoescape(default=True),
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def compose_index(self, host: str, registry: PackageRegistry) -> RenderedDocument:
        """Compose the index page listing every package.

        Args:
            host: Hostname the packages are served under
            registry: Package registry

        Returns:
            RenderedDocument for the index page
        """
        entries = [resolve_package(package, host, f"/{package.pkg}") for package in registry]
        body = self._env.get_template("index.html").render(
            host=host,
            avatar=self.avatar,
            description=self.description,
            entries=entries,
        )
        return self._document(f"{host} Go Packages", body)

    def compose_package(
        self,
        resolved: ResolvedImport,
        readme_html: str = "",
    ) -> RenderedDocument:
        """Compose a package landing page.

        Args:
            resolved: Resolved import metadata for the request
            readme_html: Rendered README fragment ("" for none)

        Returns:
            RenderedDocument carrying the go-import and go-source meta tags
        """
        body = self._env.get_template("package.html").render(
            resolved=resolved,
            avatar=self.avatar,
            readme=Markup(readme_html),
        )
        refresh_url = resolved.doc_redirect_url if self.refresh else None
        return self._document(resolved.pkg, body, resolved=resolved, refresh_url=refresh_url)

    def _document(
        self,
        title: str,
        body: str,
        *,
        resolved: ResolvedImport | None = None,
        refresh_url: str | None = None,
    ) -> RenderedDocument:
        page = self._env.get_template("document.html").render(
            title=title,
            stylesheet=Markup(self.stylesheet),
            resolved=resolved,
            refresh_url=refresh_url,
            body=Markup(body),
        )
        return RenderedDocument(
            title=title,
            body_html=body,
            stylesheet=self.stylesheet,
            html=page,
        )
