"""Vanity import resolution.

Builds go-import and go-source meta tag content and the pkg.go.dev
redirect target for a request path.
"""

from dataclasses import dataclass

from govanity.core.registry import PackageConfig, PackageRegistry

DOCS_BASE_URL = "https://pkg.go.dev"
VCS = "git"
UNKNOWN_PACKAGE = "Unknown package"


class UnknownPackageError(LookupError):
    """No registry entry matches the first path segment."""

    def __init__(self, pkg: str) -> None:
        super().__init__(UNKNOWN_PACKAGE)
        self.pkg = pkg


@dataclass(frozen=True)
class ResolvedImport:
    """Import metadata derived for a single request."""

    pkg: str
    import_path: str
    repo_url: str
    doc_redirect_url: str
    vcs: str = VCS

    @property
    def go_import(self) -> str:
        """Content of the go-import meta tag: ``prefix vcs repo``."""
        return f"{self.import_path} {self.vcs} {self.repo_url}"

    @property
    def go_source(self) -> str:
        """Content of the go-source meta tag.

        The ``{/dir}``, ``{file}`` and ``{line}`` tokens are placeholders
        expanded by the Go documentation tooling, not by us.
        """
        repo = self.repo_url
        return (
            f"{self.import_path} {repo} "
            f"{repo}/tree/main{{/dir}} "
            f"{repo}/blob/main{{/dir}}/{{file}}#L{{line}}"
        )


def first_segment(path: str) -> str:
    """Return the first segment of a URL path ("/foo/bar" -> "foo")."""
    return path.lstrip("/").split("/", 1)[0]


def resolve_package(package: PackageConfig, host: str, path: str) -> ResolvedImport:
    """Resolve a request for a known package.

    Args:
        package: Matched registry entry
        host: Request hostname without port
        path: Raw request path, starting with ``/{pkg}``

    Returns:
        ResolvedImport for the request
    """
    return ResolvedImport(
        pkg=package.pkg,
        import_path=f"{host}/{package.pkg}",
        repo_url=package.repo,
        doc_redirect_url=f"{DOCS_BASE_URL}/{host}/{path.removeprefix('/')}",
    )


def resolve(registry: PackageRegistry, host: str, path: str) -> ResolvedImport:
    """Look up the package for a request path and resolve it.

    Args:
        registry: Package registry
        host: Request hostname without port
        path: Raw request path (e.g. "/foo/sub/pkg")

    Returns:
        ResolvedImport for the request

    Raises:
        UnknownPackageError: If no package matches the first path segment
    """
    pkg = first_segment(path)
    package = registry.get(pkg)
    if package is None:
        raise UnknownPackageError(pkg)
    return resolve_package(package, host, path)
