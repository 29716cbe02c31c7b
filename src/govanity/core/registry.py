"""Package registry.

Immutable lookup table of vanity import packages, built once at startup.
"""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass


@dataclass(frozen=True)
class PackageConfig:
    """A vanity import path mapped to its repository."""

    pkg: str
    repo: str
    readme: str | None = None


class PackageRegistry:
    """Read-only table of packages keyed by import path suffix.

    Preserves insertion order for listings and rejects duplicate ``pkg``
    values on construction.
    """

    def __init__(self, packages: Iterable[PackageConfig] = ()) -> None:
        ordered: list[PackageConfig] = []
        by_pkg: dict[str, PackageConfig] = {}
        for package in packages:
            if not package.pkg or "/" in package.pkg:
                raise ValueError(f"Invalid package name: {package.pkg!r}")
            if package.pkg in by_pkg:
                raise ValueError(f"Duplicate package: {package.pkg}")
            by_pkg[package.pkg] = package
            ordered.append(package)

        self._packages = tuple(ordered)
        self._by_pkg = by_pkg

    @classmethod
    def from_records(cls, records: Iterable[dict[str, str | None]]) -> "PackageRegistry":
        """Build registry from raw ``{pkg, repo, readme}`` mappings."""
        return cls(
            PackageConfig(
                pkg=str(record["pkg"]),
                repo=str(record["repo"]),
                readme=record.get("readme"),
            )
            for record in records
        )

    @property
    def packages(self) -> tuple[PackageConfig, ...]:
        """All packages in configuration order."""
        return self._packages

    def get(self, pkg: str) -> PackageConfig | None:
        """Return the package whose name matches exactly, or None."""
        return self._by_pkg.get(pkg)

    def __contains__(self, pkg: object) -> bool:
        return pkg in self._by_pkg

    def __iter__(self) -> Iterator[PackageConfig]:
        return iter(self._packages)

    def __len__(self) -> int:
        return len(self._packages)
