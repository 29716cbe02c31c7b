"""Configuration management for govanity.

Supports TOML configuration format with auto-discovery.
"""

import tomllib
from dataclasses import dataclass, field, replace
from pathlib import Path

import httpx

from govanity.core.registry import PackageConfig, PackageRegistry

CONFIG_FILENAME = "govanity.toml"


@dataclass
class ServerConfig:
    """Server configuration."""

    host: str = "127.0.0.1"
    port: int = 8080


@dataclass
class SiteConfig:
    """Site presentation configuration."""

    hostname: str | None = None
    avatar: str = ""
    description: str = ""
    refresh: bool = False


@dataclass
class ReadmeConfig:
    """README fetch configuration."""

    timeout: float = 10.0


@dataclass
class RenderConfig:
    """Markdown rendering configuration."""

    highlight: bool = True
    languages: list[str] | None = None
    escape_html: bool = True


@dataclass
class Config:
    """Application configuration."""

    server: ServerConfig
    site: SiteConfig
    readme: ReadmeConfig
    render: RenderConfig
    packages: list[PackageConfig] = field(default_factory=list)
    config_path: Path | None = None

    @classmethod
    def load(cls, config_path: Path | None = None) -> "Config":
        """Load configuration from file.

        If config_path is provided, loads from that file.
        Otherwise, searches for govanity.toml in current directory and parents.

        Args:
            config_path: Optional explicit path to config file

        Returns:
            Config instance with defaults for missing sections

        Raises:
            FileNotFoundError: If explicit config_path doesn't exist
            ValueError: If configuration is invalid
        """
        if config_path is not None:
            if not config_path.exists():
                raise FileNotFoundError(f"Configuration file not found: {config_path}")
            return cls._load_from_file(config_path)

        discovered_path = cls._discover_config()
        if discovered_path is None:
            return cls._default()

        return cls._load_from_file(discovered_path)

    @classmethod
    def _discover_config(cls) -> Path | None:
        """Search for config file in current directory and parents."""
        current = Path.cwd()
        while True:
            candidate = current / CONFIG_FILENAME
            if candidate.exists():
                return candidate
            parent = current.parent
            if parent == current:
                return None
            current = parent

    @classmethod
    def _default(cls) -> "Config":
        return cls(
            server=ServerConfig(),
            site=SiteConfig(),
            readme=ReadmeConfig(),
            render=RenderConfig(),
        )

    @classmethod
    def _load_from_file(cls, path: Path) -> "Config":
        """Load configuration from a specific file.

        Args:
            path: Path to TOML configuration file

        Returns:
            Config instance

        Raises:
            ValueError: If configuration is invalid
        """
        with path.open("rb") as f:
            data = tomllib.load(f)

        return cls(
            server=cls._parse_server(data.get("server")),
            site=cls._parse_site(data.get("site")),
            readme=cls._parse_readme(data.get("readme")),
            render=cls._parse_render(data.get("render")),
            packages=cls._parse_packages(data.get("packages")),
            config_path=path,
        )

    @classmethod
    def _parse_server(cls, data: object) -> ServerConfig:
        if data is None:
            return ServerConfig()

        if not isinstance(data, dict):
            raise ValueError("server section must be a dictionary")

        host = data.get("host", "127.0.0.1")
        if not isinstance(host, str):
            raise ValueError("server.host must be a string")

        port = data.get("port", 8080)
        if not isinstance(port, int) or isinstance(port, bool):
            raise ValueError("server.port must be an integer")

        return ServerConfig(host=host, port=port)

    @classmethod
    def _parse_site(cls, data: object) -> SiteConfig:
        if data is None:
            return SiteConfig()

        if not isinstance(data, dict):
            raise ValueError("site section must be a dictionary")

        hostname = data.get("hostname")
        if hostname is not None and not isinstance(hostname, str):
            raise ValueError("site.hostname must be a string")

        avatar = data.get("avatar", "")
        if not isinstance(avatar, str):
            raise ValueError("site.avatar must be a string")

        description = data.get("description", "")
        if not isinstance(description, str):
            raise ValueError("site.description must be a string")

        refresh = data.get("refresh", False)
        if not isinstance(refresh, bool):
            raise ValueError("site.refresh must be a boolean")

        return SiteConfig(
            hostname=hostname or None,
            avatar=avatar,
            description=description,
            refresh=refresh,
        )

    @classmethod
    def _parse_readme(cls, data: object) -> ReadmeConfig:
        if data is None:
            return ReadmeConfig()

        if not isinstance(data, dict):
            raise ValueError("readme section must be a dictionary")

        timeout = data.get("timeout", 10.0)
        if not isinstance(timeout, int | float) or isinstance(timeout, bool) or timeout <= 0:
            raise ValueError("readme.timeout must be a positive number")

        return ReadmeConfig(timeout=float(timeout))

    @classmethod
    def _parse_render(cls, data: object) -> RenderConfig:
        if data is None:
            return RenderConfig()

        if not isinstance(data, dict):
            raise ValueError("render section must be a dictionary")

        highlight = data.get("highlight", True)
        if not isinstance(highlight, bool):
            raise ValueError("render.highlight must be a boolean")

        languages_raw = data.get("languages")
        languages: list[str] | None = None
        if languages_raw is not None:
            if not isinstance(languages_raw, list):
                raise ValueError("render.languages must be a list")
            languages = []
            for item in languages_raw:
                if not isinstance(item, str):
                    raise ValueError("render.languages items must be strings")
                languages.append(item)

        escape_html = data.get("escape_html", True)
        if not isinstance(escape_html, bool):
            raise ValueError("render.escape_html must be a boolean")

        return RenderConfig(highlight=highlight, languages=languages, escape_html=escape_html)

    @classmethod
    def _parse_packages(cls, data: object) -> list[PackageConfig]:
        """Parse the [[packages]] array of tables.

        Args:
            data: Raw packages data

        Returns:
            Packages in file order
        """
        if data is None:
            return []

        if not isinstance(data, list):
            raise ValueError("packages must be an array of tables")

        packages: list[PackageConfig] = []
        for index, item in enumerate(data):
            if not isinstance(item, dict):
                raise ValueError(f"packages[{index}] must be a table")

            pkg = item.get("pkg")
            if not isinstance(pkg, str) or not pkg:
                raise ValueError(f"packages[{index}].pkg must be a non-empty string")

            repo = item.get("repo")
            if not isinstance(repo, str) or not repo:
                raise ValueError(f"packages[{index}].repo must be a non-empty string")

            readme = item.get("readme")
            if readme is not None and not isinstance(readme, str):
                raise ValueError(f"packages[{index}].readme must be a string")
            if readme and not _is_http_url(readme):
                raise ValueError(f"packages[{index}].readme must be an http(s) URL")

            packages.append(PackageConfig(pkg=pkg, repo=repo, readme=readme or None))

        return packages

    def build_registry(self) -> PackageRegistry:
        """Build the package registry.

        Raises:
            ValueError: If package names are duplicated or invalid
        """
        return PackageRegistry(self.packages)

    def with_overrides(
        self,
        *,
        host: str | None = None,
        port: int | None = None,
        hostname: str | None = None,
    ) -> "Config":
        """Create a new Config with CLI overrides applied.

        Only non-None values override the existing config. The original
        Config is not modified.

        Args:
            host: Override server.host
            port: Override server.port
            hostname: Override site.hostname

        Returns:
            New Config instance with overrides applied
        """
        server = self.server
        if host is not None or port is not None:
            server = replace(
                self.server,
                host=host if host is not None else self.server.host,
                port=port if port is not None else self.server.port,
            )

        site = self.site
        if hostname is not None:
            site = replace(self.site, hostname=hostname)

        return replace(self, server=server, site=site)


def _is_http_url(value: str) -> bool:
    try:
        url = httpx.URL(value)
    except httpx.InvalidURL:
        return False
    return url.scheme in ("http", "https") and bool(url.host)
