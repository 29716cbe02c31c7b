"""Shared test fixtures."""

import pytest
from govanity.config import Config, ReadmeConfig, RenderConfig, ServerConfig, SiteConfig
from govanity.core.highlighter import LanguageRegistry, SyntaxHighlighter
from govanity.core.registry import PackageConfig, PackageRegistry

README_URL = "https://raw.example.com/tools/README.md"


@pytest.fixture
def packages() -> list[PackageConfig]:
    return [
        PackageConfig(pkg="tools", repo="https://github.com/example/tools", readme=README_URL),
        PackageConfig(pkg="cli", repo="https://github.com/example/cli"),
    ]


@pytest.fixture
def registry(packages: list[PackageConfig]) -> PackageRegistry:
    return PackageRegistry(packages)


@pytest.fixture(scope="session")
def highlighter() -> SyntaxHighlighter:
    """Highlighter over every bundled Pygments language."""
    return SyntaxHighlighter(LanguageRegistry.builtin())


@pytest.fixture
def test_config(packages: list[PackageConfig]) -> Config:
    """Create a test configuration serving the sample packages."""
    return Config(
        server=ServerConfig(),
        site=SiteConfig(avatar="https://example.com/avatar.png", description="Example packages"),
        readme=ReadmeConfig(timeout=1.0),
        render=RenderConfig(),
        packages=packages,
    )
