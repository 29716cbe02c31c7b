"""Tests for page endpoints."""

from dataclasses import replace
from typing import Any

import httpx
import pytest
from aiohttp.test_utils import TestClient
from govanity.config import Config, RenderConfig
from govanity.core.registry import PackageConfig
from govanity.server import create_app

HOST = "go.example.org"
README_URL = "https://raw.example.com/tools/README.md"
REPO = "https://github.com/example/tools"
README = """# Tools

> quick remark

```go
package main
```
"""


class FakeReadmeServer:
    """httpx transport handler serving a fixed README."""

    def __init__(self, *, fail: bool = False) -> None:
        self.fail = fail
        self.requests: list[str] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(str(request.url))
        if self.fail:
            raise httpx.ConnectError("connection refused", request=request)
        if str(request.url) == README_URL:
            return httpx.Response(200, text=README)
        return httpx.Response(404)


@pytest.fixture
def readme_server() -> FakeReadmeServer:
    return FakeReadmeServer()


async def _client(
    aiohttp_client: Any, config: Config, readme_server: FakeReadmeServer
) -> TestClient:
    app = create_app(config, transport=httpx.MockTransport(readme_server))
    return await aiohttp_client(app)


class TestGetIndex:
    """Tests for GET /."""

    @pytest.mark.asyncio
    async def test__lists_packages(
        self, aiohttp_client: Any, test_config: Config, readme_server: FakeReadmeServer
    ) -> None:
        client = await _client(aiohttp_client, test_config, readme_server)

        response = await client.get("/", headers={"Host": HOST})

        assert response.status == 200
        assert "text/html" in response.headers["Content-Type"]
        body = await response.text()
        assert f"<title>{HOST} Go Packages</title>" in body
        assert f'href="https://pkg.go.dev/{HOST}/tools"' in body
        assert f'href="https://pkg.go.dev/{HOST}/cli"' in body
        assert "Example packages" in body
        assert readme_server.requests == []


class TestGetPackage:
    """Tests for GET /{pkg} and GET /{pkg}/*."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("path", ["/tools", "/tools/", "/tools/sub/pkg"])
    async def test__meta_tags__same_for_any_subpath(
        self,
        aiohttp_client: Any,
        test_config: Config,
        readme_server: FakeReadmeServer,
        path: str,
    ) -> None:
        client = await _client(aiohttp_client, test_config, readme_server)

        response = await client.get(path, headers={"Host": HOST})

        assert response.status == 200
        body = await response.text()
        assert f'<meta name="go-import" content="{HOST}/tools git {REPO}">' in body
        assert (
            f'<meta name="go-source" content="{HOST}/tools {REPO} '
            f'{REPO}/tree/main{{/dir}} {REPO}/blob/main{{/dir}}/{{file}}#L{{line}}">'
        ) in body
        assert f'href="https://pkg.go.dev/{HOST}{path}"' in body

    @pytest.mark.asyncio
    async def test__readme__rendered_into_page(
        self, aiohttp_client: Any, test_config: Config, readme_server: FakeReadmeServer
    ) -> None:
        client = await _client(aiohttp_client, test_config, readme_server)

        response = await client.get("/tools/sub", headers={"Host": HOST})

        assert response.status == 200
        body = await response.text()
        assert "<h1>Tools</h1>" in body
        assert "<p><em>quick remark</em></p>" in body
        assert '<pre><code class="language-go">' in body
        assert ".hl-keyword" in body
        assert readme_server.requests == [README_URL]

    @pytest.mark.asyncio
    async def test__readme__fetched_per_request(
        self, aiohttp_client: Any, test_config: Config, readme_server: FakeReadmeServer
    ) -> None:
        client = await _client(aiohttp_client, test_config, readme_server)

        await client.get("/tools", headers={"Host": HOST})
        await client.get("/tools", headers={"Host": HOST})

        assert readme_server.requests == [README_URL, README_URL]

    @pytest.mark.asyncio
    async def test__readme_fetch_failure__empty_body(
        self, aiohttp_client: Any, test_config: Config
    ) -> None:
        """A failed fetch still serves the page, without README content."""
        readme_server = FakeReadmeServer(fail=True)
        client = await _client(aiohttp_client, test_config, readme_server)

        response = await client.get("/tools", headers={"Host": HOST})

        assert response.status == 200
        body = await response.text()
        assert 'name="go-import"' in body
        assert "<h1>Tools</h1>" not in body
        assert "quick remark" not in body

    @pytest.mark.asyncio
    async def test__invalid_readme_url__empty_body(
        self, aiohttp_client: Any, test_config: Config, readme_server: FakeReadmeServer
    ) -> None:
        packages = [PackageConfig(pkg="tools", repo=REPO, readme="http://[::1/x")]
        config = replace(test_config, packages=packages)
        client = await _client(aiohttp_client, config, readme_server)

        response = await client.get("/tools", headers={"Host": HOST})

        assert response.status == 200
        body = await response.text()
        assert f'<meta name="go-import" content="{HOST}/tools git {REPO}">' in body
        assert readme_server.requests == []

    @pytest.mark.asyncio
    async def test__no_readme_configured__no_fetch(
        self, aiohttp_client: Any, test_config: Config, readme_server: FakeReadmeServer
    ) -> None:
        client = await _client(aiohttp_client, test_config, readme_server)

        response = await client.get("/cli", headers={"Host": HOST})

        assert response.status == 200
        assert readme_server.requests == []

    @pytest.mark.asyncio
    async def test__go_get__skips_readme(
        self, aiohttp_client: Any, test_config: Config, readme_server: FakeReadmeServer
    ) -> None:
        """Go toolchain probes get the meta tags without a README fetch."""
        client = await _client(aiohttp_client, test_config, readme_server)

        response = await client.get("/tools/sub?go-get=1", headers={"Host": HOST})

        assert response.status == 200
        body = await response.text()
        assert f'<meta name="go-import" content="{HOST}/tools git {REPO}">' in body
        assert f'href="https://pkg.go.dev/{HOST}/tools/sub"' in body
        assert readme_server.requests == []

    @pytest.mark.asyncio
    async def test__unknown_package__returns_404(
        self, aiohttp_client: Any, test_config: Config, readme_server: FakeReadmeServer
    ) -> None:
        client = await _client(aiohttp_client, test_config, readme_server)

        response = await client.get("/missing/anything", headers={"Host": HOST})

        assert response.status == 404
        assert await response.text() == "Unknown package"

    @pytest.mark.asyncio
    async def test__configured_hostname__overrides_request_host(
        self, aiohttp_client: Any, test_config: Config, readme_server: FakeReadmeServer
    ) -> None:
        config = test_config.with_overrides(hostname="go.example.net")
        client = await _client(aiohttp_client, config, readme_server)

        response = await client.get("/tools?go-get=1", headers={"Host": HOST})

        body = await response.text()
        assert f'content="go.example.net/tools git {REPO}"' in body

    @pytest.mark.asyncio
    async def test__highlight_disabled__plain_code_blocks(
        self, aiohttp_client: Any, test_config: Config, readme_server: FakeReadmeServer
    ) -> None:
        config = replace(test_config, render=RenderConfig(highlight=False))
        client = await _client(aiohttp_client, config, readme_server)

        response = await client.get("/tools", headers={"Host": HOST})

        body = await response.text()
        assert '<div class="language-go"><pre><code>package main' in body
        assert ".hl-keyword" not in body


class TestCreateApp:
    """Tests for create_app()."""

    def test__duplicate_packages__raise(self, test_config: Config) -> None:
        config = replace(test_config, packages=test_config.packages * 2)

        with pytest.raises(ValueError, match="Duplicate package"):
            create_app(config)

    def test__unknown_language__raises(self, test_config: Config) -> None:
        config = replace(test_config, render=RenderConfig(languages=["nosuchlanguage"]))

        with pytest.raises(ValueError, match="Unknown languages"):
            create_app(config)
