"""README retrieval.

Best-effort async fetch of raw markdown. Failures are logged and turned
into empty content so the page still renders.
"""

import logging

import httpx

logger = logging.getLogger(__name__)


class ReadmeFetcher:
    """Fetch README markdown over HTTP."""

    def __init__(self, client: httpx.AsyncClient):
        """Initialize fetcher.

        Args:
            client: Shared httpx AsyncClient owned by the application
        """
        self.client = client

    async def fetch(self, url: str | None) -> str:
        """Fetch README text.

        Args:
            url: Document URL, or None when no README is configured

        Returns:
            Markdown text, or "" if there is no URL or the fetch failed
        """
        if not url:
            return ""

        try:
            response = await self.client.get(url, follow_redirects=True)
            response.raise_for_status()
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning(f"Failed to fetch README {url}: {e}")
            return ""

        logger.debug(f"Fetched README {url} ({len(response.text)} characters)")
        return response.text
