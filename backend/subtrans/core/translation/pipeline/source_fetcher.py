"""Retrieval of subtitle documents from their source location."""

import logging

import httpx

from ..errors import SourceFetchError

logger = logging.getLogger(__name__)


class SourceFetcher:
    """Downloads subtitle documents over HTTP."""

    def __init__(self, timeout: float = 30.0, client: httpx.AsyncClient | None = None):
        """Initialize the fetcher.

        Args:
            timeout: Request timeout in seconds
            client: Optional shared client; a short-lived one is used otherwise
        """
        self.timeout = timeout
        self._client = client

    async def fetch(self, url: str) -> str:
        """Fetch a document as text.

        Raises:
            SourceFetchError: On transport failure or a non-success status
        """
        try:
            if self._client is not None:
                response = await self._client.get(url, timeout=self.timeout)
            else:
                async with httpx.AsyncClient(follow_redirects=True) as client:
                    response = await client.get(url, timeout=self.timeout)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise SourceFetchError(
                f"Source returned HTTP {e.response.status_code} for {url}"
            ) from e
        except httpx.HTTPError as e:
            raise SourceFetchError(f"Could not retrieve {url}: {e}") from e

        logger.debug("[Fetcher] Retrieved %d characters from %s", len(response.text), url)
        return response.text
