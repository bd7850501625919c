"""HTTP reachability checker for public image URLs."""

from dataclasses import dataclass

import httpx

from drink_tracker.services.images import UrlChecker


@dataclass
class HttpxUrlChecker(UrlChecker):
    """Checks URLs with a HEAD request."""

    http_client: httpx.AsyncClient
    timeout: float = 5.0

    @classmethod
    def create(cls, timeout: float = 5.0) -> "HttpxUrlChecker":
        """Create a checker with a managed httpx session."""
        return cls(http_client=httpx.AsyncClient(), timeout=timeout)

    async def is_reachable(self, url: str) -> bool:
        """Return True when HEAD answers with a success status."""
        try:
            response = await self.http_client.head(url, timeout=self.timeout)
        except httpx.HTTPError:
            return False
        return response.is_success

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
