"""Image download client."""

from dataclasses import dataclass

import httpx

from cookery.services.photos import ImageDownloader


@dataclass
class HttpxImageDownloader(ImageDownloader):
    """Downloads generated images using httpx."""

    http_client: httpx.AsyncClient
    timeout: float = 30.0

    @classmethod
    def create(cls, timeout: float = 30.0) -> "HttpxImageDownloader":
        """Create a downloader with a managed httpx session."""
        return cls(
            http_client=httpx.AsyncClient(follow_redirects=True), timeout=timeout
        )

    async def download(self, url: str) -> tuple[bytes, int]:
        """Fetch the URL and return its body and status code."""
        response = await self.http_client.get(url, timeout=self.timeout)
        return response.content, response.status_code

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
