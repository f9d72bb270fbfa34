"""Photo download client."""

from dataclasses import dataclass

import httpx

from protein_coach.errors import StorageError
from protein_coach.services.meals import ImageFetcher
from protein_coach.services.vision import FetchedImage


@dataclass
class HttpxImageFetcher(ImageFetcher):
    """Image fetcher using httpx."""

    http_client: httpx.AsyncClient
    timeout: float = 20.0

    @classmethod
    def create(cls, timeout: float = 20.0) -> "HttpxImageFetcher":
        """Create an image fetcher with a managed httpx session."""
        return cls(
            http_client=httpx.AsyncClient(follow_redirects=True), timeout=timeout
        )

    async def fetch(self, url: str) -> FetchedImage:
        """Download image bytes from a signed URL."""
        try:
            response = await self.http_client.get(url, timeout=self.timeout)
        except httpx.HTTPError as exc:
            raise StorageError(f"Failed to fetch image: {exc}") from exc
        if response.is_error:
            raise StorageError(f"Failed to fetch image: {response.status_code}")
        return FetchedImage(
            content=response.content,
            content_type=response.headers.get("content-type"),
        )

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
