"""Upstream image download used by the relay endpoint."""

from dataclasses import dataclass
from typing import Protocol

import httpx

from fitting_room.domain.media import MediaBlob

DEFAULT_IMAGE_MIME_TYPE = "image/jpeg"


class ImageFetcher(Protocol):
    """Interface for downloading an image from an arbitrary origin."""

    async def fetch(self, url: str) -> MediaBlob:
        """Download the image at the URL."""


@dataclass
class HttpxImageFetcher(ImageFetcher):
    """Image downloader using httpx."""

    http_client: httpx.AsyncClient
    timeout: float = 15

    @classmethod
    def create(cls, timeout: float = 15) -> "HttpxImageFetcher":
        """Create a fetcher with a managed httpx session."""
        return cls(
            http_client=httpx.AsyncClient(follow_redirects=True), timeout=timeout
        )

    async def fetch(self, url: str) -> MediaBlob:
        """Download the image bytes and their content type."""
        response = await self.http_client.get(url, timeout=self.timeout)
        response.raise_for_status()
        content_type = response.headers.get("content-type", "")
        mime_type = content_type.split(";")[0].strip() or DEFAULT_IMAGE_MIME_TYPE
        return MediaBlob(data=response.content, mime_type=mime_type)

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
