"""Client for the same-origin image relay endpoint."""

from dataclasses import dataclass

import httpx

from fitting_room.domain.errors import ImageRelayError
from fitting_room.domain.media import MediaBlob
from fitting_room.services.links import ImageRelay


@dataclass
class HttpxImageRelayClient(ImageRelay):
    """Fetches remote images as base64 through the relay endpoint."""

    relay_url: str
    http_client: httpx.AsyncClient
    timeout: float = 15

    @classmethod
    def create(cls, relay_url: str, timeout: float = 15) -> "HttpxImageRelayClient":
        """Create a relay client with a managed httpx session."""
        return cls(
            relay_url=relay_url, http_client=httpx.AsyncClient(), timeout=timeout
        )

    async def fetch(self, url: str) -> MediaBlob:
        """Return the image at the URL via the relay."""
        response = await self.http_client.get(
            self.relay_url, params={"url": url}, timeout=self.timeout
        )
        if response.status_code != httpx.codes.OK:
            raise ImageRelayError(f"Relay returned {response.status_code}")
        payload = response.json()
        encoded = payload.get("base64")
        mime_type = payload.get("mimeType")
        if not encoded or not mime_type:
            raise ImageRelayError("Relay response is missing image data")
        return MediaBlob.from_base64(encoded, mime_type)

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
