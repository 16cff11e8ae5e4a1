"""Lazily built OpenAI client bound to the selected API key."""

from dataclasses import dataclass

from openai import AsyncOpenAI, AuthenticationError

from fitting_room.services.credentials import CredentialProbe


@dataclass
class OpenAIClientProvider:
    """Holds the selected API key and the client built from it."""

    api_key: str | None = None
    client: AsyncOpenAI | None = None

    def get(self) -> AsyncOpenAI:
        """Return a client for the current key."""
        if self.client is None:
            if not self.api_key:
                raise RuntimeError("No OpenAI API key selected")
            self.client = AsyncOpenAI(api_key=self.api_key)
        return self.client

    async def select(self, api_key: str) -> None:
        """Switch to a new API key; the next call builds a fresh client."""
        await self.close()
        self.api_key = api_key

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        if self.client is not None:
            await self.client.close()
            self.client = None


@dataclass
class OpenAICredentialProbe(CredentialProbe):
    """Checks that the selected OpenAI key is accepted by the API."""

    provider: OpenAIClientProvider

    async def has_credential(self) -> bool:
        """Return True if the key exists and can list models."""
        if not self.provider.api_key and self.provider.client is None:
            return False
        try:
            await self.provider.get().models.list()
        except AuthenticationError:
            return False
        return True

    async def select_credential(self, api_key: str) -> None:
        """Select a new API key."""
        cleaned = api_key.strip()
        if not cleaned:
            raise ValueError("API key must not be empty")
        await self.provider.select(cleaned)
