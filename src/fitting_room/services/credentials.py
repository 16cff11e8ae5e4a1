"""Credential gate for the generative provider."""

from typing import Protocol


class CredentialProbe(Protocol):
    """Host-provided check for a usable provider credential."""

    async def has_credential(self) -> bool:
        """Return True when a usable credential is selected."""

    async def select_credential(self, api_key: str) -> None:
        """Select a credential to use for subsequent calls."""
