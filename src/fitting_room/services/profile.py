"""Styling profile analysis from the uploaded photo."""

from dataclasses import dataclass
from typing import Protocol

from pydantic import ValidationError

from fitting_room.domain.errors import ProfileAnalysisError
from fitting_room.domain.media import MediaBlob
from fitting_room.domain.profile import Profile, ProfilePayload

PROFILE_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "gender": {"type": "string", "enum": ["male", "female", "neutral"]},
        "styleProfile": {"type": "string"},
        "fitNotes": {"type": "string"},
    },
    "required": ["gender", "styleProfile", "fitNotes"],
    "additionalProperties": False,
}

PROFILE_PROMPT = (
    "Analyze the person in this image for a personal styling application. "
    "Determine their likely gender expression (male, female, or neutral) "
    "to filter clothing options correctly. "
    "Provide a brief 1-sentence description of their current style vibe. "
    "Provide a brief 1-sentence note on their apparent body type for fit advice."
)


class ProfileClient(Protocol):
    """Interface for multimodal structured extraction."""

    async def extract(
        self,
        *,
        model: str,
        image: MediaBlob,
        schema: dict[str, object],
        prompt: str,
    ) -> dict[str, object]:
        """Return structured data extracted from an image."""


@dataclass
class ProfileAnalyzer:
    """Derives a styling profile from a photo."""

    client: ProfileClient
    model: str

    async def analyze(self, image: MediaBlob) -> Profile:
        """Analyze the photo and return the styling profile."""
        raw = await self.client.extract(
            model=self.model,
            image=image,
            schema=PROFILE_SCHEMA,
            prompt=PROFILE_PROMPT,
        )
        try:
            payload = ProfilePayload.model_validate(raw)
        except ValidationError as exc:
            raise ProfileAnalysisError(
                "Profile analysis returned invalid data"
            ) from exc
        return payload.to_profile()
