"""Photorealistic try-on rendering."""

from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from fitting_room.domain.catalog import CatalogItem
from fitting_room.domain.errors import TryOnRenderError
from fitting_room.domain.media import MediaBlob

RENDER_MIME_TYPE = "image/png"

REFERENCE_PROMPT = (
    "Photorealistic virtual try-on.\n"
    "Task: Dress the person shown in the FIRST image with the clothing item "
    "shown in the SECOND image.\n\n"
    "Instructions:\n"
    "1. Keep the person's identity, pose, and body shape exactly as they "
    "appear in the first image.\n"
    "2. Replace their current outfit with the item from the second image.\n"
    "3. Ensure the item fits naturally, respecting the person's physique and "
    "the fabric's drape.\n"
    "4. Background: Luxury walk-in closet with dark wood.\n"
    "5. Output: Full body, high fidelity."
)


class TryOnStrategy(Enum):
    """How the garment is conveyed to the renderer."""

    REFERENCE_IMAGE = "reference_image"
    DESCRIPTION_ONLY = "description_only"


class ImageEditClient(Protocol):
    """Interface for multi-image editing."""

    async def edit_image(
        self,
        *,
        model: str,
        prompt: str,
        images: list[MediaBlob],
        size: str,
    ) -> bytes | None:
        """Return the edited image bytes, or None if nothing was produced."""


def select_strategy(item: CatalogItem) -> TryOnStrategy:
    """Pick the try-on strategy based on what the item carries."""
    if item.reference_image is not None:
        return TryOnStrategy.REFERENCE_IMAGE
    return TryOnStrategy.DESCRIPTION_ONLY


def build_description_prompt(garment_description: str) -> str:
    """Build the text-only try-on prompt."""
    return (
        "Full body wide shot. The person from the reference image wearing: "
        f"{garment_description}.\n"
        "The person is standing in a luxury walk-in closet with dark wood "
        "shelving and warm lighting.\n"
        "Ensure the entire head and feet are visible. Do not crop.\n"
        "Photorealistic.\n"
        "Preserve facial features exactly."
    )


@dataclass
class TryOnRenderer:
    """Renders a still of the user wearing a catalog item."""

    client: ImageEditClient
    model: str
    size: str

    async def render(self, source: MediaBlob, item: CatalogItem) -> MediaBlob:
        """Render the user's photo wearing the item."""
        if select_strategy(item) is TryOnStrategy.REFERENCE_IMAGE:
            prompt = REFERENCE_PROMPT
            images = [source, item.reference_image]
        else:
            prompt = build_description_prompt(item.garment_description)
            images = [source]

        data = await self.client.edit_image(
            model=self.model, prompt=prompt, images=images, size=self.size
        )
        if not data:
            raise TryOnRenderError("No image generated")
        return MediaBlob(data=data, mime_type=RENDER_MIME_TYPE)
