"""Product link resolution into try-on ready catalog items."""

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Protocol
from uuid import uuid4

from fitting_room.domain.catalog import CatalogItem, GenderAffinity, StyleCategory
from fitting_room.domain.errors import LinkDescriptionError
from fitting_room.domain.media import MediaBlob
from fitting_room.domain.profile import Profile
from fitting_room.services.wardrobe import DEFAULT_IMAGE_URL

logger = logging.getLogger(__name__)

CUSTOM_BRAND = "Custom Link"
FALLBACK_NAME = "Custom Item"
FALLBACK_DESCRIPTION = "A stylish clothing item found online."


@dataclass(frozen=True)
class LinkDescription:
    """What the description service found for a product link."""

    brand: str
    name: str
    description: str
    image_url: str | None


class LinkSearchClient(Protocol):
    """Interface for web-search grounded text answers."""

    async def search_and_answer(self, *, model: str, prompt: str) -> str:
        """Return the model's answer to a prompt that may need web search."""


class ImageRelay(Protocol):
    """Interface for fetching remote image bytes through the relay."""

    async def fetch(self, url: str) -> MediaBlob:
        """Return the image at the URL."""


def build_link_prompt(url: str) -> str:
    """Build the product identification prompt."""
    return (
        f"I have a link to a clothing item: {url}\n\n"
        "Please use web search to find this product.\n"
        "1. Identify the Brand and Product Name.\n"
        "2. Write a detailed visual description of the item (color, fabric "
        "texture, fit, neckline, key details).\n"
        "3. Find the URL of the main product image (high resolution if possible).\n\n"
        "Format your response exactly like this:\n"
        "Brand: [Brand]\n"
        "Name: [Product Name]\n"
        "Description: [Visual Description]\n"
        "ImageURL: [URL of the image]"
    )


def _field_pattern(label: str) -> re.Pattern[str]:
    return re.compile(
        rf"^[\s*_-]*{label}[\s*_]*:[\s*_]*(.+?)\s*$", re.IGNORECASE | re.MULTILINE
    )


_BRAND = _field_pattern("Brand")
_NAME = _field_pattern("Name")
_DESCRIPTION = _field_pattern("Description")
_IMAGE_URL = _field_pattern("ImageURL")


def parse_link_description(text: str) -> LinkDescription:
    """Parse the line-oriented answer into a link description."""
    brand = _match(_BRAND, text)
    name = _match(_NAME, text)
    description = _match(_DESCRIPTION, text)
    image_url = _match(_IMAGE_URL, text)
    if image_url:
        image_url = image_url.strip("<>()[] ")
    return LinkDescription(
        brand=brand or CUSTOM_BRAND,
        name=name or FALLBACK_NAME,
        description=description or FALLBACK_DESCRIPTION,
        image_url=image_url if image_url and image_url.startswith("http") else None,
    )


def _match(pattern: re.Pattern[str], text: str) -> str | None:
    found = pattern.search(text)
    if found is None:
        return None
    return found.group(1).strip() or None


def _new_custom_id() -> str:
    return f"custom-{uuid4()}"


@dataclass
class LinkResolver:
    """Turns an arbitrary product URL into a catalog item."""

    search_client: LinkSearchClient
    relay: ImageRelay
    model: str
    id_factory: Callable[[], str] = field(default=_new_custom_id)

    async def describe(self, url: str) -> LinkDescription:
        """Ask the description service what the link points to."""
        try:
            answer = await self.search_client.search_and_answer(
                model=self.model, prompt=build_link_prompt(url)
            )
        except Exception as exc:
            raise LinkDescriptionError(f"Could not describe {url}") from exc
        return parse_link_description(answer)

    async def fetch_reference(self, image_url: str | None) -> MediaBlob | None:
        """Fetch the product image, returning None on any failure."""
        if not image_url:
            return None
        try:
            return await self.relay.fetch(image_url)
        except Exception:
            logger.warning(
                "Image relay failed, falling back to text description",
                exc_info=True,
            )
            return None

    def build_item(
        self,
        url: str,
        description: LinkDescription,
        reference: MediaBlob | None,
        profile: Profile | None,
    ) -> CatalogItem:
        """Create a custom catalog item for a resolved link."""
        gender = (
            GenderAffinity(profile.gender_expression.value)
            if profile
            else GenderAffinity.UNISEX
        )
        return CatalogItem(
            id=self.id_factory(),
            brand=description.brand,
            name=description.name,
            description=description.description,
            price=0.0,
            category=StyleCategory.CASUAL,
            gender=gender,
            image_url=description.image_url or DEFAULT_IMAGE_URL,
            purchase_url=url,
            reference_image=reference,
        )

    async def resolve(self, url: str, profile: Profile | None) -> CatalogItem:
        """Describe the link, fetch its image if possible and build the item."""
        description = await self.describe(url)
        reference = await self.fetch_reference(description.image_url)
        return self.build_item(url, description, reference, profile)
