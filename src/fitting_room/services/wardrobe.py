"""Personalized wardrobe curation."""

from dataclasses import dataclass
from typing import Protocol
from urllib.parse import quote_plus

from pydantic import BaseModel, Field

from fitting_room.domain.catalog import CatalogItem, GenderAffinity, StyleCategory
from fitting_room.domain.profile import GenderExpression, Profile

ITEMS_PER_CATEGORY = 3

_UNSPLASH = "https://images.unsplash.com/photo-{}?q=80&w=800&auto=format&fit=crop"

WARDROBE_IMAGE_MAP: dict[str, str] = {
    "mens_blazer_dark": _UNSPLASH.format("1594938298603-c8148c47e356"),
    "mens_blazer_light": _UNSPLASH.format("1507679799987-c73779587ccf"),
    "mens_jacket_leather": _UNSPLASH.format("1487222477894-8943e31ef7b2"),
    "mens_jacket_casual": _UNSPLASH.format("1559551409-dadc959f76b8"),
    "mens_coat_long": _UNSPLASH.format("1544923246-77307dd654cb"),
    "mens_shirt_white": _UNSPLASH.format("1521572163474-6864f9cf17ab"),
    "mens_shirt_dress": _UNSPLASH.format("1598033129183-c4f50c736f10"),
    "mens_knit_dark": _UNSPLASH.format("1610652492500-ded49ceeb378"),
    "mens_knit_light": _UNSPLASH.format("1611312449408-fcece27cdbb7"),
    "mens_pants_dark": _UNSPLASH.format("1624378439575-d8705ad7ae80"),
    "mens_pants_light": _UNSPLASH.format("1473966968600-fa801b869a1a"),
    "mens_denim_dark": _UNSPLASH.format("1582552938357-32b906df40cb"),
    "mens_shoes_dress": _UNSPLASH.format("1614252369475-531eba835eb1"),
    "mens_shoes_boot": _UNSPLASH.format("1638318252277-3e66df96f9a0"),
    "mens_shoes_sneaker": _UNSPLASH.format("1549298916-b41d501d3772"),
    "womens_blazer_black": _UNSPLASH.format("1584039805625-f772ef919926"),
    "womens_coat_trench": _UNSPLASH.format("1552873822-793575990526"),
    "womens_dress_black": _UNSPLASH.format("1566174053879-31528523f8ae"),
    "womens_dress_casual": _UNSPLASH.format("1595777457583-95e059d581b8"),
    "womens_top_white": _UNSPLASH.format("1564257631407-4deb1f99d992"),
    "womens_knit_neutral": _UNSPLASH.format("1603344797033-f0f4f587ab40"),
    "womens_pants_black": _UNSPLASH.format("1594633312681-425c7b97ccd1"),
    "womens_denim_classic": _UNSPLASH.format("1541099649105-f69ad21f3246"),
    "womens_shoes_heel": _UNSPLASH.format("1543163521-1bf539c55dd2"),
    "womens_shoes_boot": _UNSPLASH.format("1608256246200-53e635b5b65f"),
    "default": _UNSPLASH.format("1490481651871-ab68de25d43d"),
}

DEFAULT_IMAGE_URL = WARDROBE_IMAGE_MAP["default"]

WARDROBE_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "items": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "brand": {"type": "string"},
                    "name": {"type": "string"},
                    "description": {"type": "string"},
                    "price": {"type": "number", "minimum": 0},
                    "category": {
                        "type": "string",
                        "enum": [category.value for category in StyleCategory],
                    },
                    "imageKey": {"type": "string"},
                },
                "required": [
                    "brand",
                    "name",
                    "description",
                    "price",
                    "category",
                    "imageKey",
                ],
                "additionalProperties": False,
            },
        }
    },
    "required": ["items"],
    "additionalProperties": False,
}


class WardrobeClient(Protocol):
    """Interface for structured text generation."""

    async def generate_json(
        self, *, model: str, schema: dict[str, object], prompt: str
    ) -> dict[str, object]:
        """Return structured data generated from a prompt."""


class WardrobeEntry(BaseModel):
    """Single curated item as returned by the model."""

    brand: str
    name: str
    description: str
    price: float = Field(ge=0)
    category: StyleCategory
    image_key: str = Field(alias="imageKey")


class WardrobePayload(BaseModel):
    """Structured wardrobe curation output."""

    items: list[WardrobeEntry]


@dataclass
class WardrobeCurator:
    """Fetches trending items tailored to a styling profile."""

    client: WardrobeClient
    model: str

    async def curate(self, profile: Profile) -> tuple[CatalogItem, ...]:
        """Return the curated wardrobe for the profile."""
        raw = await self.client.generate_json(
            model=self.model,
            schema=WARDROBE_SCHEMA,
            prompt=build_wardrobe_prompt(profile),
        )
        payload = WardrobePayload.model_validate(raw)
        gender = GenderAffinity(profile.gender_expression.value)
        return tuple(
            _to_catalog_item(index, entry, gender)
            for index, entry in enumerate(payload.items)
        )


def build_wardrobe_prompt(profile: Profile) -> str:
    """Build the trend-forecaster prompt for a profile."""
    gender_term = _gender_term(profile.gender_expression)
    keys = "', '".join(WARDROBE_IMAGE_MAP)
    requirements = "\n".join(
        f"- Generate {ITEMS_PER_CATEGORY} items for '{category.value}'"
        for category in StyleCategory
    )
    total = ITEMS_PER_CATEGORY * len(StyleCategory)
    return (
        f"Act as a high-end fashion buyer and trend forecaster for {gender_term}.\n"
        f'Generate a curated list of {total} "Hot Right Now" clothing items '
        f'for a user with a "{profile.style_descriptor}" vibe.\n\n'
        "TARGET AUDIENCE: Gen X and Elder Millennials who want to look stylish "
        "and expensive, not like Gen Z.\n"
        "BRANDS: Use currently trending, high-quality brands (e.g., Aime Leon Dore, "
        "Todd Snyder, Kith, Fear of God Essentials, Drake's, The Row, Khaite, "
        "Toteme, Reformation, Anine Bing, Buck Mason).\n\n"
        "IMPORTANT - VISUAL MATCHING:\n"
        "You must select an 'imageKey' for each item from the provided list that "
        "BEST visually matches the item you described.\n\n"
        f"AVAILABLE IMAGE KEYS: ['{keys}']\n\n"
        f"REQUIREMENTS:\n{requirements}\n"
    )


def purchase_search_url(brand: str, name: str) -> str:
    """Return a web search URL for buying an item."""
    return f"https://www.google.com/search?q={quote_plus(f'{brand} {name} buy online')}"


def _gender_term(gender: GenderExpression) -> str:
    if gender is GenderExpression.MALE:
        return "Menswear"
    if gender is GenderExpression.FEMALE:
        return "Womenswear"
    return "Unisex fashion"


def _to_catalog_item(
    index: int, entry: WardrobeEntry, gender: GenderAffinity
) -> CatalogItem:
    return CatalogItem(
        id=f"dynamic-{index}",
        brand=entry.brand,
        name=entry.name,
        description=entry.description,
        price=entry.price,
        category=entry.category,
        gender=gender,
        image_url=WARDROBE_IMAGE_MAP.get(entry.image_key, DEFAULT_IMAGE_URL),
        purchase_url=purchase_search_url(entry.brand, entry.name),
    )
