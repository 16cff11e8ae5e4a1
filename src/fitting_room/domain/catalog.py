"""Catalog item models."""

from dataclasses import dataclass
from enum import Enum

from fitting_room.domain.media import MediaBlob


class StyleCategory(Enum):
    """Fixed set of wardrobe categories."""

    WORK = "Professional & Work"
    DATE = "Date Night & Going Out"
    CASUAL = "Casual & Everyday"

    @property
    def short_label(self) -> str:
        """Return the first word of the label, used for tabs."""
        return self.value.split(" ")[0]


class GenderAffinity(Enum):
    """Audience a catalog item is aimed at."""

    MALE = "male"
    FEMALE = "female"
    NEUTRAL = "neutral"
    UNISEX = "unisex"


@dataclass(frozen=True)
class CatalogItem:
    """A describable, potentially purchasable garment."""

    id: str
    brand: str
    name: str
    description: str
    price: float
    category: StyleCategory
    gender: GenderAffinity
    image_url: str
    purchase_url: str
    reference_image: MediaBlob | None = None

    def __post_init__(self) -> None:
        if self.price < 0:
            raise ValueError("price must be non-negative")

    @property
    def garment_description(self) -> str:
        """Return the text used by the description-only try-on strategy."""
        return f"{self.brand} {self.name}, {self.description}"


def filter_by_category(
    items: tuple[CatalogItem, ...], category: StyleCategory
) -> list[CatalogItem]:
    """Return the items that belong to a category, preserving order."""
    return [item for item in items if item.category is category]
