"""Shopping cart models."""

from dataclasses import dataclass

from fitting_room.domain.catalog import CatalogItem


@dataclass(frozen=True)
class Cart:
    """A named, ordered collection of catalog items."""

    id: str
    name: str
    items: tuple[CatalogItem, ...] = ()

    @property
    def subtotal(self) -> float:
        """Return the sum of item prices rounded to cents."""
        return round(sum(item.price for item in self.items), 2)


DEFAULT_CARTS: tuple[Cart, ...] = (
    Cart(id="cart-1", name="Fall Refresh"),
    Cart(id="cart-2", name="Client Meetings"),
)


def format_subtotal(cart: Cart) -> str:
    """Format a cart subtotal with two decimals."""
    return f"{cart.subtotal:.2f}"
