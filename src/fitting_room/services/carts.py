"""In-memory bookkeeping of named carts."""

from collections.abc import Callable
from dataclasses import dataclass, field, replace
from uuid import uuid4

from fitting_room.domain.carts import Cart
from fitting_room.domain.catalog import CatalogItem


def _new_cart_id() -> str:
    return f"cart-{uuid4()}"


@dataclass
class CartLedger:
    """Pure operations over an immutable sequence of carts."""

    id_factory: Callable[[], str] = field(default=_new_cart_id)

    def create_cart(self, carts: tuple[Cart, ...], name: str) -> tuple[Cart, ...]:
        """Append an empty cart; blank names leave the carts unchanged."""
        if not name.strip():
            return carts
        return (*carts, Cart(id=self.id_factory(), name=name))

    def add_to_cart(
        self, carts: tuple[Cart, ...], item: CatalogItem, cart_id: str
    ) -> tuple[Cart, ...]:
        """Append an item to a cart, duplicates included."""
        return tuple(
            replace(cart, items=(*cart.items, item)) if cart.id == cart_id else cart
            for cart in carts
        )

    def remove_from_cart(
        self, carts: tuple[Cart, ...], item_id: str, cart_id: str
    ) -> tuple[Cart, ...]:
        """Remove the first matching item from a cart."""
        return tuple(
            _without_first(cart, item_id) if cart.id == cart_id else cart
            for cart in carts
        )


def _without_first(cart: Cart, item_id: str) -> Cart:
    for index, item in enumerate(cart.items):
        if item.id == item_id:
            return replace(cart, items=cart.items[:index] + cart.items[index + 1 :])
    return cart
