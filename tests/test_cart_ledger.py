"""Tests for cart bookkeeping."""

from fitting_room.domain.carts import DEFAULT_CARTS, Cart, format_subtotal
from fitting_room.services.carts import CartLedger
from tests.conftest import make_item


def test_default_carts_exist() -> None:
    assert [cart.name for cart in DEFAULT_CARTS] == ["Fall Refresh", "Client Meetings"]
    assert all(cart.items == () for cart in DEFAULT_CARTS)


def test_create_cart_rejects_blank_names() -> None:
    ledger = CartLedger()

    assert ledger.create_cart(DEFAULT_CARTS, "") == DEFAULT_CARTS
    assert ledger.create_cart(DEFAULT_CARTS, "   ") == DEFAULT_CARTS


def test_create_cart_appends_empty_cart_with_unique_id() -> None:
    ledger = CartLedger()

    carts = ledger.create_cart(DEFAULT_CARTS, "Vacation")
    carts = ledger.create_cart(carts, "Vacation")

    assert len(carts) == len(DEFAULT_CARTS) + 2
    assert carts[-1].name == "Vacation"
    assert carts[-1].items == ()
    assert len({cart.id for cart in carts}) == len(carts)


def test_add_to_cart_allows_duplicates() -> None:
    ledger = CartLedger()
    item = make_item()

    carts = ledger.add_to_cart(DEFAULT_CARTS, item, "cart-1")
    carts = ledger.add_to_cart(carts, item, "cart-1")

    assert carts[0].items == (item, item)
    assert carts[1].items == ()


def test_add_to_unknown_cart_is_noop() -> None:
    ledger = CartLedger()

    assert ledger.add_to_cart(DEFAULT_CARTS, make_item(), "missing") == DEFAULT_CARTS


def test_remove_only_first_match() -> None:
    ledger = CartLedger()
    first = make_item("a", price=10)
    other = make_item("b", price=20)
    cart = Cart(id="c", name="Mixed", items=(first, other, first))

    (updated,) = ledger.remove_from_cart((cart,), "a", "c")

    assert updated.items == (other, first)


def test_remove_missing_item_is_noop() -> None:
    ledger = CartLedger()
    cart = Cart(id="c", name="Mixed", items=(make_item("a"),))

    assert ledger.remove_from_cart((cart,), "zzz", "c") == (cart,)


def test_add_then_remove_restores_cart() -> None:
    ledger = CartLedger()
    existing = make_item("existing")
    item = make_item("new")
    carts = ledger.add_to_cart(DEFAULT_CARTS, existing, "cart-2")

    round_trip = ledger.remove_from_cart(
        ledger.add_to_cart(carts, item, "cart-2"), item.id, "cart-2"
    )

    assert round_trip == carts


def test_subtotal_rounds_to_cents() -> None:
    cart = Cart(
        id="c",
        name="Totals",
        items=(
            make_item("a", price=25),
            make_item("b", price=40.5),
            make_item("c", price=10),
        ),
    )

    assert cart.subtotal == 75.5
    assert format_subtotal(cart) == "75.50"


def test_empty_cart_subtotal() -> None:
    assert format_subtotal(Cart(id="c", name="Empty")) == "0.00"
