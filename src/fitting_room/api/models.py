"""Pydantic request and response models for the HTTP API."""

from datetime import datetime

from pydantic import BaseModel

from fitting_room.domain.carts import Cart, format_subtotal
from fitting_room.domain.catalog import CatalogItem
from fitting_room.domain.dialogue import ConsultantMode, DialogueMessage
from fitting_room.domain.profile import Profile
from fitting_room.domain.session import Session


class CredentialRequest(BaseModel):
    """Credential selection payload."""

    api_key: str


class TryOnRequest(BaseModel):
    """Try-on request for a wardrobe item."""

    item_id: str


class LinkRequest(BaseModel):
    """Product link to resolve and try on."""

    url: str


class CreateCartRequest(BaseModel):
    """New cart payload."""

    name: str


class AddToCartRequest(BaseModel):
    """Wardrobe item to add to a cart."""

    item_id: str


class ConsultantModeRequest(BaseModel):
    """Consultant mode switch payload."""

    mode: ConsultantMode


class MessageRequest(BaseModel):
    """User message for the consultant."""

    text: str


class ProfileView(BaseModel):
    gender_expression: str
    style_descriptor: str
    fit_notes: str

    @classmethod
    def from_profile(cls, profile: Profile) -> "ProfileView":
        return cls(
            gender_expression=profile.gender_expression.value,
            style_descriptor=profile.style_descriptor,
            fit_notes=profile.fit_notes,
        )


class CatalogItemView(BaseModel):
    id: str
    brand: str
    name: str
    description: str
    price: float
    category: str
    gender: str
    image_url: str
    purchase_url: str
    has_reference_image: bool

    @classmethod
    def from_item(cls, item: CatalogItem) -> "CatalogItemView":
        return cls(
            id=item.id,
            brand=item.brand,
            name=item.name,
            description=item.description,
            price=item.price,
            category=item.category.value,
            gender=item.gender.value,
            image_url=item.image_url,
            purchase_url=item.purchase_url,
            has_reference_image=item.reference_image is not None,
        )


class CartView(BaseModel):
    id: str
    name: str
    items: list[CatalogItemView]
    subtotal: str

    @classmethod
    def from_cart(cls, cart: Cart) -> "CartView":
        return cls(
            id=cart.id,
            name=cart.name,
            items=[CatalogItemView.from_item(item) for item in cart.items],
            subtotal=format_subtotal(cart),
        )


class MessageView(BaseModel):
    id: str
    role: str
    text: str
    created_at: datetime

    @classmethod
    def from_message(cls, message: DialogueMessage) -> "MessageView":
        return cls(
            id=message.id,
            role=message.role.value,
            text=message.text,
            created_at=message.created_at,
        )


class SessionView(BaseModel):
    """Snapshot of the session rendered by the UI."""

    phase: str
    profile: ProfileView | None
    has_source_image: bool
    has_avatar: bool
    has_render: bool
    wardrobe: list[CatalogItemView]
    wardrobe_loading: bool
    no_recommendations: bool
    carts: list[CartView]
    consultant_mode: str
    dialogue: list[MessageView]
    busy: bool
    busy_label: str
    last_error: str | None

    @classmethod
    def from_session(cls, session: Session) -> "SessionView":
        return cls(
            phase=session.phase.value,
            profile=ProfileView.from_profile(session.profile)
            if session.profile
            else None,
            has_source_image=session.source_image is not None,
            has_avatar=session.avatar_media is not None,
            has_render=session.active_render is not None,
            wardrobe=[CatalogItemView.from_item(item) for item in session.wardrobe],
            wardrobe_loading=session.wardrobe_loading,
            no_recommendations=session.has_no_recommendations,
            carts=[CartView.from_cart(cart) for cart in session.carts],
            consultant_mode=session.consultant_mode.value,
            dialogue=[MessageView.from_message(msg) for msg in session.dialogue],
            busy=session.busy,
            busy_label=session.busy_label,
            last_error=session.last_error,
        )
