"""Session aggregate and phases."""

from dataclasses import dataclass, field
from enum import Enum

from fitting_room.domain.carts import DEFAULT_CARTS, Cart
from fitting_room.domain.catalog import CatalogItem
from fitting_room.domain.dialogue import ConsultantMode, DialogueMessage
from fitting_room.domain.media import MediaBlob
from fitting_room.domain.profile import Profile


class Phase(Enum):
    """Orchestrator state-machine states."""

    CREDENTIAL_CHECK = "credential_check"
    AWAITING_UPLOAD = "awaiting_upload"
    INITIALIZING = "initializing"
    READY = "ready"


@dataclass
class Session:
    """Process-wide mutable aggregate of user-visible state.

    Fields are only ever replaced wholesale; collections are tuples.
    """

    phase: Phase = Phase.CREDENTIAL_CHECK
    source_image: MediaBlob | None = None
    profile: Profile | None = None
    avatar_media: MediaBlob | None = None
    active_render: MediaBlob | None = None
    wardrobe: tuple[CatalogItem, ...] = ()
    wardrobe_loading: bool = False
    carts: tuple[Cart, ...] = field(default_factory=lambda: DEFAULT_CARTS)
    consultant_mode: ConsultantMode = ConsultantMode.STYLE
    dialogue: tuple[DialogueMessage, ...] = ()
    busy: bool = False
    busy_label: str = ""
    last_error: str | None = None

    @property
    def has_no_recommendations(self) -> bool:
        """Return True when curation finished without any items."""
        return (
            self.phase is Phase.READY
            and not self.wardrobe_loading
            and not self.wardrobe
        )

    def find_cart(self, cart_id: str) -> Cart | None:
        """Return the cart with the given id, if present."""
        for cart in self.carts:
            if cart.id == cart_id:
                return cart
        return None

    def find_wardrobe_item(self, item_id: str) -> CatalogItem | None:
        """Return the wardrobe item with the given id, if present."""
        for item in self.wardrobe:
            if item.id == item_id:
                return item
        return None
