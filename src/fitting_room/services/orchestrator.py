"""Session state machine coordinating the fitting room collaborators."""

import asyncio
import logging
from dataclasses import dataclass, field

from fitting_room.domain.carts import Cart
from fitting_room.domain.catalog import CatalogItem
from fitting_room.domain.dialogue import ConsultantMode, DialogueMessage
from fitting_room.domain.errors import InvalidPhaseError
from fitting_room.domain.media import MediaBlob
from fitting_room.domain.profile import DEFAULT_PROFILE, Profile
from fitting_room.domain.session import Phase, Session
from fitting_room.services.avatar import AvatarSynthesizer
from fitting_room.services.carts import CartLedger
from fitting_room.services.credentials import CredentialProbe
from fitting_room.services.dialogue import DialogueEngine
from fitting_room.services.links import LinkResolver
from fitting_room.services.profile import ProfileAnalyzer
from fitting_room.services.try_on import TryOnRenderer
from fitting_room.services.wardrobe import WardrobeCurator

logger = logging.getLogger(__name__)

INITIALIZING_LABEL = "Analyzing your style & creating 360° avatar..."
LINK_LABEL = "Analyzing product link..."
CREDENTIAL_FAILURE_MESSAGE = "Failed to select API key. Please try again."
AVATAR_FAILURE_MESSAGE = (
    "Video generation unavailable ({reason}). Switching to static mode."
)
TRY_ON_FAILURE_MESSAGE = "Failed to try on item. Please try again."
LINK_FAILURE_MESSAGE = "Could not analyze this link. Try another."


@dataclass
class SessionOrchestrator:
    """Owns the session and sequences every remote call that mutates it.

    All mutations happen between suspension points on a single event loop,
    so readers only ever observe whole-field replacements. Work dispatched
    before a reset is tagged with the epoch it started in and its results
    are dropped once the epoch has moved on. Try-on requests and chat
    exchanges carry their own generation counters for the same purpose.
    The busy flag stays set while any claimed operation is outstanding.
    """

    credential_probe: CredentialProbe
    profile_analyzer: ProfileAnalyzer
    wardrobe_curator: WardrobeCurator
    avatar_synthesizer: AvatarSynthesizer
    try_on_renderer: TryOnRenderer
    link_resolver: LinkResolver
    dialogue_engine: DialogueEngine
    cart_ledger: CartLedger = field(default_factory=CartLedger)
    session: Session = field(default_factory=Session)
    _epoch: int = field(default=0, init=False)
    _try_on_generation: int = field(default=0, init=False)
    _dialogue_generation: int = field(default=0, init=False)
    _busy_token: int = field(default=0, init=False)
    _busy_owners: dict[int, str] = field(default_factory=dict, init=False)
    _init_token: int = field(default=0, init=False)

    def __post_init__(self) -> None:
        self._reseed_dialogue()

    # Credential gate

    async def check_credential(self) -> Phase:
        """Advance past the credential gate if a usable credential exists."""
        if self.session.phase is not Phase.CREDENTIAL_CHECK:
            return self.session.phase
        try:
            available = await self.credential_probe.has_credential()
        except Exception:
            logger.exception("Credential probe failed")
            available = False
        if available and self.session.phase is Phase.CREDENTIAL_CHECK:
            self.session.phase = Phase.AWAITING_UPLOAD
            self.session.last_error = None
        return self.session.phase

    async def select_credential(self, api_key: str) -> Phase:
        """Select a credential, then re-run the probe."""
        try:
            await self.credential_probe.select_credential(api_key)
        except Exception:
            logger.exception("Credential selection failed")
            self.session.last_error = CREDENTIAL_FAILURE_MESSAGE
            return self.session.phase
        phase = await self.check_credential()
        if phase is Phase.CREDENTIAL_CHECK:
            self.session.last_error = CREDENTIAL_FAILURE_MESSAGE
        return phase

    # Initialization pipeline

    def start_upload(self, image: MediaBlob) -> int:
        """Store the uploaded photo and enter Initializing; return the epoch."""
        if self.session.phase is not Phase.AWAITING_UPLOAD:
            raise InvalidPhaseError(
                f"Cannot accept an upload in phase {self.session.phase.value}"
            )
        self._epoch += 1
        self.session.source_image = image
        self.session.last_error = None
        self.session.phase = Phase.INITIALIZING
        self._init_token = self._claim_busy(INITIALIZING_LABEL)
        return self._epoch

    async def run_initialization(self, epoch: int) -> None:
        """Analyze, then synthesize the avatar and curate the wardrobe."""
        source = self.session.source_image
        if epoch != self._epoch or source is None:
            return

        try:
            profile = await self.profile_analyzer.analyze(source)
        except Exception:
            logger.warning("Profile analysis failed, using default", exc_info=True)
            profile = DEFAULT_PROFILE
        if epoch != self._epoch:
            logger.info("Discarding profile from a reset session")
            return
        self.session.profile = profile
        self.session.wardrobe_loading = True
        self._reseed_dialogue()
        logger.info("Profile detected: %s", profile.gender_expression.value)

        avatar_result, wardrobe_result = await asyncio.gather(
            self.avatar_synthesizer.synthesize(source),
            self.wardrobe_curator.curate(profile),
            return_exceptions=True,
        )
        if epoch != self._epoch:
            logger.info("Discarding initialization results from a reset session")
            return

        if isinstance(wardrobe_result, BaseException):
            logger.warning(
                "Wardrobe curation failed",
                exc_info=(
                    type(wardrobe_result),
                    wardrobe_result,
                    wardrobe_result.__traceback__,
                ),
            )
            wardrobe: tuple[CatalogItem, ...] = ()
        else:
            wardrobe = wardrobe_result
        if isinstance(avatar_result, BaseException):
            logger.warning(
                "Avatar synthesis failed",
                exc_info=(
                    type(avatar_result),
                    avatar_result,
                    avatar_result.__traceback__,
                ),
            )
            self.session.last_error = AVATAR_FAILURE_MESSAGE.format(
                reason=_describe_failure(avatar_result)
            )
        else:
            self.session.avatar_media = avatar_result

        self.session.wardrobe = wardrobe
        self.session.wardrobe_loading = False
        self._release_busy(self._init_token)
        self.session.phase = Phase.READY

    async def upload(self, image: MediaBlob) -> None:
        """Accept an upload and run the full initialization pipeline."""
        epoch = self.start_upload(image)
        await self.run_initialization(epoch)

    def reset(self) -> None:
        """Return to AwaitingUpload, keeping only the carts."""
        if self.session.phase is Phase.CREDENTIAL_CHECK:
            raise InvalidPhaseError("Cannot reset before a credential is selected")
        self._epoch += 1
        self._try_on_generation += 1
        self._busy_owners.clear()
        self.session = Session(
            phase=Phase.AWAITING_UPLOAD,
            carts=self.session.carts,
            consultant_mode=self.session.consultant_mode,
        )
        self._reseed_dialogue()

    def dismiss_error(self) -> None:
        """Clear the visible error banner."""
        self.session.last_error = None

    # Try-on and link resolution

    async def request_try_on(self, item: CatalogItem) -> bool:
        """Render the user wearing the item; return True if it was applied."""
        source = self.session.source_image
        if source is None:
            return False
        self._try_on_generation += 1
        generation = self._try_on_generation
        epoch = self._epoch
        token = self._claim_busy(f"Trying on {item.brand} {item.name}...")

        try:
            render = await self.try_on_renderer.render(source, item)
        except Exception:
            self._release_busy(token)
            if not self._is_current_try_on(generation, epoch):
                logger.info("Ignoring failure of a superseded try-on")
                return False
            logger.warning("Try-on failed for %s", item.id, exc_info=True)
            self.session.last_error = TRY_ON_FAILURE_MESSAGE
            return False

        if not self._is_current_try_on(generation, epoch):
            logger.info("Discarding render from a superseded try-on")
            self._release_busy(token)
            return False
        self.session.active_render = render
        self._release_busy(token)
        return True

    async def resolve_product_link(self, url: str) -> CatalogItem | None:
        """Resolve a product link into an item and try it on."""
        url = url.strip()
        if not url:
            return None
        epoch = self._epoch
        token = self._claim_busy(LINK_LABEL)
        try:
            item = await self.link_resolver.resolve(url, self.session.profile)
        except Exception:
            logger.warning("Link resolution failed", exc_info=True)
            self._release_busy(token)
            if epoch == self._epoch:
                self.session.last_error = LINK_FAILURE_MESSAGE
            return None
        self._release_busy(token)
        if epoch != self._epoch:
            return None
        await self.request_try_on(item)
        return item

    # Carts

    def create_cart(self, name: str) -> Cart | None:
        """Create a named cart; return it, or None for a blank name."""
        carts = self.cart_ledger.create_cart(self.session.carts, name)
        if len(carts) == len(self.session.carts):
            return None
        self.session.carts = carts
        return carts[-1]

    def add_to_cart(self, item: CatalogItem, cart_id: str) -> Cart | None:
        """Append an item to a cart and return the updated cart."""
        self.session.carts = self.cart_ledger.add_to_cart(
            self.session.carts, item, cart_id
        )
        return self.session.find_cart(cart_id)

    def remove_from_cart(self, item_id: str, cart_id: str) -> Cart | None:
        """Remove the first matching item from a cart."""
        self.session.carts = self.cart_ledger.remove_from_cart(
            self.session.carts, item_id, cart_id
        )
        return self.session.find_cart(cart_id)

    # Consultant dialogue

    def switch_consultant(self, mode: ConsultantMode) -> None:
        """Switch consultant mode, replacing the log with a greeting."""
        self.session.consultant_mode = mode
        self._reseed_dialogue()

    async def send_message(self, text: str) -> DialogueMessage | None:
        """Send user text to the consultant and append the reply."""
        if not text.strip():
            return None
        generation = self._dialogue_generation
        prior = self.session.dialogue
        mode = self.session.consultant_mode
        profile: Profile | None = self.session.profile
        self.session.dialogue = (*prior, self.dialogue_engine.user_message(text))

        reply = await self.dialogue_engine.respond(prior, text, mode, profile)
        if generation != self._dialogue_generation:
            logger.info("Dropping consultant reply for a replaced conversation")
            return None
        self.session.dialogue = (*self.session.dialogue, reply)
        return reply

    # Internals

    def _reseed_dialogue(self) -> None:
        self._dialogue_generation += 1
        self.session.dialogue = self.dialogue_engine.seed(
            self.session.consultant_mode, self.session.profile
        )

    def _is_current_try_on(self, generation: int, epoch: int) -> bool:
        return generation == self._try_on_generation and epoch == self._epoch

    def _claim_busy(self, label: str) -> int:
        self._busy_token += 1
        self._busy_owners[self._busy_token] = label
        self._publish_busy()
        return self._busy_token

    def _release_busy(self, token: int) -> None:
        self._busy_owners.pop(token, None)
        self._publish_busy()

    def _publish_busy(self) -> None:
        # The newest outstanding operation owns the label.
        if self._busy_owners:
            self.session.busy = True
            self.session.busy_label = self._busy_owners[max(self._busy_owners)]
        else:
            self.session.busy = False
            self.session.busy_label = ""


def _describe_failure(error: BaseException) -> str:
    return str(error) or type(error).__name__
