"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import (
    BackgroundTasks,
    FastAPI,
    File,
    HTTPException,
    Request,
    Response,
    UploadFile,
    status,
)

from fitting_room.api.models import (
    AddToCartRequest,
    CartView,
    CatalogItemView,
    ConsultantModeRequest,
    CreateCartRequest,
    CredentialRequest,
    LinkRequest,
    MessageRequest,
    MessageView,
    SessionView,
    TryOnRequest,
)
from fitting_room.api.relay import router as relay_router
from fitting_room.app_logging import configure_logging
from fitting_room.containers import AppContainer
from fitting_room.domain.carts import format_subtotal
from fitting_room.domain.catalog import StyleCategory, filter_by_category
from fitting_room.domain.errors import InvalidPhaseError
from fitting_room.domain.media import MediaBlob, detect_image_mime_type
from fitting_room.services.orchestrator import SessionOrchestrator


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        try:
            await app.state.container.orchestrator.check_credential()
        except Exception:
            logger.exception("Initial credential check failed")
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(relay_router)

    def _orchestrator(request: Request) -> SessionOrchestrator:
        state_container: AppContainer = request.app.state.container
        return state_container.orchestrator

    def _view(orchestrator: SessionOrchestrator) -> SessionView:
        return SessionView.from_session(orchestrator.session)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/session")
    async def get_session(request: Request) -> SessionView:
        """Return the current session snapshot."""
        return _view(_orchestrator(request))

    @app.post("/session/credential/check")
    async def check_credential(request: Request) -> SessionView:
        """Re-run the credential probe."""
        orchestrator = _orchestrator(request)
        await orchestrator.check_credential()
        return _view(orchestrator)

    @app.post("/session/credential")
    async def select_credential(
        payload: CredentialRequest, request: Request
    ) -> SessionView:
        """Select a credential and re-run the probe."""
        orchestrator = _orchestrator(request)
        await orchestrator.select_credential(payload.api_key)
        return _view(orchestrator)

    @app.post("/session/upload", status_code=status.HTTP_202_ACCEPTED)
    async def upload(
        request: Request,
        background_tasks: BackgroundTasks,
        file: UploadFile = File(...),
    ) -> SessionView:
        """Accept a photo and start the initialization pipeline."""
        orchestrator = _orchestrator(request)
        data = await file.read()
        if not data:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail="Empty upload"
            )
        mime_type = file.content_type or ""
        if not mime_type.startswith("image/"):
            mime_type = detect_image_mime_type(data) or ""
        if not mime_type:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Upload must be an image",
            )
        try:
            epoch = orchestrator.start_upload(MediaBlob(data=data, mime_type=mime_type))
        except InvalidPhaseError as exc:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT, detail=str(exc)
            ) from exc
        background_tasks.add_task(orchestrator.run_initialization, epoch)
        return _view(orchestrator)

    @app.post("/session/reset")
    async def reset(request: Request) -> SessionView:
        """Discard everything except carts and await a new upload."""
        orchestrator = _orchestrator(request)
        try:
            orchestrator.reset()
        except InvalidPhaseError as exc:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT, detail=str(exc)
            ) from exc
        return _view(orchestrator)

    @app.delete("/session/error")
    async def dismiss_error(request: Request) -> SessionView:
        """Dismiss the error banner."""
        orchestrator = _orchestrator(request)
        orchestrator.dismiss_error()
        return _view(orchestrator)

    @app.get("/session/media/{kind}")
    async def session_media(kind: str, request: Request) -> Response:
        """Return the avatar video or the active try-on render."""
        session = _orchestrator(request).session
        media = {"avatar": session.avatar_media, "render": session.active_render}
        blob = media.get(kind)
        if blob is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return Response(content=blob.data, media_type=blob.mime_type)

    @app.get("/wardrobe")
    async def wardrobe(
        request: Request, category: str | None = None
    ) -> list[CatalogItemView]:
        """List curated items, optionally for one category."""
        items = _orchestrator(request).session.wardrobe
        if category is not None:
            try:
                selected = StyleCategory[category.upper()]
            except KeyError as exc:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail=f"Unknown category {category}",
                ) from exc
            items = tuple(filter_by_category(items, selected))
        return [CatalogItemView.from_item(item) for item in items]

    @app.post("/try-on", status_code=status.HTTP_202_ACCEPTED)
    async def try_on(
        payload: TryOnRequest, request: Request, background_tasks: BackgroundTasks
    ) -> dict[str, str]:
        """Queue a try-on render for a wardrobe item."""
        orchestrator = _orchestrator(request)
        item = orchestrator.session.find_wardrobe_item(payload.item_id)
        if item is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        if orchestrator.session.source_image is None:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT, detail="No photo uploaded"
            )
        background_tasks.add_task(orchestrator.request_try_on, item)
        return {"status": "accepted"}

    @app.post("/links", status_code=status.HTTP_202_ACCEPTED)
    async def resolve_link(
        payload: LinkRequest, request: Request, background_tasks: BackgroundTasks
    ) -> dict[str, str]:
        """Queue resolution of a product link followed by a try-on."""
        if not payload.url.strip():
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail="Missing URL"
            )
        orchestrator = _orchestrator(request)
        background_tasks.add_task(orchestrator.resolve_product_link, payload.url)
        return {"status": "accepted"}

    @app.post("/carts", status_code=status.HTTP_201_CREATED)
    async def create_cart(payload: CreateCartRequest, request: Request) -> CartView:
        """Create a named cart."""
        cart = _orchestrator(request).create_cart(payload.name)
        if cart is None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Cart name must not be blank",
            )
        return CartView.from_cart(cart)

    @app.get("/carts/{cart_id}")
    async def get_cart(cart_id: str, request: Request) -> CartView:
        """Return a cart with its subtotal."""
        cart = _orchestrator(request).session.find_cart(cart_id)
        if cart is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return CartView.from_cart(cart)

    @app.get("/carts/{cart_id}/subtotal")
    async def cart_subtotal(cart_id: str, request: Request) -> dict[str, str]:
        """Return the two-decimal subtotal of a cart."""
        cart = _orchestrator(request).session.find_cart(cart_id)
        if cart is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return {"subtotal": format_subtotal(cart)}

    @app.post("/carts/{cart_id}/items")
    async def add_to_cart(
        cart_id: str, payload: AddToCartRequest, request: Request
    ) -> CartView:
        """Add a wardrobe item to a cart."""
        orchestrator = _orchestrator(request)
        item = orchestrator.session.find_wardrobe_item(payload.item_id)
        if item is None or orchestrator.session.find_cart(cart_id) is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        cart = orchestrator.add_to_cart(item, cart_id)
        return CartView.from_cart(cart)

    @app.delete("/carts/{cart_id}/items/{item_id}")
    async def remove_from_cart(
        cart_id: str, item_id: str, request: Request
    ) -> CartView:
        """Remove the first matching item from a cart."""
        cart = _orchestrator(request).remove_from_cart(item_id, cart_id)
        if cart is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return CartView.from_cart(cart)

    @app.put("/consultant/mode")
    async def switch_consultant(
        payload: ConsultantModeRequest, request: Request
    ) -> list[MessageView]:
        """Switch consultant mode and return the fresh log."""
        orchestrator = _orchestrator(request)
        orchestrator.switch_consultant(payload.mode)
        return [MessageView.from_message(m) for m in orchestrator.session.dialogue]

    @app.post("/consultant/messages")
    async def send_message(
        payload: MessageRequest, request: Request
    ) -> list[MessageView]:
        """Send a message to the consultant and return the log."""
        if not payload.text.strip():
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail="Empty message"
            )
        orchestrator = _orchestrator(request)
        await orchestrator.send_message(payload.text)
        return [MessageView.from_message(m) for m in orchestrator.session.dialogue]

    return app
