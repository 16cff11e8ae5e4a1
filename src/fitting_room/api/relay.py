"""Same-origin image relay endpoint."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

if TYPE_CHECKING:
    from fitting_room.containers import AppContainer

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["relay"])


@router.get("/proxy-image")
async def proxy_image(request: Request, url: str | None = None) -> JSONResponse:
    """Fetch a remote image and return it as base64."""
    if not url or not url.strip():
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Missing or invalid URL provided."},
        )
    container: AppContainer = request.app.state.container
    try:
        image = await container.image_fetcher.fetch(url)
    except Exception as exc:
        logger.exception("Proxy image fetch failed")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": str(exc) or "Failed to fetch image"},
        )
    return JSONResponse(
        content={"base64": image.to_base64(), "mimeType": image.mime_type}
    )
