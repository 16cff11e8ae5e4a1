"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from fitting_room.adapters.image_fetcher import HttpxImageFetcher, ImageFetcher
from fitting_room.adapters.image_relay_client import HttpxImageRelayClient
from fitting_room.adapters.openai_media_client import OpenAIMediaClient
from fitting_room.adapters.openai_provider import (
    OpenAIClientProvider,
    OpenAICredentialProbe,
)
from fitting_room.adapters.openai_text_client import OpenAITextClient
from fitting_room.config import Settings
from fitting_room.services.avatar import AvatarSynthesizer
from fitting_room.services.dialogue import DialogueEngine
from fitting_room.services.links import LinkResolver
from fitting_room.services.orchestrator import SessionOrchestrator
from fitting_room.services.profile import ProfileAnalyzer
from fitting_room.services.try_on import TryOnRenderer
from fitting_room.services.wardrobe import WardrobeCurator


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    orchestrator: SessionOrchestrator
    image_fetcher: ImageFetcher
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    provider = OpenAIClientProvider(api_key=resolved_settings.openai_api_key)
    text_client = OpenAITextClient(provider)
    media_client = OpenAIMediaClient(provider)
    relay_client = HttpxImageRelayClient.create(
        resolved_settings.image_relay_url,
        timeout=resolved_settings.relay_timeout_seconds,
    )
    image_fetcher = HttpxImageFetcher.create(
        timeout=resolved_settings.relay_timeout_seconds
    )
    orchestrator = SessionOrchestrator(
        credential_probe=OpenAICredentialProbe(provider),
        profile_analyzer=ProfileAnalyzer(
            client=text_client, model=resolved_settings.analysis_model
        ),
        wardrobe_curator=WardrobeCurator(
            client=text_client, model=resolved_settings.analysis_model
        ),
        avatar_synthesizer=AvatarSynthesizer(
            client=media_client,
            model=resolved_settings.video_model,
            seconds=resolved_settings.video_seconds,
            size=resolved_settings.video_size,
            poll_interval_seconds=resolved_settings.video_poll_interval_seconds,
            max_wait_seconds=resolved_settings.video_max_wait_seconds,
        ),
        try_on_renderer=TryOnRenderer(
            client=media_client,
            model=resolved_settings.image_model,
            size=resolved_settings.image_size,
        ),
        link_resolver=LinkResolver(
            search_client=text_client,
            relay=relay_client,
            model=resolved_settings.link_model,
        ),
        dialogue_engine=DialogueEngine(
            client=text_client, model=resolved_settings.chat_model
        ),
    )

    async def close_resources() -> None:
        await relay_client.close()
        await image_fetcher.close()
        await provider.close()

    return AppContainer(
        settings=resolved_settings,
        orchestrator=orchestrator,
        image_fetcher=image_fetcher,
        close_resources=close_resources,
    )
