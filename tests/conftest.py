"""Shared test fixtures."""

import asyncio
from dataclasses import dataclass, field

import pytest

from fitting_room.adapters.image_fetcher import ImageFetcher
from fitting_room.config import Settings
from fitting_room.containers import AppContainer
from fitting_room.domain.catalog import CatalogItem, GenderAffinity, StyleCategory
from fitting_room.domain.media import MediaBlob
from fitting_room.services.avatar import AvatarSynthesizer, VideoClient, VideoJob
from fitting_room.services.credentials import CredentialProbe
from fitting_room.services.dialogue import ChatClient, DialogueEngine
from fitting_room.services.links import ImageRelay, LinkResolver, LinkSearchClient
from fitting_room.services.orchestrator import SessionOrchestrator
from fitting_room.services.profile import ProfileAnalyzer, ProfileClient
from fitting_room.services.try_on import ImageEditClient, TryOnRenderer
from fitting_room.services.wardrobe import WardrobeClient, WardrobeCurator

PHOTO = MediaBlob(data=b"\xff\xd8\xffphoto", mime_type="image/jpeg")


def make_item(
    item_id: str = "dynamic-0",
    price: float = 100.0,
    category: StyleCategory = StyleCategory.WORK,
    reference_image: MediaBlob | None = None,
) -> CatalogItem:
    return CatalogItem(
        id=item_id,
        brand="Todd Snyder",
        name="Wool Blazer",
        description="Navy wool blazer with notch lapels",
        price=price,
        category=category,
        gender=GenderAffinity.MALE,
        image_url="https://images.test/blazer.jpg",
        purchase_url="https://shop.test/blazer",
        reference_image=reference_image,
    )


def wardrobe_payload() -> dict[str, object]:
    categories = [category.value for category in StyleCategory]
    return {
        "items": [
            {
                "brand": f"Brand {index}",
                "name": f"Item {index}",
                "description": "A considered piece",
                "price": 100 + index,
                "category": categories[index // 3],
                "imageKey": "mens_blazer_dark" if index == 0 else "unknown_key",
            }
            for index in range(9)
        ]
    }


@dataclass
class FakeCredentialProbe(CredentialProbe):
    """Credential probe with a scripted answer."""

    available: bool = True
    error: Exception | None = None
    select_error: Exception | None = None
    selected: list[str] = field(default_factory=list)

    async def has_credential(self) -> bool:
        if self.error:
            raise self.error
        return self.available

    async def select_credential(self, api_key: str) -> None:
        if self.select_error:
            raise self.select_error
        self.selected.append(api_key)
        self.available = True


@dataclass
class FakeProfileClient(ProfileClient):
    """Profile client returning a fixed payload."""

    payload: dict[str, object] = field(
        default_factory=lambda: {
            "gender": "male",
            "styleProfile": "Rugged Minimalist",
            "fitNotes": "Athletic Build",
        }
    )
    error: Exception | None = None

    async def extract(
        self,
        *,
        model: str,
        image: MediaBlob,
        schema: dict[str, object],
        prompt: str,
    ) -> dict[str, object]:
        if self.error:
            raise self.error
        return self.payload


@dataclass
class FakeWardrobeClient(WardrobeClient):
    """Wardrobe client returning nine items."""

    payload: dict[str, object] = field(default_factory=wardrobe_payload)
    error: Exception | None = None
    prompts: list[str] = field(default_factory=list)

    async def generate_json(
        self, *, model: str, schema: dict[str, object], prompt: str
    ) -> dict[str, object]:
        self.prompts.append(prompt)
        if self.error:
            raise self.error
        return self.payload


@dataclass
class FakeVideoClient(VideoClient):
    """Video client walking through scripted job statuses."""

    statuses: list[str] = field(default_factory=lambda: ["queued", "completed"])
    error_message: str | None = None
    content: bytes = b"mp4-bytes"
    start_error: Exception | None = None
    polls: int = 0

    async def start_video(  # noqa: PLR0913
        self,
        *,
        model: str,
        prompt: str,
        image: MediaBlob,
        seconds: str,
        size: str,
    ) -> VideoJob:
        if self.start_error:
            raise self.start_error
        return self._job(0)

    async def get_video(self, job_id: str) -> VideoJob:
        self.polls += 1
        return self._job(min(self.polls, len(self.statuses) - 1))

    async def download_video(self, job_id: str) -> bytes:
        return self.content

    def _job(self, index: int) -> VideoJob:
        status = self.statuses[index]
        error = self.error_message if status == "failed" else None
        return VideoJob(id="video-1", status=status, error=error)


@dataclass
class FakeImageEditClient(ImageEditClient):
    """Image client recording calls and returning fixed bytes."""

    result: bytes | None = b"png-bytes"
    error: Exception | None = None
    calls: list[dict[str, object]] = field(default_factory=list)

    async def edit_image(
        self,
        *,
        model: str,
        prompt: str,
        images: list[MediaBlob],
        size: str,
    ) -> bytes | None:
        self.calls.append({"prompt": prompt, "images": images, "size": size})
        if self.error:
            raise self.error
        return self.result


@dataclass
class GatedImageEditClient(ImageEditClient):
    """Image client whose calls complete only when released."""

    gates: list[asyncio.Event] = field(default_factory=list)
    results: list[bytes | None] = field(default_factory=list)
    errors: list[Exception | None] = field(default_factory=list)

    async def edit_image(
        self,
        *,
        model: str,
        prompt: str,
        images: list[MediaBlob],
        size: str,
    ) -> bytes | None:
        index = len(self.gates)
        gate = asyncio.Event()
        self.gates.append(gate)
        self.results.append(None)
        self.errors.append(None)
        await gate.wait()
        if self.errors[index]:
            raise self.errors[index]
        return self.results[index]

    def release(
        self, index: int, data: bytes | None = None, error: Exception | None = None
    ) -> None:
        self.results[index] = data
        self.errors[index] = error
        self.gates[index].set()


@dataclass
class FakeSearchClient(LinkSearchClient):
    """Search client returning a scripted answer."""

    answer: str = (
        "Brand: Khaite\n"
        "Name: Scarlet Cashmere Sweater\n"
        "Description: A relaxed crew neck in brushed cashmere.\n"
        "ImageURL: https://cdn.test/sweater.jpg"
    )
    error: Exception | None = None
    gate: asyncio.Event | None = None
    prompts: list[str] = field(default_factory=list)

    async def search_and_answer(self, *, model: str, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.gate:
            await self.gate.wait()
        if self.error:
            raise self.error
        return self.answer


@dataclass
class FakeImageRelay(ImageRelay):
    """Relay returning a fixed image."""

    image: MediaBlob = field(
        default_factory=lambda: MediaBlob(data=b"garment", mime_type="image/png")
    )
    error: Exception | None = None
    urls: list[str] = field(default_factory=list)

    async def fetch(self, url: str) -> MediaBlob:
        self.urls.append(url)
        if self.error:
            raise self.error
        return self.image


@dataclass
class FakeImageFetcher(ImageFetcher):
    """Upstream fetcher for the relay endpoint."""

    image: MediaBlob = field(
        default_factory=lambda: MediaBlob(data=b"garment", mime_type="image/png")
    )
    error: Exception | None = None

    async def fetch(self, url: str) -> MediaBlob:
        if self.error:
            raise self.error
        return self.image


@dataclass
class FakeChatClient(ChatClient):
    """Chat client recording requests."""

    answer: str = "Try a charcoal overcoat."
    error: Exception | None = None
    gate: asyncio.Event | None = None
    requests: list[dict[str, object]] = field(default_factory=list)

    async def reply(
        self,
        *,
        model: str,
        instructions: str,
        history: list[tuple[str, str]],
        message: str,
    ) -> str:
        self.requests.append(
            {"instructions": instructions, "history": history, "message": message}
        )
        if self.gate:
            await self.gate.wait()
        if self.error:
            raise self.error
        return self.answer


async def no_sleep(_: float) -> None:
    return None


@dataclass
class Collaborators:
    """Fakes behind an orchestrator under test."""

    probe: FakeCredentialProbe = field(default_factory=FakeCredentialProbe)
    profile: FakeProfileClient = field(default_factory=FakeProfileClient)
    wardrobe: FakeWardrobeClient = field(default_factory=FakeWardrobeClient)
    video: FakeVideoClient = field(default_factory=FakeVideoClient)
    image: ImageEditClient = field(default_factory=FakeImageEditClient)
    search: FakeSearchClient = field(default_factory=FakeSearchClient)
    relay: FakeImageRelay = field(default_factory=FakeImageRelay)
    chat: FakeChatClient = field(default_factory=FakeChatClient)

    def build(self) -> SessionOrchestrator:
        return SessionOrchestrator(
            credential_probe=self.probe,
            profile_analyzer=ProfileAnalyzer(client=self.profile, model="test-model"),
            wardrobe_curator=WardrobeCurator(client=self.wardrobe, model="test-model"),
            avatar_synthesizer=AvatarSynthesizer(
                client=self.video,
                model="test-video",
                seconds="8",
                size="720x1280",
                poll_interval_seconds=10,
                max_wait_seconds=60,
                sleep=no_sleep,
            ),
            try_on_renderer=TryOnRenderer(
                client=self.image, model="test-image", size="1024x1536"
            ),
            link_resolver=LinkResolver(
                search_client=self.search, relay=self.relay, model="test-model"
            ),
            dialogue_engine=DialogueEngine(client=self.chat, model="test-model"),
        )


async def ready(orchestrator: SessionOrchestrator) -> SessionOrchestrator:
    """Drive an orchestrator through the credential gate and upload."""
    await orchestrator.check_credential()
    await orchestrator.upload(PHOTO)
    return orchestrator


@pytest.fixture
def collaborators() -> Collaborators:
    return Collaborators()


@pytest.fixture
def orchestrator(collaborators: Collaborators) -> SessionOrchestrator:
    return collaborators.build()


@pytest.fixture
def settings() -> Settings:
    return Settings(openai_api_key="openai-key")


@pytest.fixture
def image_fetcher() -> FakeImageFetcher:
    return FakeImageFetcher()


@pytest.fixture
def container(
    settings: Settings,
    orchestrator: SessionOrchestrator,
    image_fetcher: FakeImageFetcher,
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        orchestrator=orchestrator,
        image_fetcher=image_fetcher,
        close_resources=close_resources,
    )
