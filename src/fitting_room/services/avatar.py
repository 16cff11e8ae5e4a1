"""Looping avatar video synthesis."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Protocol

from fitting_room.domain.errors import AvatarSynthesisError
from fitting_room.domain.media import MediaBlob

logger = logging.getLogger(__name__)

AVATAR_PROMPT = (
    "A cinematic wide shot. Full body visible from head to toe. "
    "The person in the uploaded image stands in a luxurious, private walk-in "
    "closet with dark wood cabinetry, warm ambient lighting, and shelves of "
    "clothes in the background. "
    "The person turns slowly 360 degrees to show their outfit. "
    "Maintain facial identity and features exactly. "
    "Camera Distance: Far enough to show feet and head clearly with space "
    "around them. "
    "Atmosphere: High-end, expensive, warm, sophisticated."
)

VIDEO_MIME_TYPE = "video/mp4"


@dataclass(frozen=True)
class VideoJob:
    """Snapshot of a remote video generation job."""

    id: str
    status: str
    error: str | None = None

    @property
    def done(self) -> bool:
        """Return True once the job has finished, successfully or not."""
        return self.status in {"completed", "failed"}


class VideoClient(Protocol):
    """Interface for long-running image-to-video generation."""

    async def start_video(  # noqa: PLR0913
        self,
        *,
        model: str,
        prompt: str,
        image: MediaBlob,
        seconds: str,
        size: str,
    ) -> VideoJob:
        """Start a video job and return its initial state."""

    async def get_video(self, job_id: str) -> VideoJob:
        """Return the current state of a video job."""

    async def download_video(self, job_id: str) -> bytes:
        """Download the rendered video bytes."""


@dataclass
class AvatarSynthesizer:
    """Produces a looping motion rendering of the user."""

    client: VideoClient
    model: str
    seconds: str
    size: str
    poll_interval_seconds: float
    max_wait_seconds: float
    sleep: Callable[[float], Awaitable[None]] = field(default=asyncio.sleep)

    async def synthesize(self, image: MediaBlob) -> MediaBlob:
        """Generate the avatar video and return its bytes."""
        job = await self.client.start_video(
            model=self.model,
            prompt=AVATAR_PROMPT,
            image=image,
            seconds=self.seconds,
            size=self.size,
        )
        waited = 0.0
        while not job.done:
            if waited >= self.max_wait_seconds:
                raise AvatarSynthesisError("Video generation timed out")
            await self.sleep(self.poll_interval_seconds)
            waited += self.poll_interval_seconds
            job = await self.client.get_video(job.id)
            logger.debug("Avatar job %s status %s", job.id, job.status)

        if job.status == "failed":
            raise AvatarSynthesisError(job.error or "Unknown generation error")
        data = await self.client.download_video(job.id)
        if not data:
            raise AvatarSynthesisError("Video generation failed: No video returned.")
        return MediaBlob(data=data, mime_type=VIDEO_MIME_TYPE)
