"""OpenAI image and video generation client."""

import base64
from dataclasses import dataclass
from typing import Any

from fitting_room.adapters.openai_provider import OpenAIClientProvider
from fitting_room.domain.media import MediaBlob
from fitting_room.services.avatar import VideoClient, VideoJob
from fitting_room.services.try_on import ImageEditClient

_EXTENSIONS = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
}


@dataclass
class OpenAIMediaClient(VideoClient, ImageEditClient):
    """Video jobs and image edits backed by the OpenAI API."""

    provider: OpenAIClientProvider

    async def start_video(  # noqa: PLR0913
        self,
        *,
        model: str,
        prompt: str,
        image: MediaBlob,
        seconds: str,
        size: str,
    ) -> VideoJob:
        """Create an image-to-video job."""
        video = await self.provider.get().videos.create(
            model=model,
            prompt=prompt,
            input_reference=_as_upload(image, "reference"),
            seconds=seconds,
            size=size,
        )
        return _to_job(video)

    async def get_video(self, job_id: str) -> VideoJob:
        """Fetch the current state of a video job."""
        video = await self.provider.get().videos.retrieve(job_id)
        return _to_job(video)

    async def download_video(self, job_id: str) -> bytes:
        """Download the finished video file."""
        content = await self.provider.get().videos.download_content(
            job_id, variant="video"
        )
        return content.content

    async def edit_image(
        self,
        *,
        model: str,
        prompt: str,
        images: list[MediaBlob],
        size: str,
    ) -> bytes | None:
        """Edit one or more input images into a single output image."""
        response = await self.provider.get().images.edit(
            model=model,
            prompt=prompt,
            image=[
                _as_upload(image, f"input-{index}")
                for index, image in enumerate(images)
            ],
            size=size,
        )
        for generated in response.data or []:
            if generated.b64_json:
                return base64.b64decode(generated.b64_json)
        return None


def _as_upload(image: MediaBlob, stem: str) -> tuple[str, bytes, str]:
    extension = _EXTENSIONS.get(image.mime_type, "jpg")
    return (f"{stem}.{extension}", image.data, image.mime_type)


def _to_job(video: Any) -> VideoJob:
    error = video.error
    return VideoJob(
        id=video.id,
        status=video.status,
        error=error.message if error else None,
    )
