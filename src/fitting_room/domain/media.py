"""Binary media value objects."""

import base64
from dataclasses import dataclass


@dataclass(frozen=True)
class MediaBlob:
    """Raw media bytes with their declared MIME type."""

    data: bytes
    mime_type: str

    def to_base64(self) -> str:
        """Return the bytes encoded as base64 text."""
        return base64.b64encode(self.data).decode("utf-8")

    def to_data_url(self) -> str:
        """Return the media as a data URL."""
        return f"data:{self.mime_type};base64,{self.to_base64()}"

    @classmethod
    def from_base64(cls, encoded: str, mime_type: str) -> "MediaBlob":
        """Decode base64 text into a media blob."""
        return cls(data=base64.b64decode(encoded), mime_type=mime_type)


def detect_image_mime_type(data: bytes) -> str | None:
    """Infer a basic image MIME type from file signatures."""
    if data.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if data.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return "image/webp"
    return None
