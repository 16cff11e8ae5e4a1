"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    openai_api_key: str | None = None
    analysis_model: str = "gpt-5.2"
    chat_model: str = "gpt-5.2"
    link_model: str = "gpt-5.2"
    image_model: str = "gpt-image-1"
    image_size: str = "1024x1536"
    video_model: str = "sora-2"
    video_seconds: str = "8"
    video_size: str = "720x1280"
    video_poll_interval_seconds: float = 10.0
    video_max_wait_seconds: float = 900.0
    image_relay_url: str = "http://localhost:8000/api/proxy-image"
    relay_timeout_seconds: float = 15.0
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )
