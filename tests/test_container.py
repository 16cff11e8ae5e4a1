"""Tests for container wiring."""

import asyncio

from fitting_room.containers import build_container
from fitting_room.domain.session import Phase


def test_build_container_creates_orchestrator(settings) -> None:
    container = build_container(settings)

    assert container.orchestrator.session.phase is Phase.CREDENTIAL_CHECK
    assert container.orchestrator.avatar_synthesizer.model == settings.video_model
    asyncio.run(container.close_resources())
