"""Tests for consultant dialogue construction."""

import asyncio
from datetime import UTC, datetime

from fitting_room.domain.dialogue import ConsultantMode, MessageRole
from fitting_room.domain.profile import GenderExpression, Profile
from fitting_room.services.dialogue import (
    APOLOGY_REPLY,
    EMPTY_REPLY,
    DialogueEngine,
    build_greeting,
    build_system_instruction,
)
from tests.conftest import FakeChatClient

PROFILE = Profile(
    gender_expression=GenderExpression.FEMALE,
    style_descriptor="Quiet Luxury",
    fit_notes="Petite Frame",
)


def _engine(client: FakeChatClient) -> DialogueEngine:
    return DialogueEngine(
        client=client,
        model="test-model",
        clock=lambda: datetime(2024, 1, 1, tzinfo=UTC),
    )


def test_generic_greeting_names_mode() -> None:
    greeting = build_greeting(ConsultantMode.FIT, None)

    assert greeting.startswith("Hello. I am your personal Fit Specialist.")


def test_profile_greetings_use_lowercased_details() -> None:
    assert "quiet luxury vibe" in build_greeting(ConsultantMode.STYLE, PROFILE)
    assert "petite frame" in build_greeting(ConsultantMode.FIT, PROFILE)


def test_system_instruction_includes_profile_context() -> None:
    style = build_system_instruction(ConsultantMode.STYLE, PROFILE)
    fit = build_system_instruction(ConsultantMode.FIT, None)

    assert "Style Consultant" in style
    assert "Gender: female. Style Vibe: Quiet Luxury. Fit Notes: Petite Frame." in style
    assert "technical Fit Consultant" in fit
    assert "CLIENT CONTEXT: Gen X / Elder Millennial client." in fit


def test_seed_returns_single_assistant_message() -> None:
    (message,) = _engine(FakeChatClient()).seed(ConsultantMode.STYLE, PROFILE)

    assert message.role is MessageRole.ASSISTANT
    assert message.created_at == datetime(2024, 1, 1, tzinfo=UTC)


def test_respond_passes_history_and_instructions() -> None:
    client = FakeChatClient()
    engine = _engine(client)
    history = engine.seed(ConsultantMode.FIT, PROFILE)

    reply = asyncio.run(
        engine.respond(history, "Is this tight?", ConsultantMode.FIT, PROFILE)
    )

    assert reply.text == "Try a charcoal overcoat."
    request = client.requests[0]
    assert request["message"] == "Is this tight?"
    assert request["history"] == [("assistant", history[0].text)]
    assert "Fit Consultant" in request["instructions"]


def test_respond_absorbs_failures() -> None:
    engine = _engine(FakeChatClient(error=RuntimeError("offline")))

    reply = asyncio.run(engine.respond((), "Hi", ConsultantMode.STYLE, None))

    assert reply.role is MessageRole.ASSISTANT
    assert reply.text == APOLOGY_REPLY


def test_respond_replaces_empty_reply() -> None:
    engine = _engine(FakeChatClient(answer="  "))

    reply = asyncio.run(engine.respond((), "Hi", ConsultantMode.STYLE, None))

    assert reply.text == EMPTY_REPLY
