"""Consultant dialogue with profile-grounded context."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Protocol
from uuid import uuid4

from fitting_room.domain.dialogue import ConsultantMode, DialogueMessage, MessageRole
from fitting_room.domain.profile import Profile

logger = logging.getLogger(__name__)

CLIENT_CONTEXT = "Gen X / Elder Millennial client."
APOLOGY_REPLY = (
    "I apologize, I'm having trouble connecting to my style database momentarily."
)
EMPTY_REPLY = "I'm contemplating the look. One moment."


class ChatClient(Protocol):
    """Interface for multi-turn chat completion."""

    async def reply(
        self,
        *,
        model: str,
        instructions: str,
        history: list[tuple[str, str]],
        message: str,
    ) -> str:
        """Return the assistant reply to a message given prior turns."""


def build_client_context(profile: Profile | None) -> str:
    """Describe the client for the system framing."""
    if profile is None:
        return CLIENT_CONTEXT
    return (
        f"{CLIENT_CONTEXT} Gender: {profile.gender_expression.value}. "
        f"Style Vibe: {profile.style_descriptor}. Fit Notes: {profile.fit_notes}."
    )


def build_system_instruction(mode: ConsultantMode, profile: Profile | None) -> str:
    """Build the persona framing for a consultant mode."""
    context = build_client_context(profile)
    if mode is ConsultantMode.STYLE:
        return (
            "You are a high-end Style Consultant for a Gen X / Elder Millennial "
            "client.\n"
            "Your tone is sophisticated, honest, and encouraging. "
            "You avoid Gen Z slang.\n"
            'Focus on "Timeless", "Chic", "Elevated", "Polished", "Rugged", '
            '"Refined".\n\n'
            f"CLIENT CONTEXT: {context}\n\n"
            "If the client is male, focus on fit, quality of materials (leather, "
            "denim, wool), and classic silhouettes."
        )
    return (
        "You are a technical Fit Consultant. Focus on tailoring, fabric drape, "
        "silhouettes, and sizing.\n"
        "Explain *why* something fits well or poorly based on the visual "
        "description.\n\n"
        f"CLIENT CONTEXT: {context}"
    )


def build_greeting(mode: ConsultantMode, profile: Profile | None) -> str:
    """Build the opening message for a consultant mode."""
    if profile is None:
        return (
            f"Hello. I am your personal {mode.value}. "
            "How can I assist with your wardrobe today?"
        )
    if mode is ConsultantMode.STYLE:
        return (
            f"Hello. I see you have a {profile.style_descriptor.lower()} vibe. "
            "I've curated some pieces that fit your style. "
            "How can I help you refine your look?"
        )
    return (
        "Hello. Based on your profile, I can help ensure the perfect fit for "
        f"your {profile.fit_notes.lower()}. What items are you interested in?"
    )


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class DialogueEngine:
    """Builds dialogue messages and absorbs chat failures."""

    client: ChatClient
    model: str
    clock: Callable[[], datetime] = field(default=_utc_now)

    def seed(
        self, mode: ConsultantMode, profile: Profile | None
    ) -> tuple[DialogueMessage, ...]:
        """Return a fresh log holding only the greeting."""
        return (self._message(MessageRole.ASSISTANT, build_greeting(mode, profile)),)

    def user_message(self, text: str) -> DialogueMessage:
        """Wrap user text as a dialogue message."""
        return self._message(MessageRole.USER, text)

    async def respond(
        self,
        history: tuple[DialogueMessage, ...],
        text: str,
        mode: ConsultantMode,
        profile: Profile | None,
    ) -> DialogueMessage:
        """Return the assistant message answering the text."""
        try:
            reply = await self.client.reply(
                model=self.model,
                instructions=build_system_instruction(mode, profile),
                history=[(message.role.value, message.text) for message in history],
                message=text,
            )
        except Exception:
            logger.warning("Consultant reply failed", exc_info=True)
            return self._message(MessageRole.ASSISTANT, APOLOGY_REPLY)
        return self._message(MessageRole.ASSISTANT, reply.strip() or EMPTY_REPLY)

    def _message(self, role: MessageRole, text: str) -> DialogueMessage:
        return DialogueMessage(
            id=str(uuid4()), role=role, text=text, created_at=self.clock()
        )
