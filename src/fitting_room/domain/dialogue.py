"""Consultant dialogue models."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class ConsultantMode(Enum):
    """Available consultant personas."""

    STYLE = "Style Consultant"
    FIT = "Fit Specialist"


class MessageRole(Enum):
    """Author of a dialogue message."""

    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True)
class DialogueMessage:
    """Single message in the consultant log."""

    id: str
    role: MessageRole
    text: str
    created_at: datetime
