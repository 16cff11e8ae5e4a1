"""Styling profile derived from the uploaded photo."""

from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, Field


class GenderExpression(Enum):
    """Gender expression used to filter clothing options."""

    MALE = "male"
    FEMALE = "female"
    NEUTRAL = "neutral"


@dataclass(frozen=True)
class Profile:
    """Immutable styling profile for the session."""

    gender_expression: GenderExpression
    style_descriptor: str
    fit_notes: str


DEFAULT_PROFILE = Profile(
    gender_expression=GenderExpression.NEUTRAL,
    style_descriptor="Contemporary",
    fit_notes="Standard",
)


class ProfilePayload(BaseModel):
    """Structured profile analysis output."""

    gender: GenderExpression
    style_profile: str = Field(alias="styleProfile")
    fit_notes: str = Field(alias="fitNotes")

    def to_profile(self) -> Profile:
        """Convert the payload into a domain profile."""
        return Profile(
            gender_expression=self.gender,
            style_descriptor=self.style_profile,
            fit_notes=self.fit_notes,
        )
