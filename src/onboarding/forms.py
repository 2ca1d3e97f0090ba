"""
Onboarding Forms - Day 5 Feedback.

Collects the new hire's end-of-week feedback before graduation:
- Two required ratings (overall satisfaction, confidence), 1-5
- Per-day ratings, defaulting to 5 for every journey day
- Free-text friction points, highlights and suggestions
"""

import logging

from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger(__name__)


# Satisfaction at or below this flags the hire for a manager follow-up
FOLLOW_UP_THRESHOLD = 2

JOURNEY_DAYS = (1, 2, 3, 4, 5)


def _default_day_ratings() -> dict[int, int]:
    return {day: 5 for day in JOURNEY_DAYS}


class FeedbackForm(BaseModel):
    """
    Onboarding feedback form data.

    overall_satisfaction and confidence_level are required; the form cannot
    be submitted without both.
    """

    overall_satisfaction: int = Field(
        ge=1,
        le=5,
        description="How was your first week overall?"
    )

    confidence_level: int = Field(
        ge=1,
        le=5,
        description="How ready do you feel for your role?"
    )

    day_ratings: dict[int, int] = Field(
        default_factory=_default_day_ratings,
        description="Rating per journey day"
    )

    friction_points: list[str] = Field(
        default_factory=list,
        description="Anything that slowed you down"
    )

    highlights: list[str] = Field(
        default_factory=list,
        description="What went well"
    )

    suggestions: str = ""

    @field_validator("day_ratings")
    @classmethod
    def validate_day_ratings(cls, v: dict[int, int]) -> dict[int, int]:
        """Fill missing days with 5 and reject ratings outside 1-5."""
        ratings = _default_day_ratings()
        for day, rating in v.items():
            if day not in JOURNEY_DAYS:
                logger.info(f"Rating for unknown day ignored: {day}")
                continue
            if not 1 <= rating <= 5:
                raise ValueError(f"Day {day} rating must be between 1 and 5")
            ratings[day] = rating
        return ratings

    @field_validator("friction_points", "highlights", mode="before")
    @classmethod
    def drop_blank_entries(cls, v: list[str]) -> list[str]:
        """Trim entries and drop empty ones."""
        if not v:
            return []
        return [entry.strip() for entry in v if entry and entry.strip()]

    @field_validator("suggestions", mode="before")
    @classmethod
    def strip_suggestions(cls, v: str | None) -> str:
        return (v or "").strip()

    @property
    def requires_follow_up(self) -> bool:
        return self.overall_satisfaction <= FOLLOW_UP_THRESHOLD
