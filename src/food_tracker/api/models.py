"""Pydantic models for API request payloads."""

from datetime import date
from typing import Literal

from pydantic import BaseModel, Field


class FoodEntryCreate(BaseModel):
    """Payload for logging a food entry."""

    name: str = Field(min_length=1)
    calories: float = Field(ge=0.0)
    protein: float = Field(default=0.0, ge=0.0)
    entry_date: date
    image_data: str | None = None
    description: str | None = None


class GoalUpdate(BaseModel):
    """Payload for updating calorie and protein goals."""

    target_calories: float = Field(ge=0.0)
    target_protein: float = Field(ge=0.0)
    maintenance_calories: float = Field(ge=0.0)


class AnalyzeRequest(BaseModel):
    """Payload for analyzing a meal from text and/or a base64 image."""

    description: str | None = None
    image: str | None = None


class ChatTurn(BaseModel):
    """A prior message in a coach conversation."""

    role: Literal["user", "assistant"]
    content: str


class CoachRequest(BaseModel):
    """Payload for asking the coach a question."""

    message: str = Field(min_length=1)
    history: list[ChatTurn] = Field(default_factory=list)
    today: date | None = None


class FeedbackCreate(BaseModel):
    """Payload for submitting feedback."""

    rating: int
    feedback_type: str
    message: str


class TierUpdate(BaseModel):
    """Payload for changing a user's account tier."""

    tier: str


class CapacityUpdate(BaseModel):
    """Payload for changing the waitlist capacity."""

    max_allowed_users: int
