"""Models for coach conversations and weekly meal coaching."""

from dataclasses import dataclass
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


@dataclass(frozen=True)
class ChatMessage:
    """A prior turn in a coach conversation."""

    role: Literal["user", "assistant"]
    content: str


@dataclass(frozen=True)
class WeekSummary:
    """Averages and gaps computed from a week of entries before coaching."""

    days_logged: int
    average_calories: int
    average_protein: int
    calorie_gap: float
    protein_gap: float
    goal_label: str


class MealPattern(BaseModel):
    """One recurring meal slot identified in a week of entries."""

    model_config = ConfigDict(populate_by_name=True)

    meal: str = Field(min_length=1)
    timing: str
    examples: list[str] = Field(min_length=2)
    avg_calories: float = Field(alias="avgCal", ge=0.0)
    avg_protein: float = Field(alias="avgPro", ge=0.0)
    frequency: str = ""
    change: str | None = None

    @field_validator("timing")
    @classmethod
    def _timing_present(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("timing must not be blank")
        return value


class MealTable(BaseModel):
    """Meal pattern table returned by the pattern model."""

    model_config = ConfigDict(populate_by_name=True)

    meals: list[MealPattern] = Field(alias="mealTable")


class Recommendation(BaseModel):
    """A single change targeted at one meal slot."""

    model_config = ConfigDict(populate_by_name=True)

    target_meal: str = Field(alias="targetMeal")
    recommendation: str


class RecommendationSet(BaseModel):
    """Recommendations returned by the coaching model."""

    recommendations: list[Recommendation]


@dataclass(frozen=True)
class MealCoachingReport:
    """Meal table with per-meal changes and current versus target intake."""

    meals: list[MealPattern]
    summary: WeekSummary
    target_calories: float
    target_protein: float
