"""Domain models for logged food entries."""

from dataclasses import dataclass
from datetime import date, datetime
from uuid import UUID

from food_tracker.errors import ValidationError


@dataclass(frozen=True)
class NutritionRecord:
    """A single logged food item."""

    name: str
    calories: float
    protein: float
    occurred_on: date
    image_ref: str | None = None
    note: str | None = None
    id: UUID | None = None
    logged_at: datetime | None = None

    def __post_init__(self) -> None:
        if self.calories < 0:
            raise ValidationError(f"calories must be >= 0, got {self.calories}")
        if self.protein < 0:
            raise ValidationError(f"protein must be >= 0, got {self.protein}")


@dataclass(frozen=True)
class FrequentItemCluster:
    """A quick-add suggestion built from repeated similar entries."""

    representative_name: str
    average_calories: int
    average_protein: int
    occurrence_count: int
    image_ref: str | None = None
    note: str | None = None
