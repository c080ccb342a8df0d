"""Domain models for calorie and protein goals."""

from dataclasses import dataclass
from datetime import date
from enum import Enum

from food_tracker.errors import ValidationError


class GoalStatus(str, Enum):
    """Presentation status for goal adherence."""

    ON_TRACK = "on_track"
    APPROACHING = "approaching"
    OFF_TRACK = "off_track"
    NO_DATA = "no_data"


class GoalDirection(str, Enum):
    """Whether the calorie target sits below, above or at maintenance."""

    DEFICIT = "deficit"
    SURPLUS = "surplus"
    MAINTENANCE = "maintenance"


@dataclass(frozen=True)
class GoalContext:
    """A user's calorie and protein targets."""

    target_calories: float
    target_protein: float
    maintenance_calories: float

    def __post_init__(self) -> None:
        for field_name in ("target_calories", "target_protein", "maintenance_calories"):
            if getattr(self, field_name) < 0:
                raise ValidationError(f"{field_name} must be >= 0")


@dataclass(frozen=True)
class DayProgress:
    """Goal statuses for a single day's totals."""

    day: date
    calories: float
    protein: float
    calories_status: GoalStatus
    protein_status: GoalStatus
    percent_of_calorie_target: float | None
    percent_of_protein_target: float | None
