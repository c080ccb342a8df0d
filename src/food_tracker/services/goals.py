"""Goal tracking: status classification and goal settings."""

import logging
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from food_tracker.domain.goals import (
    DayProgress,
    GoalContext,
    GoalDirection,
    GoalStatus,
)
from food_tracker.domain.stats import DailyTotals
from food_tracker.errors import ValidationError
from food_tracker.services.cache import Cache

# Percentage-point bands around the calorie target.
GOOD_DIRECTION_THRESHOLDS = (5.0, 7.5)
STRICT_THRESHOLDS = (2.5, 5.0)
PROTEIN_APPROACHING_THRESHOLD = 5.0

STATUS_COLORS: dict[GoalStatus, str] = {
    GoalStatus.ON_TRACK: "#4ADE80",
    GoalStatus.APPROACHING: "#FBBF24",
    GoalStatus.OFF_TRACK: "#F87171",
    GoalStatus.NO_DATA: "#E5E7EB",
}

DEFAULT_GOAL = GoalContext(
    target_calories=2000, target_protein=150, maintenance_calories=2000
)

_logger = logging.getLogger(__name__)


def goal_direction(goal: GoalContext) -> GoalDirection:
    """Return whether the goal is a deficit, surplus or maintenance goal."""
    if goal.target_calories < goal.maintenance_calories:
        return GoalDirection.DEFICIT
    if goal.target_calories > goal.maintenance_calories:
        return GoalDirection.SURPLUS
    return GoalDirection.MAINTENANCE


def classify_calories(
    actual: float, target: float, maintenance: float
) -> GoalStatus:
    """Classify calorie intake against target with asymmetric bands.

    Eating past the target in the direction of the goal (under it while cutting,
    over it while bulking) gets the wider 5.0/7.5 band; everything else,
    including a pure maintenance goal, gets the strict 2.5/5.0 band.
    """
    _require_non_negative(actual=actual, target=target, maintenance=maintenance)
    if actual == 0 or target == 0:
        return GoalStatus.NO_DATA

    diff = abs(actual / target * 100 - 100)
    is_deficit_goal = target < maintenance
    is_surplus_goal = target > maintenance
    good_direction = (is_deficit_goal and actual < target) or (
        is_surplus_goal and actual > target
    )
    green, yellow = GOOD_DIRECTION_THRESHOLDS if good_direction else STRICT_THRESHOLDS

    if diff <= green:
        return GoalStatus.ON_TRACK
    if diff <= yellow:
        return GoalStatus.APPROACHING
    return GoalStatus.OFF_TRACK


def classify_protein(actual: float, target: float) -> GoalStatus:
    """Classify protein intake; meeting or exceeding the target is on track."""
    _require_non_negative(actual=actual, target=target)
    if actual == 0 or target == 0:
        return GoalStatus.NO_DATA

    percent_below = (target - actual) / target * 100
    if percent_below <= 0:
        return GoalStatus.ON_TRACK
    if percent_below <= PROTEIN_APPROACHING_THRESHOLD:
        return GoalStatus.APPROACHING
    return GoalStatus.OFF_TRACK


def classify_day(totals: DailyTotals, goal: GoalContext) -> DayProgress:
    """Return calorie and protein statuses for one day's totals."""
    return DayProgress(
        day=totals.day,
        calories=totals.calories,
        protein=totals.protein,
        calories_status=classify_calories(
            totals.calories, goal.target_calories, goal.maintenance_calories
        ),
        protein_status=classify_protein(totals.protein, goal.target_protein),
        percent_of_calorie_target=_percent(totals.calories, goal.target_calories),
        percent_of_protein_target=_percent(totals.protein, goal.target_protein),
    )


def _percent(actual: float, target: float) -> float | None:
    if target == 0:
        return None
    return actual / target * 100


def _require_non_negative(**values: float) -> None:
    for name, value in values.items():
        if value < 0:
            raise ValidationError(f"{name} must be >= 0, got {value}")


class GoalSettingsRepository(Protocol):
    """Persistence interface for a user's goal settings."""

    def get_goal(self, user_id: UUID) -> GoalContext | None:
        """Return the user's goal settings if set."""

    def upsert_goal(self, user_id: UUID, goal: GoalContext) -> None:
        """Create or update the user's goal settings."""


@dataclass
class GoalSettingsService:
    """Service for reading and updating goal settings."""

    repository: GoalSettingsRepository
    cache: Cache
    ttl_seconds: int = 3600

    def get_goal(self, user_id: UUID) -> GoalContext:
        """Return the user's goal, or the default goal when unset."""
        cache_key = f"goal:{user_id}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, GoalContext):
            return cached
        goal = self.repository.get_goal(user_id)
        if goal is None:
            _logger.info("No goal settings for user %s, using defaults", user_id)
            return DEFAULT_GOAL
        self.cache.set(cache_key, goal, ttl_seconds=self.ttl_seconds)
        return goal

    def update_goal(self, user_id: UUID, goal: GoalContext) -> GoalContext:
        """Persist a user's goal."""
        self.repository.upsert_goal(user_id, goal)
        self.cache.set(f"goal:{user_id}", goal, ttl_seconds=self.ttl_seconds)
        return goal
