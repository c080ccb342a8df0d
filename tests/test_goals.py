"""Tests for goal classification and goal settings."""

from datetime import date
from uuid import uuid4

import pytest

from food_tracker.domain.goals import GoalContext, GoalDirection, GoalStatus
from food_tracker.domain.stats import DailyTotals
from food_tracker.errors import ValidationError
from food_tracker.services.cache import InMemoryCache
from food_tracker.services.goals import (
    DEFAULT_GOAL,
    GoalSettingsService,
    classify_calories,
    classify_day,
    classify_protein,
    goal_direction,
)
from tests.conftest import InMemoryGoalSettingsRepository


def test_deficit_goal_below_target_uses_relaxed_band() -> None:
    assert classify_calories(1750, 1800, 2200) is GoalStatus.ON_TRACK


def test_deficit_goal_above_target_uses_strict_band() -> None:
    assert classify_calories(1950, 1800, 2200) is GoalStatus.OFF_TRACK


@pytest.mark.parametrize(
    ("actual", "expected"),
    [
        (1910, GoalStatus.ON_TRACK),  # 4.5% under
        (1860, GoalStatus.APPROACHING),  # 7.0% under
        (1840, GoalStatus.OFF_TRACK),  # 8.0% under
        (2040, GoalStatus.ON_TRACK),  # 2.0% over
        (2080, GoalStatus.APPROACHING),  # 4.0% over
        (2120, GoalStatus.OFF_TRACK),  # 6.0% over
    ],
)
def test_deficit_goal_bands(actual: float, expected: GoalStatus) -> None:
    assert classify_calories(actual, 2000, 2500) is expected


@pytest.mark.parametrize(
    ("actual", "expected"),
    [
        (3100, GoalStatus.ON_TRACK),  # 3.3% over
        (3200, GoalStatus.APPROACHING),  # 6.7% over
        (2900, GoalStatus.APPROACHING),  # 3.3% under
        (2800, GoalStatus.OFF_TRACK),  # 6.7% under
    ],
)
def test_surplus_goal_bands(actual: float, expected: GoalStatus) -> None:
    assert classify_calories(actual, 3000, 2500) is expected


def test_maintenance_goal_uses_strict_band_both_ways() -> None:
    assert classify_calories(2060, 2000, 2000) is GoalStatus.APPROACHING
    assert classify_calories(1940, 2000, 2000) is GoalStatus.APPROACHING
    assert classify_calories(2040, 2000, 2000) is GoalStatus.ON_TRACK
    assert classify_calories(1880, 2000, 2000) is GoalStatus.OFF_TRACK


def test_calories_exactly_on_target_is_on_track() -> None:
    assert classify_calories(1800, 1800, 2200) is GoalStatus.ON_TRACK


def test_zero_calories_is_no_data() -> None:
    assert classify_calories(0, 1800, 2200) is GoalStatus.NO_DATA
    assert classify_calories(1800, 0, 2200) is GoalStatus.NO_DATA


@pytest.mark.parametrize(
    ("actual", "expected"),
    [
        (150, GoalStatus.ON_TRACK),
        (180, GoalStatus.ON_TRACK),
        (145, GoalStatus.APPROACHING),
        (130, GoalStatus.OFF_TRACK),
    ],
)
def test_protein_bands(actual: float, expected: GoalStatus) -> None:
    assert classify_protein(actual, 150) is expected


def test_zero_protein_is_no_data() -> None:
    assert classify_protein(0, 150) is GoalStatus.NO_DATA
    assert classify_protein(120, 0) is GoalStatus.NO_DATA


def test_negative_inputs_are_rejected() -> None:
    with pytest.raises(ValidationError):
        classify_calories(-1, 1800, 2200)
    with pytest.raises(ValidationError):
        classify_protein(100, -5)
    with pytest.raises(ValidationError):
        GoalContext(target_calories=-1, target_protein=100, maintenance_calories=2000)


def test_goal_direction() -> None:
    assert goal_direction(GoalContext(1800, 150, 2200)) is GoalDirection.DEFICIT
    assert goal_direction(GoalContext(2800, 150, 2200)) is GoalDirection.SURPLUS
    assert goal_direction(GoalContext(2200, 150, 2200)) is GoalDirection.MAINTENANCE


def test_classify_day_reports_statuses_and_percentages() -> None:
    totals = DailyTotals(day=date(2025, 10, 13), calories=1750, protein=145)
    goal = GoalContext(
        target_calories=1800, target_protein=150, maintenance_calories=2200
    )

    progress = classify_day(totals, goal)

    assert progress.calories_status is GoalStatus.ON_TRACK
    assert progress.protein_status is GoalStatus.APPROACHING
    assert progress.percent_of_calorie_target == pytest.approx(97.22, abs=0.01)
    assert progress.percent_of_protein_target == pytest.approx(96.67, abs=0.01)


def test_goal_service_returns_default_when_unset() -> None:
    service = GoalSettingsService(InMemoryGoalSettingsRepository(), InMemoryCache())

    assert service.get_goal(uuid4()) == DEFAULT_GOAL


def test_goal_service_updates_and_caches() -> None:
    repository = InMemoryGoalSettingsRepository()
    service = GoalSettingsService(repository, InMemoryCache())
    user_id = uuid4()
    goal = GoalContext(
        target_calories=1800, target_protein=140, maintenance_calories=2300
    )

    service.update_goal(user_id, goal)
    repository.goals.clear()

    assert service.get_goal(user_id) == goal
