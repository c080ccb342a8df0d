"""Tests for container wiring."""

import asyncio

from food_tracker.containers import build_container


def test_build_container_creates_services(settings) -> None:
    container = build_container(settings)
    lookback_days = settings.frequent_items_lookback_days
    assert container.entry_service.lookback_days == lookback_days
    assert container.analysis_service.model == settings.openai_model
    assert container.coach_service.model == settings.coach_model
    assert container.coach_service.pattern_model == settings.meal_pattern_model
    assert container.feedback_service.daily_limit == settings.feedback_daily_limit
    asyncio.run(container.close_resources())
