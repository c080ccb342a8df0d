"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from openai import AsyncOpenAI
from supabase import create_client

from food_tracker.adapters.openai_analysis_client import OpenAIAnalysisClient
from food_tracker.adapters.openai_coach_client import OpenAICoachClient
from food_tracker.adapters.supabase_admin_repository import SupabaseAdminRepository
from food_tracker.adapters.supabase_feedback_repository import (
    SupabaseFeedbackRepository,
)
from food_tracker.adapters.supabase_food_entry_repository import (
    SupabaseFoodEntryRepository,
)
from food_tracker.adapters.supabase_goal_settings_repository import (
    SupabaseGoalSettingsRepository,
)
from food_tracker.config import Settings
from food_tracker.services.admin import AdminService
from food_tracker.services.analysis import FoodAnalysisService
from food_tracker.services.cache import InMemoryCache
from food_tracker.services.coach import CoachService
from food_tracker.services.entries import FoodEntryService
from food_tracker.services.feedback import FeedbackService
from food_tracker.services.goals import GoalSettingsService
from food_tracker.services.stats import StatsService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    entry_service: FoodEntryService
    stats_service: StatsService
    goal_service: GoalSettingsService
    analysis_service: FoodAnalysisService
    coach_service: CoachService
    feedback_service: FeedbackService
    admin_service: AdminService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    openai_client = AsyncOpenAI(api_key=resolved_settings.openai_api_key)
    cache = InMemoryCache()
    entry_repository = SupabaseFoodEntryRepository(supabase_client)
    goal_repository = SupabaseGoalSettingsRepository(supabase_client)
    admin_repository = SupabaseAdminRepository(supabase_client)

    entry_service = FoodEntryService(
        repository=entry_repository,
        cache=cache,
        lookback_days=resolved_settings.frequent_items_lookback_days,
        frequent_items_ttl_seconds=resolved_settings.frequent_items_cache_ttl_seconds,
    )
    analysis_service = FoodAnalysisService(
        client=OpenAIAnalysisClient(openai_client),
        model=resolved_settings.openai_model,
        temperature=resolved_settings.openai_temperature,
    )
    coach_service = CoachService(
        client=OpenAICoachClient(openai_client),
        model=resolved_settings.coach_model,
        temperature=resolved_settings.coach_temperature,
        max_tokens=resolved_settings.coach_max_tokens,
        pattern_model=resolved_settings.meal_pattern_model,
        recommendation_model=resolved_settings.meal_recommendation_model,
        usage_recorder=admin_repository,
    )

    async def close_resources() -> None:
        await openai_client.close()

    return AppContainer(
        settings=resolved_settings,
        entry_service=entry_service,
        stats_service=StatsService(entry_repository),
        goal_service=GoalSettingsService(goal_repository, cache),
        analysis_service=analysis_service,
        coach_service=coach_service,
        feedback_service=FeedbackService(
            SupabaseFeedbackRepository(supabase_client),
            daily_limit=resolved_settings.feedback_daily_limit,
        ),
        admin_service=AdminService(admin_repository),
        close_resources=close_resources,
    )
