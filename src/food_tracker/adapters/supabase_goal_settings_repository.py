"""Supabase repository for goal settings."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from food_tracker.domain.goals import GoalContext
from food_tracker.services.goals import GoalSettingsRepository


@dataclass
class SupabaseGoalSettingsRepository(GoalSettingsRepository):
    """Supabase implementation for user goal settings."""

    client: Client

    def get_goal(self, user_id: UUID) -> GoalContext | None:
        """Return the stored goal for a user."""
        response = (
            self.client.table("user_settings")
            .select("target_calories, maintenance_calories, target_protein")
            .eq("user_id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        row = response.data[0]
        return GoalContext(
            target_calories=float(row.get("target_calories") or 0.0),
            target_protein=float(row.get("target_protein") or 0.0),
            maintenance_calories=float(row.get("maintenance_calories") or 0.0),
        )

    def upsert_goal(self, user_id: UUID, goal: GoalContext) -> None:
        """Create or update the user's goal row."""
        self.client.table("user_settings").upsert(
            {
                "user_id": str(user_id),
                "target_calories": goal.target_calories,
                "maintenance_calories": goal.maintenance_calories,
                "target_protein": goal.target_protein,
                "updated_at": datetime.now(tz=UTC).isoformat(),
            },
            on_conflict="user_id",
        ).execute()
