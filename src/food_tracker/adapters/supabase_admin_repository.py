"""Supabase admin data access."""

from dataclasses import dataclass
from datetime import UTC, date, datetime
from uuid import UUID

from supabase import Client

from food_tracker.domain.admin import (
    AccountType,
    AnalyticsSummary,
    DailyCount,
    UserMetric,
)
from food_tracker.services.admin import AdminRepository
from food_tracker.services.coach import UsageRecorder

# Daily metric name -> (RPC function, count column).
_DAILY_RPCS = {
    "active_users": ("get_daily_active_users", "user_count"),
    "food_logs": ("get_daily_food_logs", "log_count"),
    "coach_calls": ("get_daily_coach_calls", "call_count"),
}
_SETTINGS_ROW_ID = 1


@dataclass
class SupabaseAdminRepository(AdminRepository, UsageRecorder):
    """Supabase implementation for admin queries and usage logging."""

    client: Client

    def get_summary(self) -> AnalyticsSummary:
        """Return usage totals from the analytics RPCs."""
        return AnalyticsSummary(
            total_users=self._scalar("get_total_users"),
            total_food_logs=self._scalar("get_total_food_logs"),
            total_coach_calls=self._scalar("get_total_coach_calls"),
            total_active_users=self._scalar("get_total_active_users"),
        )

    def list_daily_counts(self, metric: str, days_back: int) -> list[DailyCount]:
        """Return per-day counts for one metric."""
        function_name, column = _DAILY_RPCS[metric]
        response = self.client.rpc(function_name, {"days_back": days_back}).execute()
        return [
            DailyCount(
                day=date.fromisoformat(str(row["date"])),
                count=int(row.get(column) or 0),
            )
            for row in response.data or []
        ]

    def list_user_metrics(self) -> list[UserMetric]:
        """Return per-user metrics in the RPC's activity order."""
        response = self.client.rpc("get_user_metrics").execute()
        metrics = []
        for row in response.data or []:
            last_active = row.get("last_active")
            metrics.append(
                UserMetric(
                    user_id=UUID(str(row["user_id"])),
                    email=row.get("email"),
                    user_rank=row.get("user_rank"),
                    account_type=str(row.get("account_type") or "basic"),
                    food_logs_count=int(row.get("food_logs_count") or 0),
                    coach_calls_count=int(row.get("coach_calls_count") or 0),
                    last_active=datetime.fromisoformat(last_active)
                    if isinstance(last_active, str) and last_active
                    else None,
                )
            )
        return metrics

    def get_user_rank(self, user_id: UUID) -> int | None:
        """Return the user's signup number from their profile."""
        response = (
            self.client.table("user_profiles")
            .select("user_number")
            .eq("user_id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        rank = response.data[0].get("user_number")
        return int(rank) if rank is not None else None

    def get_max_allowed_users(self) -> int:
        """Return the configured capacity."""
        return self._scalar("get_max_allowed_users")

    def set_max_allowed_users(self, max_allowed: int) -> None:
        """Update the single system settings row."""
        (
            self.client.table("system_settings")
            .update(
                {
                    "max_allowed_users": max_allowed,
                    "updated_at": datetime.now(UTC).isoformat(),
                }
            )
            .eq("id", _SETTINGS_ROW_ID)
            .execute()
        )

    def update_user_tier(self, user_id: UUID, tier: AccountType) -> bool:
        """Set the profile's account type."""
        response = (
            self.client.table("user_profiles")
            .update({"account_type": tier.value})
            .eq("user_id", str(user_id))
            .execute()
        )
        return bool(response.data)

    def record_usage(
        self, user_id: UUID, action: str, success: bool, error: str | None = None
    ) -> None:
        """Append a row to the API usage log."""
        self.client.rpc(
            "log_api_usage",
            {
                "user_uuid": str(user_id),
                "action": action,
                "was_success": success,
                "error_msg": error,
            },
        ).execute()

    def _scalar(self, function_name: str) -> int:
        response = self.client.rpc(function_name).execute()
        return int(response.data or 0)
