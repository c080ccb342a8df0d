"""Admin service for usage analytics, account tiers and waitlist capacity."""

import logging
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from food_tracker.domain.admin import (
    AccountType,
    AnalyticsSummary,
    DailyCount,
    UserMetric,
    WaitlistPosition,
)
from food_tracker.errors import ValidationError

_logger = logging.getLogger(__name__)


class AdminRepository(Protocol):
    """Persistence interface for admin data."""

    def get_summary(self) -> AnalyticsSummary:
        """Return usage totals."""

    def list_daily_counts(self, metric: str, days_back: int) -> list[DailyCount]:
        """Return per-day counts for one metric."""

    def list_user_metrics(self) -> list[UserMetric]:
        """Return per-user usage metrics, most active first."""

    def get_user_rank(self, user_id: UUID) -> int | None:
        """Return the user's signup number, if assigned."""

    def get_max_allowed_users(self) -> int:
        """Return the capacity limit for active users."""

    def set_max_allowed_users(self, max_allowed: int) -> None:
        """Persist a new capacity limit."""

    def update_user_tier(self, user_id: UUID, tier: AccountType) -> bool:
        """Change a user's account tier; return False when the user is unknown."""


DAILY_METRICS = ("active_users", "food_logs", "coach_calls")


@dataclass
class AdminService:
    """Service for admin dashboards."""

    admin_repository: AdminRepository

    def get_summary(self) -> dict[str, int]:
        """Return usage totals."""
        summary = self.admin_repository.get_summary()
        return {
            "total_users": summary.total_users,
            "total_active_users": summary.total_active_users,
            "total_food_logs": summary.total_food_logs,
            "total_coach_calls": summary.total_coach_calls,
        }

    def get_daily_metrics(self, days_back: int = 30) -> dict[str, list[dict]]:
        """Return daily active users, food logs and coach calls."""
        if days_back < 1:
            raise ValidationError(f"days_back must be >= 1, got {days_back}")
        return {
            metric: [
                {"date": count.day.isoformat(), "count": count.count}
                for count in self.admin_repository.list_daily_counts(metric, days_back)
            ]
            for metric in DAILY_METRICS
        }

    def list_users(self) -> list[dict[str, object]]:
        """Return per-user metrics in repository order (most active first)."""
        return [
            {
                "user_id": str(metric.user_id),
                "email": metric.email,
                "user_rank": metric.user_rank,
                "account_type": metric.account_type,
                "food_logs_count": metric.food_logs_count,
                "coach_calls_count": metric.coach_calls_count,
                "last_active": metric.last_active.isoformat()
                if metric.last_active
                else None,
            }
            for metric in self.admin_repository.list_user_metrics()
        ]

    def update_user_tier(self, user_id: UUID, tier: str) -> bool:
        """Change a user's account tier."""
        try:
            account_type = AccountType(tier)
        except ValueError as exc:
            raise ValidationError(f"Unknown account tier: {tier}") from exc
        updated = self.admin_repository.update_user_tier(user_id, account_type)
        if updated:
            _logger.info("Account tier updated: user=%s tier=%s", user_id, tier)
        return updated

    def set_max_allowed_users(self, max_allowed: int) -> int:
        """Update the waitlist capacity."""
        if max_allowed < 0:
            raise ValidationError(f"max_allowed_users must be >= 0, got {max_allowed}")
        self.admin_repository.set_max_allowed_users(max_allowed)
        _logger.info("Waitlist capacity updated: max_allowed=%s", max_allowed)
        return max_allowed

    def get_waitlist_position(self, user_id: UUID) -> WaitlistPosition:
        """Return the user's rank and whether it is within capacity."""
        rank = self.admin_repository.get_user_rank(user_id)
        max_allowed = self.admin_repository.get_max_allowed_users()
        total_users = self.admin_repository.get_summary().total_users
        return WaitlistPosition(
            rank=rank,
            total_users=total_users,
            max_allowed=max_allowed,
            has_access=rank is not None and rank <= max_allowed,
        )
