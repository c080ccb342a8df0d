"""Admin analytics domain models."""

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from uuid import UUID


class AccountType(str, Enum):
    BASIC = "basic"
    PRO = "pro"
    ADMIN = "admin"


@dataclass(frozen=True)
class AnalyticsSummary:
    """Usage totals across all users."""

    total_users: int
    total_food_logs: int
    total_coach_calls: int
    total_active_users: int = 0


@dataclass(frozen=True)
class DailyCount:
    """A per-day usage count."""

    day: date
    count: int


@dataclass(frozen=True)
class UserMetric:
    """Per-user usage metrics."""

    user_id: UUID
    email: str | None
    user_rank: int | None
    account_type: str
    food_logs_count: int
    coach_calls_count: int
    last_active: datetime | None


@dataclass(frozen=True)
class WaitlistPosition:
    """Where a user sits relative to the capacity limit."""

    rank: int | None
    total_users: int
    max_allowed: int
    has_access: bool
