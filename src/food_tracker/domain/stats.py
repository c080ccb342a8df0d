"""Domain models for statistics."""

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class DailyTotals:
    """Total calories and protein for one day."""

    day: date
    calories: float
    protein: float
    entry_count: int = 0


@dataclass(frozen=True)
class WeeklyStats:
    """Daily totals for a period with averages and deficit figures."""

    daily: list[DailyTotals]
    average_calories: float
    average_protein: float
    daily_deficit: float
    weekly_deficit: float
    days_logged: int
