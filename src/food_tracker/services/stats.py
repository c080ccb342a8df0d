"""Statistics over logged food entries."""

from collections import defaultdict
from dataclasses import dataclass
from datetime import date, timedelta
from uuid import UUID

from food_tracker.domain.entries import NutritionRecord
from food_tracker.domain.stats import DailyTotals, WeeklyStats
from food_tracker.services.entries import FoodEntryRepository

DAYS_PER_WEEK = 7


def aggregate_week(
    records: list[NutritionRecord], maintenance_calories: float
) -> WeeklyStats:
    """Sum entries per day and average over days that have food logged.

    Days without any calories are left out of the averages rather than counted
    as zero. A negative deficit means eating below maintenance.
    """
    daily = _daily_totals(records)
    logged = [totals for totals in daily if totals.calories != 0]
    days_logged = len(logged)
    if days_logged:
        average_calories = sum(totals.calories for totals in logged) / days_logged
        average_protein = sum(totals.protein for totals in logged) / days_logged
    else:
        average_calories = 0.0
        average_protein = 0.0
    daily_deficit = average_calories - maintenance_calories
    return WeeklyStats(
        daily=daily,
        average_calories=average_calories,
        average_protein=average_protein,
        daily_deficit=daily_deficit,
        weekly_deficit=daily_deficit * days_logged,
        days_logged=days_logged,
    )


def week_dates(anchor: date) -> list[date]:
    """Return Monday through Sunday of the week containing the anchor date."""
    start = anchor - timedelta(days=anchor.weekday())
    return [start + timedelta(days=offset) for offset in range(DAYS_PER_WEEK)]


def _daily_totals(records: list[NutritionRecord]) -> list[DailyTotals]:
    calories: dict[date, float] = defaultdict(float)
    protein: dict[date, float] = defaultdict(float)
    counts: dict[date, int] = defaultdict(int)
    for record in records:
        calories[record.occurred_on] += record.calories
        protein[record.occurred_on] += record.protein
        counts[record.occurred_on] += 1
    return [
        DailyTotals(
            day=day,
            calories=calories[day],
            protein=protein[day],
            entry_count=counts[day],
        )
        for day in sorted(counts)
    ]


@dataclass
class StatsService:
    """Service for computing daily and weekly totals."""

    repository: FoodEntryRepository

    def get_day(self, user_id: UUID, day: date) -> DailyTotals:
        """Return totals for a single day."""
        records = self.repository.list_entries(user_id, [day])
        daily = _daily_totals(records)
        if not daily:
            return DailyTotals(day=day, calories=0, protein=0)
        return daily[0]

    def get_week(
        self, user_id: UUID, anchor: date, maintenance_calories: float
    ) -> WeeklyStats:
        """Return the week containing the anchor, with every day present."""
        days = week_dates(anchor)
        records = self.repository.list_entries(user_id, days)
        stats = aggregate_week(records, maintenance_calories)
        by_day = {totals.day: totals for totals in stats.daily}
        filled = [
            by_day.get(day, DailyTotals(day=day, calories=0, protein=0)) for day in days
        ]
        return WeeklyStats(
            daily=filled,
            average_calories=stats.average_calories,
            average_protein=stats.average_protein,
            daily_deficit=stats.daily_deficit,
            weekly_deficit=stats.weekly_deficit,
            days_logged=stats.days_logged,
        )
