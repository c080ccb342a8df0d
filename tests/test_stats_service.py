"""Tests for weekly aggregation and the stats service."""

from datetime import date
from uuid import uuid4

import pytest

from food_tracker.services.stats import StatsService, aggregate_week, week_dates
from tests.conftest import InMemoryFoodEntryRepository, make_record


def test_aggregate_week_averages_logged_days() -> None:
    records = [
        make_record("poha", 500, 12, occurred_on=date(2025, 10, 13)),
        make_record("dal rice", 1000, 30, occurred_on=date(2025, 10, 13)),
        make_record("chicken biryani", 1600, 45, occurred_on=date(2025, 10, 14)),
        make_record("paneer wrap", 1700, 50, occurred_on=date(2025, 10, 16)),
    ]

    stats = aggregate_week(records, maintenance_calories=1600)

    assert [totals.calories for totals in stats.daily] == [1500, 1600, 1700]
    assert stats.average_calories == 1600
    assert stats.daily_deficit == 0
    assert stats.weekly_deficit == 0
    assert stats.days_logged == 3


def test_aggregate_week_reports_deficit() -> None:
    records = [
        make_record("salad bowl", 1500, 60, occurred_on=date(2025, 10, 13)),
        make_record("salad bowl", 1700, 80, occurred_on=date(2025, 10, 14)),
    ]

    stats = aggregate_week(records, maintenance_calories=2000)

    assert stats.average_calories == 1600
    assert stats.average_protein == 70
    assert stats.daily_deficit == -400
    assert stats.weekly_deficit == -800


def test_aggregate_week_skips_days_without_calories() -> None:
    records = [
        make_record("black coffee", 0, 0, occurred_on=date(2025, 10, 13)),
        make_record("oatmeal", 400, 12, occurred_on=date(2025, 10, 14)),
    ]

    stats = aggregate_week(records, maintenance_calories=2000)

    assert stats.days_logged == 1
    assert stats.average_calories == 400
    assert len(stats.daily) == 2


def test_aggregate_week_empty() -> None:
    stats = aggregate_week([], maintenance_calories=2000)

    assert stats.daily == []
    assert stats.days_logged == 0
    assert stats.average_calories == 0
    assert stats.daily_deficit == -2000
    assert stats.weekly_deficit == 0


def test_week_dates_starts_on_monday() -> None:
    days = week_dates(date(2025, 10, 16))

    assert days[0] == date(2025, 10, 13)
    assert days[-1] == date(2025, 10, 19)
    assert len(days) == 7


def test_get_week_fills_missing_days() -> None:
    user_id = uuid4()
    repository = InMemoryFoodEntryRepository()
    repository.entries[user_id] = [
        make_record("idli sambar", 350, 10, occurred_on=date(2025, 10, 13)),
        make_record("rajma chawal", 650, 20, occurred_on=date(2025, 10, 15)),
        make_record("rajma chawal", 650, 20, occurred_on=date(2025, 10, 6)),
    ]
    service = StatsService(repository)

    stats = service.get_week(user_id, date(2025, 10, 15), maintenance_calories=2000)

    assert [totals.calories for totals in stats.daily] == [350, 0, 650, 0, 0, 0, 0]
    assert stats.days_logged == 2
    assert stats.average_calories == pytest.approx(500)


def test_get_day_sums_entries() -> None:
    user_id = uuid4()
    repository = InMemoryFoodEntryRepository()
    repository.entries[user_id] = [
        make_record("upma", 300, 8, occurred_on=date(2025, 10, 13)),
        make_record("egg curry", 450, 24, occurred_on=date(2025, 10, 13)),
    ]
    service = StatsService(repository)

    totals = service.get_day(user_id, date(2025, 10, 13))
    empty = service.get_day(user_id, date(2025, 10, 14))

    assert totals.calories == 750
    assert totals.protein == 32
    assert totals.entry_count == 2
    assert empty.calories == 0
    assert empty.entry_count == 0
