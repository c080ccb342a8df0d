"""Food entry logging and quick-add suggestions."""

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Protocol
from uuid import UUID

from food_tracker.domain.entries import FrequentItemCluster, NutritionRecord
from food_tracker.errors import ValidationError
from food_tracker.services.cache import Cache
from food_tracker.services.frequent_items import get_frequent_items

_logger = logging.getLogger(__name__)


class FoodEntryRepository(Protocol):
    """Persistence interface for food entries."""

    def list_entries(self, user_id: UUID, days: list[date]) -> list[NutritionRecord]:
        """Return entries for the given dates, oldest first."""

    def create_entry(self, user_id: UUID, record: NutritionRecord) -> NutritionRecord:
        """Persist an entry and return it with its id."""

    def delete_entry(self, user_id: UUID, entry_id: UUID) -> bool:
        """Delete an entry; return False when it did not exist."""


@dataclass
class FoodEntryService:
    """Service for logging entries and suggesting frequent items."""

    repository: FoodEntryRepository
    cache: Cache
    lookback_days: int = 30
    frequent_items_ttl_seconds: int = 300

    def list_for_dates(self, user_id: UUID, days: list[date]) -> list[NutritionRecord]:
        """Return entries for several dates."""
        return self.repository.list_entries(user_id, days)

    def list_for_day(self, user_id: UUID, day: date) -> list[NutritionRecord]:
        """Return entries for a single date."""
        return self.repository.list_entries(user_id, [day])

    def add_entry(self, user_id: UUID, record: NutritionRecord) -> NutritionRecord:
        """Log a food entry."""
        created = self.repository.create_entry(user_id, record)
        self._invalidate(user_id)
        return created

    def delete_entry(self, user_id: UUID, entry_id: UUID) -> bool:
        """Remove a logged entry."""
        deleted = self.repository.delete_entry(user_id, entry_id)
        if deleted:
            self._invalidate(user_id)
        return deleted

    def frequent_items(
        self,
        user_id: UUID,
        today: date,
        lookback_days: int | None = None,
    ) -> list[FrequentItemCluster]:
        """Return quick-add suggestions from the recent log history."""
        window = self.lookback_days if lookback_days is None else lookback_days
        if window < 1:
            raise ValidationError(f"lookback_days must be >= 1, got {window}")
        cache_key = f"frequent_items:{user_id}:{today.isoformat()}:{window}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, list):
            return cached

        days = [today - timedelta(days=offset) for offset in range(window - 1, -1, -1)]
        entries = self.repository.list_entries(user_id, days)
        items = get_frequent_items(entries)
        _logger.info(
            "Frequent items computed: user=%s entries=%s items=%s",
            user_id,
            len(entries),
            len(items),
        )
        self.cache.set(cache_key, items, ttl_seconds=self.frequent_items_ttl_seconds)
        self.cache.set(
            _index_key(user_id),
            [*self._cached_keys(user_id), cache_key],
            ttl_seconds=self.frequent_items_ttl_seconds,
        )
        return items

    def _cached_keys(self, user_id: UUID) -> list[str]:
        keys = self.cache.get(_index_key(user_id))
        return keys if isinstance(keys, list) else []

    def _invalidate(self, user_id: UUID) -> None:
        for key in self._cached_keys(user_id):
            self.cache.delete(key)
        self.cache.delete(_index_key(user_id))


def _index_key(user_id: UUID) -> str:
    return f"frequent_items:{user_id}:keys"
