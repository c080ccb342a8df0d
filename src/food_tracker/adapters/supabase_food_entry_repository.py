"""Supabase repository for food entries."""

from dataclasses import dataclass
from datetime import date, datetime
from uuid import UUID

from supabase import Client

from food_tracker.domain.entries import NutritionRecord
from food_tracker.services.entries import FoodEntryRepository

_COLUMNS = (
    "id, entry_date, name, calories, protein, image_data, description, created_at"
)


@dataclass
class SupabaseFoodEntryRepository(FoodEntryRepository):
    """Supabase implementation for food entries."""

    client: Client

    def list_entries(self, user_id: UUID, days: list[date]) -> list[NutritionRecord]:
        """Return entries for the given dates, oldest first."""
        if not days:
            return []
        response = (
            self.client.table("food_entries")
            .select(_COLUMNS)
            .eq("user_id", str(user_id))
            .in_("entry_date", [day.isoformat() for day in days])
            .order("created_at", desc=False)
            .execute()
        )
        return [_parse_row(row) for row in response.data or []]

    def create_entry(self, user_id: UUID, record: NutritionRecord) -> NutritionRecord:
        """Insert an entry row and return it with its id."""
        response = (
            self.client.table("food_entries")
            .insert(
                {
                    "user_id": str(user_id),
                    "entry_date": record.occurred_on.isoformat(),
                    "name": record.name,
                    "calories": record.calories,
                    "protein": record.protein,
                    "image_data": record.image_ref,
                    "description": record.note,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create food entry")
        return _parse_row(response.data[0])

    def delete_entry(self, user_id: UUID, entry_id: UUID) -> bool:
        """Delete an entry owned by the user."""
        response = (
            self.client.table("food_entries")
            .delete()
            .eq("id", str(entry_id))
            .eq("user_id", str(user_id))
            .execute()
        )
        return bool(response.data)


def _parse_row(row: dict[str, object]) -> NutritionRecord:
    return NutritionRecord(
        id=UUID(str(row["id"])),
        occurred_on=date.fromisoformat(str(row["entry_date"])),
        name=str(row.get("name") or ""),
        calories=float(row.get("calories") or 0.0),
        protein=float(row.get("protein") or 0.0),
        image_ref=row.get("image_data") or None,
        note=row.get("description") or None,
        logged_at=_parse_timestamp(row.get("created_at")),
    )


def _parse_timestamp(value: object) -> datetime | None:
    if not isinstance(value, str) or not value:
        return None
    return datetime.fromisoformat(value)
