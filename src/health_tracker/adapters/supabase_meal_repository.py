"""Supabase repository for logged meals."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from health_tracker.domain.meals import MealEntry
from health_tracker.services.meals import MealRepository

_COLUMNS = "id, name, calories, protein_g, carbs_g, fat_g, logged_at"


@dataclass
class SupabaseMealRepository(MealRepository):
    """Supabase implementation for meals."""

    client: Client

    def create_meal(self, meal: MealEntry) -> MealEntry:
        """Insert a meal row."""
        response = (
            self.client.table("meals")
            .insert(
                {
                    "id": str(meal.id),
                    "name": meal.name,
                    "calories": meal.calories,
                    "protein_g": meal.protein_g,
                    "carbs_g": meal.carbs_g,
                    "fat_g": meal.fat_g,
                    "logged_at": meal.logged_at.isoformat(),
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create meal")
        return _parse_row(response.data[0])

    def list_meals(self, start: datetime, end: datetime) -> list[MealEntry]:
        """Return meals in the time range, newest first."""
        response = (
            self.client.table("meals")
            .select(_COLUMNS)
            .gte("logged_at", start.isoformat())
            .lt("logged_at", end.isoformat())
            .order("logged_at", desc=True)
            .execute()
        )
        return [_parse_row(row) for row in response.data or []]

    def delete_meal(self, meal_id: UUID) -> bool:
        """Delete a meal row by id."""
        response = self.client.table("meals").delete().eq("id", str(meal_id)).execute()
        return bool(response.data)


def _parse_row(row: dict[str, object]) -> MealEntry:
    return MealEntry(
        id=UUID(str(row["id"])),
        name=str(row.get("name") or ""),
        calories=int(row.get("calories") or 0),
        protein_g=float(row.get("protein_g") or 0.0),
        carbs_g=float(row.get("carbs_g") or 0.0),
        fat_g=float(row.get("fat_g") or 0.0),
        logged_at=datetime.fromisoformat(str(row["logged_at"])),
    )
