"""Domain models for meal logging."""

from dataclasses import dataclass
from datetime import date, datetime
from uuid import UUID


@dataclass(frozen=True)
class MealEntry:
    """A manually logged meal with its macro breakdown."""

    id: UUID
    name: str
    calories: int
    protein_g: float
    carbs_g: float
    fat_g: float
    logged_at: datetime


@dataclass(frozen=True)
class NutritionTotals:
    """Summed calories and macros for one day."""

    day: date
    calories: int
    protein_g: float
    carbs_g: float
    fat_g: float
