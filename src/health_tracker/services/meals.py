"""Meal logging service."""

import math
from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from typing import Protocol
from uuid import UUID, uuid4
from zoneinfo import ZoneInfo

from health_tracker.dates import end_of_day, start_of_day, today
from health_tracker.domain.goals import HealthGoals
from health_tracker.domain.meals import MealEntry, NutritionTotals


class MealRepository(Protocol):
    """Persistence interface for logged meals."""

    def create_meal(self, meal: MealEntry) -> MealEntry:
        """Persist a meal and return it."""

    def list_meals(self, start: datetime, end: datetime) -> list[MealEntry]:
        """Return meals logged in ``[start, end)``, newest first."""

    def delete_meal(self, meal_id: UUID) -> bool:
        """Delete a meal; return False when it did not exist."""


class MealValidationError(ValueError):
    """Raised when meal form input cannot be logged."""


@dataclass(frozen=True)
class MealForm:
    """Raw meal input as typed by the user."""

    name: str
    calories: str | int
    protein: str | float | None = None
    carbs: str | float | None = None
    fat: str | float | None = None


@dataclass(frozen=True)
class NutritionProgress:
    """Daily nutrition totals measured against goals."""

    calorie_progress: float
    remaining_calories: int
    protein_progress: float
    carbs_progress: float
    fat_progress: float


@dataclass
class MealService:
    """Service for logging meals and summing a day's intake."""

    repository: MealRepository
    timezone: ZoneInfo = field(default_factory=lambda: ZoneInfo("UTC"))

    def log_meal(self, form: MealForm) -> MealEntry:
        """Validate form input and persist a new meal."""
        name = form.name.strip()
        if not name:
            raise MealValidationError("Meal name is required")
        calories = _parse_calories(form.calories)
        meal = MealEntry(
            id=uuid4(),
            name=name,
            calories=calories,
            protein_g=_parse_grams(form.protein, "protein"),
            carbs_g=_parse_grams(form.carbs, "carbs"),
            fat_g=_parse_grams(form.fat, "fat"),
            logged_at=datetime.now(tz=UTC),
        )
        return self.repository.create_meal(meal)

    def list_meals(self, day: date | None = None) -> list[MealEntry]:
        """Return meals for a local day, newest first."""
        target = day or today(self.timezone)
        return self.repository.list_meals(
            start_of_day(target, self.timezone).astimezone(UTC),
            end_of_day(target, self.timezone).astimezone(UTC),
        )

    def delete_meal(self, meal_id: UUID) -> bool:
        """Delete a meal by id."""
        return self.repository.delete_meal(meal_id)

    def daily_totals(self, day: date | None = None) -> NutritionTotals:
        """Sum calories and macros for a local day."""
        target = day or today(self.timezone)
        meals = self.list_meals(target)
        return NutritionTotals(
            day=target,
            calories=sum(meal.calories for meal in meals),
            protein_g=sum(meal.protein_g for meal in meals),
            carbs_g=sum(meal.carbs_g for meal in meals),
            fat_g=sum(meal.fat_g for meal in meals),
        )


def goal_progress(totals: NutritionTotals, goals: HealthGoals) -> NutritionProgress:
    """Compare a day's totals with nutrition goals."""
    return NutritionProgress(
        calorie_progress=min(1.0, _ratio(totals.calories, goals.calorie_goal)),
        remaining_calories=max(0, goals.calorie_goal - totals.calories),
        protein_progress=_ratio(totals.protein_g, goals.protein_goal_g),
        carbs_progress=_ratio(totals.carbs_g, goals.carbs_goal_g),
        fat_progress=_ratio(totals.fat_g, goals.fat_goal_g),
    )


def _ratio(value: float, goal: float) -> float:
    if goal <= 0:
        return 0.0
    return value / goal


def _parse_calories(value: str | int) -> int:
    if isinstance(value, bool):
        raise MealValidationError("Calories must be a whole number")
    if isinstance(value, int):
        calories = value
    else:
        try:
            calories = int(str(value).strip())
        except ValueError as exc:
            raise MealValidationError("Calories must be a whole number") from exc
    if calories <= 0:
        raise MealValidationError("Calories must be greater than zero")
    return calories


def _parse_grams(value: str | float | None, label: str) -> float:
    if value is None:
        return 0.0
    if isinstance(value, int | float):
        grams = float(value)
    else:
        cleaned = value.strip()
        if not cleaned:
            return 0.0
        try:
            grams = float(cleaned)
        except ValueError:
            return 0.0
    if not math.isfinite(grams):
        raise MealValidationError(f"{label.capitalize()} must be a number")
    if grams < 0:
        raise MealValidationError(f"{label.capitalize()} cannot be negative")
    return grams
