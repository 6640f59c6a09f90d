"""Pydantic models for API request payloads."""

from datetime import date

from pydantic import BaseModel


class RefreshRequest(BaseModel):
    """Days to refresh from the health source; defaults to the current week."""

    days: list[date] | None = None


class MealCreateRequest(BaseModel):
    """Meal form fields as entered by the user."""

    name: str
    calories: str | int
    protein: str | float | None = None
    carbs: str | float | None = None
    fat: str | float | None = None
