"""JSON serialization helpers for API responses."""

from health_tracker.domain.meals import MealEntry, NutritionTotals
from health_tracker.domain.metrics import DailyMetric, SyncStatus
from health_tracker.services.dashboard import DashboardSummary
from health_tracker.services.meals import NutritionProgress


def serialize_metric(metric: DailyMetric | None) -> dict[str, object] | None:
    """Return a metric as JSON-ready data."""
    if metric is None:
        return None
    return {
        "day": metric.day.isoformat(),
        "steps": metric.steps,
        "active_energy_kcal": metric.active_energy_kcal,
        "last_synced_at": metric.last_synced_at.isoformat()
        if metric.last_synced_at
        else None,
    }


def serialize_metrics(metrics: list[DailyMetric]) -> list[dict[str, object]]:
    """Return several metrics as JSON-ready data."""
    return [serialize_metric(metric) for metric in metrics]


def serialize_dashboard(summary: DashboardSummary) -> dict[str, object]:
    """Return the dashboard summary as JSON-ready data."""
    comparison = summary.week_comparison
    return {
        "today": serialize_metric(summary.today),
        "week": serialize_metrics(summary.week),
        "previous_week": serialize_metrics(summary.previous_week),
        "goals": {
            "steps": summary.goals.step_goal,
            "active_energy_kcal": summary.goals.active_energy_goal_kcal,
        },
        "step_progress": summary.step_progress,
        "calorie_progress": summary.calorie_progress,
        "goal_reached": summary.goal_reached,
        "best_day": serialize_metric(summary.best_day),
        "weekly_average_steps": summary.weekly_average_steps,
        "week_comparison": {
            "percent_change": comparison.percent_change,
            "is_ahead": comparison.is_ahead,
            "text": comparison.text,
        }
        if comparison
        else None,
    }


def serialize_meal(meal: MealEntry) -> dict[str, object]:
    """Return a meal as JSON-ready data."""
    return {
        "id": str(meal.id),
        "name": meal.name,
        "calories": meal.calories,
        "protein_g": meal.protein_g,
        "carbs_g": meal.carbs_g,
        "fat_g": meal.fat_g,
        "logged_at": meal.logged_at.isoformat(),
    }


def serialize_totals(
    totals: NutritionTotals, progress: NutritionProgress
) -> dict[str, object]:
    """Return a day's nutrition totals and goal progress."""
    return {
        "day": totals.day.isoformat(),
        "calories": totals.calories,
        "protein_g": totals.protein_g,
        "carbs_g": totals.carbs_g,
        "fat_g": totals.fat_g,
        "calorie_progress": progress.calorie_progress,
        "remaining_calories": progress.remaining_calories,
        "protein_progress": progress.protein_progress,
        "carbs_progress": progress.carbs_progress,
        "fat_progress": progress.fat_progress,
    }


def serialize_sync_status(status: SyncStatus, pending: int) -> dict[str, object]:
    """Return observer state and in-flight refresh count."""
    return {
        "observing": status.observing,
        "anchor": status.anchor,
        "update_count": status.update_count,
        "last_synced_at": status.last_synced_at.isoformat()
        if status.last_synced_at
        else None,
        "pending_refreshes": pending,
    }
