"""Daily and weekly activity summaries."""

from dataclasses import dataclass

from health_tracker.domain.goals import HealthGoals
from health_tracker.domain.metrics import DailyMetric
from health_tracker.services.metrics import MetricsRepository


@dataclass(frozen=True)
class WeekComparison:
    """This week's average steps against the previous week's."""

    percent_change: float
    is_ahead: bool

    @property
    def text(self) -> str:
        """Signed percentage, e.g. ``+12%``."""
        return f"{self.percent_change:+.0f}%"


@dataclass
class DashboardSummary:
    """Everything the activity dashboard shows."""

    today: DailyMetric | None
    week: list[DailyMetric]
    previous_week: list[DailyMetric]
    goals: HealthGoals
    step_progress: float
    calorie_progress: float
    goal_reached: bool
    best_day: DailyMetric | None
    weekly_average_steps: int
    week_comparison: WeekComparison | None


@dataclass
class DashboardService:
    """Builds dashboard summaries from the metrics cache."""

    metrics_repository: MetricsRepository
    goals: HealthGoals

    async def load(self) -> DashboardSummary:
        """Summarize cached data; refreshes run in the background."""
        today = await self.metrics_repository.get_today()
        week = await self.metrics_repository.get_last_7_days()
        previous = await self.metrics_repository.get_previous_week()
        return summarize(today, week, previous, self.goals)

    async def refresh(self) -> DashboardSummary:
        """Fetch the current week from the source, then summarize."""
        await self.metrics_repository.refresh_last_7_days()
        return await self.load()


def summarize(
    today: DailyMetric | None,
    week: list[DailyMetric],
    previous: list[DailyMetric],
    goals: HealthGoals,
) -> DashboardSummary:
    """Derive progress and insight values from cached metrics."""
    return DashboardSummary(
        today=today,
        week=week,
        previous_week=previous,
        goals=goals,
        step_progress=step_progress(today, goals),
        calorie_progress=calorie_progress(today, goals),
        goal_reached=today is not None and today.steps >= goals.step_goal,
        best_day=best_day(week),
        weekly_average_steps=average_steps(week),
        week_comparison=compare_weeks(week, previous),
    )


def step_progress(today: DailyMetric | None, goals: HealthGoals) -> float:
    """Fraction of the step goal reached, capped at 1."""
    if today is None or goals.step_goal <= 0:
        return 0.0
    return min(1.0, today.steps / goals.step_goal)


def calorie_progress(today: DailyMetric | None, goals: HealthGoals) -> float:
    """Fraction of the active-energy goal reached, capped at 1."""
    if today is None or goals.active_energy_goal_kcal <= 0:
        return 0.0
    return min(1.0, today.active_energy_kcal / goals.active_energy_goal_kcal)


def best_day(week: list[DailyMetric]) -> DailyMetric | None:
    """Day with the most steps; the earliest wins ties."""
    if not week:
        return None
    return max(week, key=lambda metric: metric.steps)


def average_steps(metrics: list[DailyMetric]) -> int:
    """Integer mean of steps over the days that have data."""
    if not metrics:
        return 0
    return sum(metric.steps for metric in metrics) // len(metrics)


def compare_weeks(
    week: list[DailyMetric], previous: list[DailyMetric]
) -> WeekComparison | None:
    """Percentage change in average steps, if both weeks have data."""
    if not week or not previous:
        return None
    previous_average = sum(metric.steps for metric in previous) / len(previous)
    if previous_average <= 0:
        return None
    current_average = sum(metric.steps for metric in week) / len(week)
    change = (current_average - previous_average) / previous_average * 100
    return WeekComparison(percent_change=change, is_ahead=change >= 0)
