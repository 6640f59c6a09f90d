"""Read-through cache for daily activity metrics."""

import logging
from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from typing import Protocol
from zoneinfo import ZoneInfo

from health_tracker.adapters.health_gateway_client import HealthSourceClient
from health_tracker.dates import last_7_days, normalize_day, previous_week, today
from health_tracker.domain.metrics import DailyAggregate, DailyMetric
from health_tracker.services.background import BackgroundTasks

_logger = logging.getLogger(__name__)


class DailyMetricRepository(Protocol):
    """Persistence interface for cached daily metrics."""

    def get_daily_metric(self, day: date) -> DailyMetric | None:
        """Return the cached metric for a day."""

    def list_daily_metrics(self, days: list[date]) -> list[DailyMetric]:
        """Return cached metrics for the given days, in any order."""

    def upsert_daily_metric(
        self, aggregate: DailyAggregate, synced_at: datetime
    ) -> DailyMetric:
        """Insert or overwrite the metric for the aggregate's day."""


class FetchError(Exception):
    """Raised when the health data source cannot be read."""

    def __init__(self, days: list[date], message: str) -> None:
        super().__init__(message)
        self.days = days


@dataclass
class MetricsRepository:
    """Serves cached metrics immediately and refreshes them in the background."""

    source: HealthSourceClient
    store: DailyMetricRepository
    timezone: ZoneInfo = field(default_factory=lambda: ZoneInfo("UTC"))
    background: BackgroundTasks = field(default_factory=BackgroundTasks)

    async def get_metrics_for_day(self, day: date | datetime) -> DailyMetric | None:
        """Return the cached metric and schedule a refresh for the same day."""
        normalized = normalize_day(day, self.timezone)
        cached = self.store.get_daily_metric(normalized)
        self.background.schedule(
            self._refresh_day_quietly(normalized),
            name=f"refresh-metrics:{normalized.isoformat()}",
        )
        return cached

    async def get_metrics_for_days(
        self, days: list[date | datetime]
    ) -> list[DailyMetric]:
        """Return cached metrics for the days that have one, in input order."""
        normalized = _normalize_days(days, self.timezone)
        by_day = {
            metric.day: metric for metric in self.store.list_daily_metrics(normalized)
        }
        self.background.schedule(
            self._refresh_days_quietly(normalized),
            name=f"refresh-metrics:{len(normalized)}-days",
        )
        return [by_day[day] for day in normalized if day in by_day]

    async def get_today(self) -> DailyMetric | None:
        """Return today's cached metric."""
        return await self.get_metrics_for_day(today(self.timezone))

    async def get_last_7_days(self) -> list[DailyMetric]:
        """Return cached metrics for the current week, oldest first."""
        return await self.get_metrics_for_days(last_7_days(today(self.timezone)))

    async def get_previous_week(self) -> list[DailyMetric]:
        """Return cached metrics for the week before the current one."""
        return await self.get_metrics_for_days(previous_week(today(self.timezone)))

    async def refresh_day(self, day: date | datetime) -> DailyMetric:
        """Fetch a day from the source and persist it, even when zero."""
        normalized = normalize_day(day, self.timezone)
        try:
            aggregate = await self.source.fetch_daily_aggregate(normalized)
        except Exception as exc:
            raise FetchError(
                [normalized], f"Failed to fetch metrics for {normalized}"
            ) from exc
        if aggregate is None:
            aggregate = DailyAggregate.zero(normalized)
        return self._save(aggregate)

    async def refresh_days(self, days: list[date | datetime]) -> list[DailyMetric]:
        """Fetch several days in one source call and persist what came back."""
        normalized = _normalize_days(days, self.timezone)
        try:
            aggregates = await self.source.fetch_daily_aggregates(normalized)
        except Exception as exc:
            raise FetchError(
                normalized, f"Failed to fetch metrics for {len(normalized)} days"
            ) from exc
        if not aggregates:
            _logger.warning(
                "Health source returned no data for %s days", len(normalized)
            )
        return [self._save(aggregate) for aggregate in aggregates]

    async def refresh_last_7_days(self) -> list[DailyMetric]:
        """Explicitly refresh the current week."""
        return await self.refresh_days(last_7_days(today(self.timezone)))

    async def wait_for_background(self) -> None:
        """Wait for every scheduled background refresh to finish."""
        await self.background.drain()

    async def close(self) -> None:
        """Cancel background refreshes that are still running."""
        await self.background.close()

    def _save(self, aggregate: DailyAggregate) -> DailyMetric:
        try:
            return self.store.upsert_daily_metric(aggregate, datetime.now(tz=UTC))
        except Exception:
            _logger.exception("Failed to cache metrics for %s", aggregate.day)
            return DailyMetric(
                day=aggregate.day,
                steps=aggregate.steps,
                active_energy_kcal=aggregate.active_energy_kcal,
            )

    async def _refresh_day_quietly(self, day: date) -> None:
        try:
            await self.refresh_day(day)
        except FetchError as exc:
            _logger.warning("Background refresh failed for %s: %s", day, exc.__cause__)

    async def _refresh_days_quietly(self, days: list[date]) -> None:
        try:
            await self.refresh_days(days)
        except FetchError as exc:
            _logger.warning(
                "Background refresh failed for %s days: %s", len(days), exc.__cause__
            )


def _normalize_days(days: list[date | datetime], tz: ZoneInfo) -> list[date]:
    normalized: list[date] = []
    for day in days:
        value = normalize_day(day, tz)
        if value not in normalized:
            normalized.append(value)
    return normalized
