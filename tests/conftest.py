"""Shared test fixtures."""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from uuid import UUID
from zoneinfo import ZoneInfo

import pytest

from health_tracker.adapters.health_gateway_client import HealthSourceClient
from health_tracker.config import Settings
from health_tracker.containers import AppContainer
from health_tracker.domain.meals import MealEntry
from health_tracker.domain.metrics import (
    AuthorizationStatus,
    ChangeSet,
    DailyAggregate,
    DailyMetric,
)
from health_tracker.services.authorization import AuthorizationService
from health_tracker.services.dashboard import DashboardService
from health_tracker.services.meals import MealRepository, MealService
from health_tracker.services.metrics import DailyMetricRepository, MetricsRepository
from health_tracker.services.updates import HealthUpdatesObserver

UTC_ZONE = ZoneInfo("UTC")


@dataclass
class FakeHealthSource(HealthSourceClient):
    """Fake health source with in-memory aggregates and failure switches."""

    aggregates: dict[date, DailyAggregate] = field(default_factory=dict)
    status: AuthorizationStatus = AuthorizationStatus.GRANTED
    requested_status: AuthorizationStatus = AuthorizationStatus.GRANTED
    changes: list[ChangeSet] = field(default_factory=list)
    error: Exception | None = None
    hang: bool = False
    single_calls: list[date] = field(default_factory=list)
    batch_calls: list[list[date]] = field(default_factory=list)
    change_anchors: list[str | None] = field(default_factory=list)
    authorization_requests: int = 0

    def add(self, day: date, steps: int, active_energy_kcal: float) -> None:
        self.aggregates[day] = DailyAggregate(
            day=day, steps=steps, active_energy_kcal=active_energy_kcal
        )

    async def fetch_daily_aggregate(self, day: date) -> DailyAggregate | None:
        self.single_calls.append(day)
        await self._maybe_fail()
        return self.aggregates.get(day)

    async def fetch_daily_aggregates(self, days: list[date]) -> list[DailyAggregate]:
        self.batch_calls.append(list(days))
        await self._maybe_fail()
        return [self.aggregates[day] for day in days if day in self.aggregates]

    async def authorization_status(self) -> AuthorizationStatus:
        return self.status

    async def request_authorization(self) -> AuthorizationStatus:
        self.authorization_requests += 1
        self.status = self.requested_status
        return self.status

    async def fetch_changes(self, anchor: str | None) -> ChangeSet:
        self.change_anchors.append(anchor)
        await self._maybe_fail()
        if self.changes:
            return self.changes.pop(0)
        return ChangeSet(anchor=anchor, sample_count=0)

    async def _maybe_fail(self) -> None:
        if self.hang:
            await asyncio.Event().wait()
        if self.error is not None:
            raise self.error


@dataclass
class InMemoryDailyMetricRepository(DailyMetricRepository):
    """In-memory daily metric store for tests."""

    metrics: dict[date, DailyMetric] = field(default_factory=dict)
    fail_writes: bool = False
    writes: list[date] = field(default_factory=list)

    def get_daily_metric(self, day: date) -> DailyMetric | None:
        return self.metrics.get(day)

    def list_daily_metrics(self, days: list[date]) -> list[DailyMetric]:
        # Reverse order to make sure callers do not rely on store ordering.
        return [self.metrics[day] for day in reversed(days) if day in self.metrics]

    def upsert_daily_metric(
        self, aggregate: DailyAggregate, synced_at: datetime
    ) -> DailyMetric:
        if self.fail_writes:
            raise RuntimeError("disk full")
        self.writes.append(aggregate.day)
        metric = DailyMetric(
            day=aggregate.day,
            steps=aggregate.steps,
            active_energy_kcal=aggregate.active_energy_kcal,
            last_synced_at=synced_at,
        )
        self.metrics[aggregate.day] = metric
        return metric

    def seed(self, day: date, steps: int, active_energy_kcal: float = 0.0) -> None:
        self.metrics[day] = DailyMetric(
            day=day, steps=steps, active_energy_kcal=active_energy_kcal
        )


@dataclass
class InMemoryMealRepository(MealRepository):
    """In-memory meal repository for tests."""

    meals: dict[UUID, MealEntry] = field(default_factory=dict)

    def create_meal(self, meal: MealEntry) -> MealEntry:
        self.meals[meal.id] = meal
        return meal

    def list_meals(self, start: datetime, end: datetime) -> list[MealEntry]:
        return sorted(
            (meal for meal in self.meals.values() if start <= meal.logged_at < end),
            key=lambda meal: meal.logged_at,
            reverse=True,
        )

    def delete_meal(self, meal_id: UUID) -> bool:
        return self.meals.pop(meal_id, None) is not None


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="header.payload.signature",
        admin_token="admin-token",
        health_gateway_url="https://gateway.example.com",
        health_gateway_token="gateway-token",
        observe_updates=False,
    )


@pytest.fixture
def health_source() -> FakeHealthSource:
    return FakeHealthSource()


@pytest.fixture
def metric_store() -> InMemoryDailyMetricRepository:
    return InMemoryDailyMetricRepository()


@pytest.fixture
def meal_repository() -> InMemoryMealRepository:
    return InMemoryMealRepository()


@pytest.fixture
def metrics_repository(
    health_source: FakeHealthSource, metric_store: InMemoryDailyMetricRepository
) -> MetricsRepository:
    return MetricsRepository(source=health_source, store=metric_store)


@pytest.fixture
def container(
    settings: Settings,
    health_source: FakeHealthSource,
    metrics_repository: MetricsRepository,
    meal_repository: InMemoryMealRepository,
) -> AppContainer:
    updates_observer = HealthUpdatesObserver(
        client=health_source,
        metrics_repository=metrics_repository,
        poll_interval_seconds=0.01,
    )

    async def close_resources() -> None:
        await updates_observer.stop()
        await metrics_repository.close()

    return AppContainer(
        settings=settings,
        health_client=health_source,
        metrics_repository=metrics_repository,
        authorization_service=AuthorizationService(health_source),
        updates_observer=updates_observer,
        dashboard_service=DashboardService(
            metrics_repository=metrics_repository, goals=settings.goals()
        ),
        meal_service=MealService(repository=meal_repository),
        close_resources=close_resources,
    )


@pytest.fixture
def propagate_logs(monkeypatch: pytest.MonkeyPatch) -> None:
    """Let caplog see records from the application logger."""
    monkeypatch.setattr(logging.getLogger("health_tracker"), "propagate", True)
