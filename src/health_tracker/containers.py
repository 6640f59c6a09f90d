"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from health_tracker.adapters.health_gateway_client import (
    HealthSourceClient,
    HttpxHealthGatewayClient,
)
from health_tracker.adapters.supabase_daily_metric_repository import (
    SupabaseDailyMetricRepository,
)
from health_tracker.adapters.supabase_meal_repository import SupabaseMealRepository
from health_tracker.config import Settings
from health_tracker.dates import resolve_timezone
from health_tracker.services.authorization import AuthorizationService
from health_tracker.services.dashboard import DashboardService
from health_tracker.services.meals import MealService
from health_tracker.services.metrics import MetricsRepository
from health_tracker.services.updates import HealthUpdatesObserver


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    health_client: HealthSourceClient
    metrics_repository: MetricsRepository
    authorization_service: AuthorizationService
    updates_observer: HealthUpdatesObserver
    dashboard_service: DashboardService
    meal_service: MealService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    timezone = resolve_timezone(resolved_settings.timezone)
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    health_client = HttpxHealthGatewayClient.create(
        base_url=resolved_settings.health_gateway_url,
        token=resolved_settings.health_gateway_token,
        timezone_name=timezone.key,
    )
    metrics_repository = MetricsRepository(
        source=health_client,
        store=SupabaseDailyMetricRepository(supabase_client),
        timezone=timezone,
    )
    updates_observer = HealthUpdatesObserver(
        client=health_client,
        metrics_repository=metrics_repository,
        poll_interval_seconds=resolved_settings.updates_poll_interval_seconds,
    )
    dashboard_service = DashboardService(
        metrics_repository=metrics_repository,
        goals=resolved_settings.goals(),
    )
    meal_service = MealService(
        repository=SupabaseMealRepository(supabase_client),
        timezone=timezone,
    )

    async def close_resources() -> None:
        await updates_observer.stop()
        await metrics_repository.close()
        await health_client.close()

    return AppContainer(
        settings=resolved_settings,
        health_client=health_client,
        metrics_repository=metrics_repository,
        authorization_service=AuthorizationService(health_client),
        updates_observer=updates_observer,
        dashboard_service=dashboard_service,
        meal_service=meal_service,
        close_resources=close_resources,
    )
