"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import date
from uuid import UUID

from fastapi import FastAPI, HTTPException, Request, Response, status

from health_tracker.api.admin import router as admin_router
from health_tracker.api.models import MealCreateRequest, RefreshRequest
from health_tracker.api.serializers import (
    serialize_dashboard,
    serialize_meal,
    serialize_metric,
    serialize_metrics,
    serialize_totals,
)
from health_tracker.app_logging import configure_logging
from health_tracker.containers import AppContainer
from health_tracker.services.authorization import AuthorizationService
from health_tracker.services.meals import MealForm, MealValidationError, goal_progress
from health_tracker.services.metrics import FetchError


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        state_container: AppContainer = app.state.container
        if state_container.settings.observe_updates:
            try:
                await state_container.updates_observer.start()
            except Exception:
                logger.exception("Failed to start health update observer")
        yield
        await state_container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(admin_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/metrics/today")
    async def metrics_today(request: Request) -> dict[str, object]:
        """Return today's cached metrics; a refresh runs in the background."""
        state_container: AppContainer = request.app.state.container
        metric = await state_container.metrics_repository.get_today()
        return {"metric": serialize_metric(metric)}

    @app.get("/metrics/week")
    async def metrics_week(request: Request) -> dict[str, object]:
        """Return cached metrics for the last seven days."""
        state_container: AppContainer = request.app.state.container
        metrics = await state_container.metrics_repository.get_last_7_days()
        return {"metrics": serialize_metrics(metrics)}

    @app.get("/metrics/days/{day}")
    async def metrics_for_day(day: date, request: Request) -> dict[str, object]:
        """Return cached metrics for a specific day."""
        state_container: AppContainer = request.app.state.container
        metric = await state_container.metrics_repository.get_metrics_for_day(day)
        return {"metric": serialize_metric(metric)}

    @app.post("/metrics/refresh")
    async def metrics_refresh(
        request: Request, payload: RefreshRequest | None = None
    ) -> dict[str, object]:
        """Fetch days from the health source and update the cache."""
        state_container: AppContainer = request.app.state.container
        repository = state_container.metrics_repository
        try:
            if payload is not None and payload.days:
                metrics = await repository.refresh_days(list(payload.days))
            else:
                metrics = await repository.refresh_last_7_days()
        except FetchError as exc:
            logger.warning("Explicit metrics refresh failed: %s", exc.__cause__)
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)
            ) from exc
        return {"metrics": serialize_metrics(metrics)}

    @app.get("/dashboard")
    async def dashboard(request: Request) -> dict[str, object]:
        """Return the activity dashboard from cached data."""
        state_container: AppContainer = request.app.state.container
        summary = await state_container.dashboard_service.load()
        return serialize_dashboard(summary)

    @app.post("/dashboard/refresh")
    async def dashboard_refresh(request: Request) -> dict[str, object]:
        """Refresh the current week, then return the dashboard."""
        state_container: AppContainer = request.app.state.container
        try:
            summary = await state_container.dashboard_service.refresh()
        except FetchError as exc:
            logger.warning("Dashboard refresh failed: %s", exc.__cause__)
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)
            ) from exc
        return serialize_dashboard(summary)

    @app.get("/authorization")
    async def authorization_status(request: Request) -> dict[str, object]:
        """Return the health data read-permission state."""
        state_container: AppContainer = request.app.state.container
        current = await state_container.authorization_service.get_status()
        return {
            "status": current.value,
            "limited_mode": AuthorizationService.is_limited_mode(current),
        }

    @app.post("/authorization/request")
    async def authorization_request(request: Request) -> dict[str, object]:
        """Request read permission, starting update observation when granted."""
        state_container: AppContainer = request.app.state.container
        result = await state_container.authorization_service.request()
        if state_container.settings.observe_updates:
            await state_container.updates_observer.start()
        return {
            "status": result.value,
            "limited_mode": AuthorizationService.is_limited_mode(result),
        }

    @app.get("/meals")
    async def list_meals(request: Request, day: date | None = None) -> dict[str, object]:
        """Return meals logged on a day, newest first."""
        state_container: AppContainer = request.app.state.container
        meals = state_container.meal_service.list_meals(day)
        return {"meals": [serialize_meal(meal) for meal in meals]}

    @app.post("/meals", status_code=status.HTTP_201_CREATED)
    async def create_meal(
        payload: MealCreateRequest, request: Request
    ) -> dict[str, object]:
        """Log a meal from form input."""
        state_container: AppContainer = request.app.state.container
        form = MealForm(
            name=payload.name,
            calories=payload.calories,
            protein=payload.protein,
            carbs=payload.carbs,
            fat=payload.fat,
        )
        try:
            meal = state_container.meal_service.log_meal(form)
        except MealValidationError as exc:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)
            ) from exc
        return {"meal": serialize_meal(meal)}

    @app.delete("/meals/{meal_id}", status_code=status.HTTP_204_NO_CONTENT)
    async def delete_meal(meal_id: UUID, request: Request) -> Response:
        """Delete a logged meal."""
        state_container: AppContainer = request.app.state.container
        if not state_container.meal_service.delete_meal(meal_id):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    @app.get("/meals/totals")
    async def meal_totals(
        request: Request, day: date | None = None
    ) -> dict[str, object]:
        """Return a day's nutrition totals against goals."""
        state_container: AppContainer = request.app.state.container
        totals = state_container.meal_service.daily_totals(day)
        progress = goal_progress(totals, state_container.settings.goals())
        return serialize_totals(totals, progress)

    return app
