"""Admin diagnostics endpoints with simple token auth."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Header, HTTPException, Query, Request, status

from health_tracker.api.serializers import serialize_metrics, serialize_sync_status
from health_tracker.dates import recent_days, today

if TYPE_CHECKING:
    from health_tracker.containers import AppContainer

router = APIRouter(prefix="/admin", tags=["admin"])


def _get_admin_token(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.admin_token


async def require_admin(
    x_admin_token: str | None = Header(default=None),
    admin_token: str = Depends(_get_admin_token),
) -> None:
    """Ensure requests include a valid admin token."""
    if not x_admin_token or x_admin_token != admin_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


@router.get("/health", dependencies=[Depends(require_admin)])
async def admin_health() -> dict[str, str]:
    """Admin health check endpoint."""
    return {"status": "ok"}


@router.get("/sync", dependencies=[Depends(require_admin)])
async def sync_status(request: Request) -> dict[str, object]:
    """Return update observer state and pending background refreshes."""
    container: AppContainer = request.app.state.container
    return serialize_sync_status(
        container.updates_observer.status(),
        container.metrics_repository.background.pending,
    )


@router.get("/metrics", dependencies=[Depends(require_admin)])
async def cached_metrics(
    request: Request, days: int = Query(default=7, ge=1, le=31)
) -> dict[str, object]:
    """Return cached rows with sync timestamps, without refreshing them."""
    container: AppContainer = request.app.state.container
    repository = container.metrics_repository
    window = recent_days(today(repository.timezone), days)
    metrics = sorted(
        repository.store.list_daily_metrics(window), key=lambda metric: metric.day
    )
    return {"metrics": serialize_metrics(metrics)}
