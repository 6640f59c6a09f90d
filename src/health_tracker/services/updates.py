"""Incremental update observer for the health data source."""

import asyncio
import contextlib
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime

from health_tracker.adapters.health_gateway_client import HealthSourceClient
from health_tracker.domain.metrics import AuthorizationStatus, DailyMetric, SyncStatus
from health_tracker.services.metrics import MetricsRepository

_logger = logging.getLogger(__name__)

UpdateHandler = Callable[[list[DailyMetric]], None]


@dataclass
class HealthUpdatesObserver:
    """Polls the change feed and refreshes the current week when data changes.

    The anchor, counters and polling task live on the instance; nothing is
    shared between observers.
    """

    client: HealthSourceClient
    metrics_repository: MetricsRepository
    poll_interval_seconds: float = 60.0
    anchor: str | None = None
    update_count: int = 0
    last_synced_at: datetime | None = None
    _task: asyncio.Task[None] | None = field(default=None, repr=False)
    _on_update: UpdateHandler | None = field(default=None, repr=False)

    @property
    def observing(self) -> bool:
        """True while the polling loop is running."""
        return self._task is not None and not self._task.done()

    async def start(self, on_update: UpdateHandler | None = None) -> bool:
        """Start polling if read access has been granted."""
        if self.observing:
            return True
        status = await self.client.authorization_status()
        if status is not AuthorizationStatus.GRANTED:
            _logger.info("Not observing health updates: authorization is %s", status)
            return False
        self._on_update = on_update
        self._task = asyncio.get_running_loop().create_task(
            self._run(), name="health-updates-observer"
        )
        return True

    async def stop(self) -> None:
        """Stop polling and drop the update handler."""
        task = self._task
        self._task = None
        self._on_update = None
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task

    async def poll_once(self) -> list[DailyMetric] | None:
        """Read one page of changes; refresh the week if anything changed.

        The anchor only advances once the refresh has succeeded.
        """
        changes = await self.client.fetch_changes(self.anchor)
        if changes.sample_count <= 0:
            self.anchor = changes.anchor
            return None
        metrics = await self.metrics_repository.refresh_last_7_days()
        self.anchor = changes.anchor
        self.update_count += changes.sample_count
        self.last_synced_at = datetime.now(tz=UTC)
        if self._on_update is not None:
            self._on_update(metrics)
        return metrics

    def status(self) -> SyncStatus:
        """Return a snapshot for diagnostics."""
        return SyncStatus(
            observing=self.observing,
            anchor=self.anchor,
            update_count=self.update_count,
            last_synced_at=self.last_synced_at,
        )

    async def _run(self) -> None:
        while True:
            try:
                await self.poll_once()
            except Exception:
                _logger.exception("Health update poll failed")
            await asyncio.sleep(self.poll_interval_seconds)
