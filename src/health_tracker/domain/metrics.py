"""Domain models for daily activity metrics."""

from dataclasses import dataclass
from datetime import date, datetime
from enum import StrEnum


class AuthorizationStatus(StrEnum):
    """Read-permission state reported by the health data source."""

    NOT_DETERMINED = "not_determined"
    GRANTED = "granted"
    DENIED = "denied"


@dataclass(frozen=True)
class DailyAggregate:
    """Step and active-energy totals for one day, as fetched from the source."""

    day: date
    steps: int
    active_energy_kcal: float

    @classmethod
    def zero(cls, day: date) -> "DailyAggregate":
        """Return an aggregate for a day the source had no data for."""
        return cls(day=day, steps=0, active_energy_kcal=0.0)


@dataclass(frozen=True)
class DailyMetric:
    """Cached daily metrics keyed by normalized day."""

    day: date
    steps: int
    active_energy_kcal: float
    last_synced_at: datetime | None = None


@dataclass(frozen=True)
class ChangeSet:
    """Incremental change feed page from the health data source."""

    anchor: str | None
    sample_count: int


@dataclass(frozen=True)
class SyncStatus:
    """Snapshot of the incremental update observer."""

    observing: bool
    anchor: str | None
    update_count: int
    last_synced_at: datetime | None
