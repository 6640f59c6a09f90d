"""Supabase repository for cached daily metrics."""

from dataclasses import dataclass
from datetime import date, datetime

from supabase import Client

from health_tracker.domain.metrics import DailyAggregate, DailyMetric
from health_tracker.services.metrics import DailyMetricRepository

_COLUMNS = "day, steps, active_energy_kcal, last_synced_at"


@dataclass
class SupabaseDailyMetricRepository(DailyMetricRepository):
    """Supabase implementation for the daily metrics cache."""

    client: Client

    def get_daily_metric(self, day: date) -> DailyMetric | None:
        """Return the cached row for a day."""
        response = (
            self.client.table("daily_metrics")
            .select(_COLUMNS)
            .eq("day", day.isoformat())
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_row(response.data[0])

    def list_daily_metrics(self, days: list[date]) -> list[DailyMetric]:
        """Return cached rows for the requested days."""
        if not days:
            return []
        response = (
            self.client.table("daily_metrics")
            .select(_COLUMNS)
            .in_("day", [day.isoformat() for day in days])
            .order("day", desc=False)
            .execute()
        )
        return [_parse_row(row) for row in response.data or []]

    def upsert_daily_metric(
        self, aggregate: DailyAggregate, synced_at: datetime
    ) -> DailyMetric:
        """Update the row for the aggregate's day in place, or insert it."""
        values = {
            "steps": aggregate.steps,
            "active_energy_kcal": aggregate.active_energy_kcal,
            "last_synced_at": synced_at.isoformat(),
        }
        if self.get_daily_metric(aggregate.day) is not None:
            self.client.table("daily_metrics").update(values).eq(
                "day", aggregate.day.isoformat()
            ).execute()
        else:
            response = (
                self.client.table("daily_metrics")
                .insert({"day": aggregate.day.isoformat(), **values})
                .execute()
            )
            if not response.data:
                raise RuntimeError("Failed to create daily metric")
        return DailyMetric(
            day=aggregate.day,
            steps=aggregate.steps,
            active_energy_kcal=aggregate.active_energy_kcal,
            last_synced_at=synced_at,
        )


def _parse_row(row: dict[str, object]) -> DailyMetric:
    synced_raw = row.get("last_synced_at")
    return DailyMetric(
        day=date.fromisoformat(str(row["day"])[:10]),
        steps=int(row.get("steps") or 0),
        active_energy_kcal=float(row.get("active_energy_kcal") or 0.0),
        last_synced_at=(
            datetime.fromisoformat(synced_raw)
            if isinstance(synced_raw, str) and synced_raw
            else None
        ),
    )
