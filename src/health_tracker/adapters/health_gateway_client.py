"""Health data gateway API client."""

from dataclasses import dataclass
from datetime import date
from typing import Protocol

import httpx

from health_tracker.domain.metrics import AuthorizationStatus, ChangeSet, DailyAggregate

_UNAUTHORIZED_STATUS_CODES = {401, 403}


class HealthSourceClient(Protocol):
    """Interface for the platform health data source."""

    async def fetch_daily_aggregate(self, day: date) -> DailyAggregate | None:
        """Return step and energy totals for a day, or None when absent."""

    async def fetch_daily_aggregates(self, days: list[date]) -> list[DailyAggregate]:
        """Return totals for the days that have data; missing days are omitted."""

    async def authorization_status(self) -> AuthorizationStatus:
        """Return the current read-permission state."""

    async def request_authorization(self) -> AuthorizationStatus:
        """Ask for read permission and return the resulting state."""

    async def fetch_changes(self, anchor: str | None) -> ChangeSet:
        """Return samples added since ``anchor`` and the next anchor."""


@dataclass
class HttpxHealthGatewayClient(HealthSourceClient):
    """HTTPX-backed health gateway client."""

    base_url: str
    token: str
    timezone_name: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(
        cls, base_url: str, token: str, timezone_name: str = "UTC"
    ) -> "HttpxHealthGatewayClient":
        """Create a gateway client with a managed httpx session."""
        return cls(
            base_url=base_url.rstrip("/"),
            token=token,
            timezone_name=timezone_name,
            http_client=httpx.AsyncClient(),
        )

    async def fetch_daily_aggregate(self, day: date) -> DailyAggregate | None:
        """Fetch totals for a single day."""
        aggregates = await self.fetch_daily_aggregates([day])
        for aggregate in aggregates:
            if aggregate.day == day:
                return aggregate
        return None

    async def fetch_daily_aggregates(self, days: list[date]) -> list[DailyAggregate]:
        """Fetch totals for several days in one request."""
        if not days:
            return []
        response = await self.http_client.get(
            f"{self.base_url}/v1/aggregates/daily",
            params={
                "days": ",".join(day.isoformat() for day in days),
                "tz": self.timezone_name,
            },
            headers=self._headers(),
            timeout=15,
        )
        if response.status_code in _UNAUTHORIZED_STATUS_CODES:
            return []
        response.raise_for_status()
        payload = response.json()
        return [_parse_aggregate(row) for row in payload.get("days") or []]

    async def authorization_status(self) -> AuthorizationStatus:
        """Return the read-permission state known to the gateway."""
        response = await self.http_client.get(
            f"{self.base_url}/v1/authorization",
            headers=self._headers(),
            timeout=10,
        )
        response.raise_for_status()
        return _parse_status(response.json())

    async def request_authorization(self) -> AuthorizationStatus:
        """Ask the gateway to request read permission."""
        response = await self.http_client.post(
            f"{self.base_url}/v1/authorization",
            json={"read": ["steps", "active_energy"]},
            headers=self._headers(),
            timeout=10,
        )
        response.raise_for_status()
        return _parse_status(response.json())

    async def fetch_changes(self, anchor: str | None) -> ChangeSet:
        """Read the incremental change feed."""
        params = {"anchor": anchor} if anchor else {}
        response = await self.http_client.get(
            f"{self.base_url}/v1/changes",
            params=params,
            headers=self._headers(),
            timeout=15,
        )
        response.raise_for_status()
        payload = response.json()
        return ChangeSet(
            anchor=payload.get("anchor") or anchor,
            sample_count=int(payload.get("samples") or 0),
        )

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()

    def _headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"}


def _parse_aggregate(row: dict[str, object]) -> DailyAggregate:
    return DailyAggregate(
        day=date.fromisoformat(str(row["date"])),
        steps=max(int(row.get("steps") or 0), 0),
        active_energy_kcal=max(float(row.get("active_energy_kcal") or 0.0), 0.0),
    )


def _parse_status(payload: dict[str, object]) -> AuthorizationStatus:
    try:
        return AuthorizationStatus(str(payload.get("status")))
    except ValueError:
        return AuthorizationStatus.NOT_DETERMINED
