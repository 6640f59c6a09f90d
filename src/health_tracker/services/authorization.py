"""Health data read-permission service."""

from dataclasses import dataclass

from health_tracker.adapters.health_gateway_client import HealthSourceClient
from health_tracker.domain.metrics import AuthorizationStatus


@dataclass
class AuthorizationService:
    """Exposes the source's authorization state without guessing it."""

    client: HealthSourceClient

    async def get_status(self) -> AuthorizationStatus:
        """Return the current read-permission state."""
        return await self.client.authorization_status()

    async def request(self) -> AuthorizationStatus:
        """Request read permission and return the resulting state."""
        return await self.client.request_authorization()

    @staticmethod
    def is_limited_mode(status: AuthorizationStatus) -> bool:
        """Return True when the app must run without health data."""
        return status is AuthorizationStatus.DENIED
