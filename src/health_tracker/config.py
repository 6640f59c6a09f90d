"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

from health_tracker.domain.goals import HealthGoals

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    admin_token: str
    health_gateway_url: str
    health_gateway_token: str
    timezone: str = "UTC"
    updates_poll_interval_seconds: float = 60.0
    observe_updates: bool = True
    log_level: str = "INFO"
    step_goal: int = 10000
    active_energy_goal_kcal: float = 600.0
    calorie_goal: int = 2400
    protein_goal_g: float = 180.0
    carbs_goal_g: float = 250.0
    fat_goal_g: float = 70.0
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    def goals(self) -> HealthGoals:
        """Return activity and nutrition goals from settings."""
        return HealthGoals(
            step_goal=self.step_goal,
            active_energy_goal_kcal=self.active_energy_goal_kcal,
            calorie_goal=self.calorie_goal,
            protein_goal_g=self.protein_goal_g,
            carbs_goal_g=self.carbs_goal_g,
            fat_goal_g=self.fat_goal_g,
        )
