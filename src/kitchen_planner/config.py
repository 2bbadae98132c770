"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

from kitchen_planner.domain.balance import AmpelConfig
from kitchen_planner.domain.planning import MealType

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    api_token: str
    data_dir: str = "data"
    environment: str = _ENVIRONMENT
    log_level: str = "INFO"

    daily_kcal_min: float = 1700
    daily_kcal_max: float = 2000
    lunch_kcal_share: float = 0.6
    dinner_kcal_share: float = 0.4
    ampel_green_threshold: float = 0.10
    ampel_yellow_threshold: float = 0.25

    default_servings: int = 120
    lunch_hit_diners_per_day: int = 20
    dinner_hit_diners_per_day: int = 15

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    def meal_target_kcal(self, meal_type: MealType) -> float:
        """Return the per-person kcal target for a meal type."""
        daily_avg = round((self.daily_kcal_min + self.daily_kcal_max) / 2)
        share = (
            self.lunch_kcal_share
            if meal_type is MealType.LUNCH
            else self.dinner_kcal_share
        )
        return round(daily_avg * share)

    def ampel_config(self, meal_type: MealType) -> AmpelConfig:
        """Build the Ampel configuration for a meal type."""
        return AmpelConfig(
            meal_target_kcal_per_person=self.meal_target_kcal(meal_type),
            green_threshold=self.ampel_green_threshold,
            yellow_threshold=self.ampel_yellow_threshold,
        )
