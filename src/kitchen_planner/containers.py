"""Dependency container wiring for the application."""

from dataclasses import dataclass
from pathlib import Path

from supabase import create_client

from kitchen_planner.adapters.json_catalogue_source import JsonCatalogueSource
from kitchen_planner.adapters.supabase_week_plan_repository import (
    SupabaseWeekPlanRepository,
)
from kitchen_planner.config import Settings
from kitchen_planner.domain.orders import IngredientMeta
from kitchen_planner.services.balance import MealBalanceService
from kitchen_planner.services.catalogue import Catalogue
from kitchen_planner.services.plans import WeekPlanService
from kitchen_planner.services.purchasing import OrderService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    catalogue: Catalogue
    metadata: dict[str, IngredientMeta]
    week_plan_service: WeekPlanService
    meal_balance_service: MealBalanceService
    order_service: OrderService


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container.

    Raises ``CatalogueError`` when the data files are invalid, so the API
    never starts with a broken catalogue.
    """
    resolved_settings = settings or Settings()
    source = JsonCatalogueSource(Path(resolved_settings.data_dir))
    catalogue = source.load_catalogue()
    metadata = source.load_metadata()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    week_plan_service = WeekPlanService(
        repository=SupabaseWeekPlanRepository(supabase_client),
        catalogue=catalogue,
        default_servings=resolved_settings.default_servings,
    )
    return AppContainer(
        settings=resolved_settings,
        catalogue=catalogue,
        metadata=metadata,
        week_plan_service=week_plan_service,
        meal_balance_service=MealBalanceService(resolved_settings, catalogue),
        order_service=OrderService(resolved_settings, catalogue, metadata),
    )
