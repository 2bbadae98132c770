"""Shared test fixtures."""

from dataclasses import dataclass, field
from pathlib import Path

import pytest

from kitchen_planner.config import Settings
from kitchen_planner.containers import AppContainer
from kitchen_planner.domain.orders import IngredientMeta
from kitchen_planner.domain.recipes import (
    FoodGroup,
    PerHundredGrams,
    PopulationGroup,
)
from kitchen_planner.services.balance import MealBalanceService
from kitchen_planner.services.catalogue import Catalogue, build_catalogue
from kitchen_planner.services.plans import WeekPlanRepository, WeekPlanService
from kitchen_planner.services.purchasing import OrderService
from tests.factories import make_dish, make_ingredient

DATA_DIR = Path(__file__).resolve().parents[1] / "data"


@dataclass
class InMemoryWeekPlanRepository(WeekPlanRepository):
    """In-memory week plan repository for tests."""

    payloads: dict[str, dict[str, object]] = field(default_factory=dict)
    saved: list[str] = field(default_factory=list)

    def get_payload(self, plan_id: str) -> dict[str, object] | None:
        return self.payloads.get(plan_id)

    def save_payload(self, plan_id: str, payload: dict[str, object]) -> None:
        self.payloads[plan_id] = payload
        self.saved.append(plan_id)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key=(
            "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9."
            "eyJyb2xlIjoic2VydmljZV9yb2xlIn0."
            "c2lnbmF0dXJl"
        ),
        api_token="api-token",
        data_dir=str(DATA_DIR),
    )


@pytest.fixture
def catalogue() -> Catalogue:
    return build_catalogue(
        [
            make_dish(
                "beef-stew",
                name="Beef stew",
                ingredients=(
                    make_ingredient("beef", 160, yield_factor=0.8),
                    make_ingredient("carrot", 40),
                ),
            ),
            make_dish(
                "carrot-soup",
                name="Carrot soup",
                food_group=FoodGroup.SOUP,
                nutrition=PerHundredGrams(kcal_per_100g=48),
                base_portion_g=250,
                portions={PopulationGroup.ADULTS: 250.0},
                ingredients=(make_ingredient("carrot", 150),),
            ),
            make_dish(
                "spelt-risotto",
                name="Spelt risotto",
                food_group=FoodGroup.STARCH,
                is_whole_grain=True,
                ingredients=(make_ingredient("spelt", 90),),
            ),
            make_dish(
                "green-salad",
                name="Green salad",
                food_group=FoodGroup.VEGETABLE,
                ingredients=(make_ingredient("lettuce", 80, yield_factor=0.5),),
            ),
        ]
    )


@pytest.fixture
def metadata() -> dict[str, IngredientMeta]:
    return {
        "beef": IngredientMeta(supplier="Bernet AG", shelf_life_days=4),
        "carrot": IngredientMeta(supplier="Safruits AG", shelf_life_days=10),
        "spelt": IngredientMeta(
            supplier="Saviva Grosshandel",
            shelf_life_days=365,
            pack_size_g=5000,
            allergens=("gluten",),
        ),
        "lettuce": IngredientMeta(supplier="Safruits AG", shelf_life_days=2),
    }


@pytest.fixture
def week_plan_repository() -> InMemoryWeekPlanRepository:
    return InMemoryWeekPlanRepository()


@pytest.fixture
def container(
    settings: Settings,
    catalogue: Catalogue,
    metadata: dict[str, IngredientMeta],
    week_plan_repository: InMemoryWeekPlanRepository,
) -> AppContainer:
    return AppContainer(
        settings=settings,
        catalogue=catalogue,
        metadata=metadata,
        week_plan_service=WeekPlanService(
            repository=week_plan_repository,
            catalogue=catalogue,
            default_servings=settings.default_servings,
        ),
        meal_balance_service=MealBalanceService(settings, catalogue),
        order_service=OrderService(settings, catalogue, metadata),
    )
