"""FastAPI application factory."""

import logging
from collections.abc import Sequence

from fastapi import Depends, FastAPI, Header, HTTPException, Request, status

from kitchen_planner.api.schemas import (
    DishAdviceRequest,
    MealEvaluationRequest,
    WeeklyOrderRequest,
)
from kitchen_planner.app_logging import configure_logging
from kitchen_planner.containers import AppContainer
from kitchen_planner.domain.advice import DishAdvice
from kitchen_planner.domain.orders import WeeklyOrder
from kitchen_planner.domain.planning import (
    DAY_NAMES,
    MealType,
    PersonsByGroup,
    WeekPlan,
)
from kitchen_planner.domain.recipes import Dish
from kitchen_planner.services.advisor import rank_candidates, review_day
from kitchen_planner.services.catalogue import Catalogue
from kitchen_planner.services.plans import (
    WeekPlanPayload,
    plan_id_for,
    week_plan_from_payload,
    week_plan_to_payload,
)


def _container(request: Request) -> AppContainer:
    return request.app.state.container


async def require_api_token(
    request: Request, x_api_token: str | None = Header(default=None)
) -> None:
    """Ensure write requests include the configured API token."""
    expected = _container(request).settings.api_token
    if not x_api_token or x_api_token != expected:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    app = FastAPI()
    app.state.container = container

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/plans/{year}/{week}")
    async def get_plan(year: int, week: int, request: Request) -> dict[str, object]:
        """Return the stored plan for an ISO week, or an empty plan."""
        plan = _load_plan(_container(request), year, week)
        return {"plan_id": plan_id_for(year, week), "plan": week_plan_to_payload(plan)}

    @app.put("/plans/{year}/{week}", dependencies=[Depends(require_api_token)])
    async def put_plan(
        year: int, week: int, payload: WeekPlanPayload, request: Request
    ) -> dict[str, object]:
        """Store the plan for an ISO week."""
        state_container = _container(request)
        try:
            plan = state_container.week_plan_service.save_plan(year, week, payload)
        except ValueError as exc:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)
            ) from exc
        logger.info("Saved week plan %s", plan_id_for(year, week))
        return {"plan_id": plan_id_for(year, week), "plan": week_plan_to_payload(plan)}

    @app.get("/plans/{year}/{week}/order")
    async def plan_order(year: int, week: int, request: Request) -> dict[str, object]:
        """Return the supplier order for a stored plan."""
        state_container = _container(request)
        plan = _load_plan(state_container, year, week)
        return _order_response(state_container.order_service.weekly_order(plan))

    @app.get("/plans/{year}/{week}/balance")
    async def plan_balance(year: int, week: int, request: Request) -> dict[str, object]:
        """Return lunch and dinner reports plus a food-group review per day."""
        state_container = _container(request)
        plan = _load_plan(state_container, year, week)
        return {"days": _balance_by_day(state_container, plan)}

    @app.post("/orders/weekly")
    async def weekly_order(
        body: WeeklyOrderRequest, request: Request
    ) -> dict[str, object]:
        """Compute the supplier order for a submitted plan."""
        state_container = _container(request)
        try:
            plan = week_plan_from_payload(
                body.plan, body.week_start, state_container.settings.default_servings
            )
        except ValueError as exc:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)
            ) from exc
        return _order_response(state_container.order_service.weekly_order(plan))

    @app.post("/meals/evaluate")
    async def evaluate_meal(
        body: MealEvaluationRequest, request: Request
    ) -> dict[str, object]:
        """Evaluate one meal against its calorie target."""
        state_container = _container(request)
        persons = PersonsByGroup(
            adults=body.persons.adults,
            seniors=body.persons.seniors,
            children=body.persons.children,
        )
        report = state_container.meal_balance_service.evaluate_refs(
            body.meal_type, body.dish_ids, persons
        )
        return {"report": report}

    @app.post("/dishes/advice")
    async def dish_advice(
        body: DishAdviceRequest, request: Request
    ) -> dict[str, object]:
        """Rank candidate dishes against the dishes already chosen for a day."""
        catalogue = _container(request).catalogue
        candidates = _resolve_all(catalogue, body.candidate_ids)
        day_dishes = _resolve_all(catalogue, body.day_dish_ids)
        ranked = rank_candidates(candidates, day_dishes)
        return {
            "advice": [_advice_entry(dish, advice) for dish, advice in ranked],
            "day_review": review_day(day_dishes),
        }

    return app


def _load_plan(container: AppContainer, year: int, week: int) -> WeekPlan:
    try:
        return container.week_plan_service.get_plan(year, week)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)
        ) from exc


def _order_response(order: WeeklyOrder) -> dict[str, object]:
    return {"suppliers": order.by_supplier, "warnings": order.warnings}


def _balance_by_day(container: AppContainer, plan: WeekPlan) -> dict[str, object]:
    service = container.meal_balance_service
    days: dict[str, object] = {}
    for name, day in zip(DAY_NAMES, plan.days, strict=True):
        refs = day.refs_for(MealType.LUNCH) + day.refs_for(MealType.DINNER)
        dishes = _resolve_all(container.catalogue, refs)
        days[name] = {
            "lunch": service.evaluate_day_meal(day, MealType.LUNCH),
            "dinner": service.evaluate_day_meal(day, MealType.DINNER),
            "review": review_day(dishes),
        }
    return days


def _resolve_all(catalogue: Catalogue, refs: Sequence[str | None]) -> list[Dish]:
    resolved = (catalogue.resolve(ref) for ref in refs)
    return [dish for dish in resolved if dish is not None]


def _advice_entry(dish: Dish, advice: DishAdvice) -> dict[str, object]:
    return {
        "dish_id": dish.dish_id,
        "name": dish.name,
        "rating": advice.rating,
        "reasons": advice.reasons,
    }
