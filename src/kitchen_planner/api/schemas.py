"""Pydantic request models for the planner API."""

from datetime import date

from pydantic import BaseModel, Field

from kitchen_planner.domain.planning import MealType
from kitchen_planner.services.plans import PersonsPayload, WeekPlanPayload


class MealEvaluationRequest(BaseModel):
    """Dishes served at one meal occasion."""

    meal_type: MealType
    dish_ids: list[str] = Field(default_factory=list)
    persons: PersonsPayload = Field(default_factory=PersonsPayload)


class DishAdviceRequest(BaseModel):
    """Candidate dishes to rate against the day so far."""

    candidate_ids: list[str]
    day_dish_ids: list[str] = Field(default_factory=list)


class WeeklyOrderRequest(BaseModel):
    """Ad-hoc plan to turn into an order without storing it."""

    week_start: date
    plan: WeekPlanPayload = Field(default_factory=WeekPlanPayload)
