"""Purchase rounding, delivery scheduling and supplier grouping."""

import logging
import math
from dataclasses import dataclass

from kitchen_planner.config import Settings
from kitchen_planner.domain.orders import (
    AggregationResult,
    DeliveryDay,
    IngredientMeta,
    OrderItem,
    OrderLine,
    WeeklyOrder,
)
from kitchen_planner.domain.planning import WeekPlan
from kitchen_planner.services.catalogue import Catalogue
from kitchen_planner.services.ordering import HitEstimates, aggregate_weekly_order

SHORT_SHELF_LIFE_DAYS = 3
SHORT_SHELF_LIFE_BUFFER = 1.05
FREEZE_NOTE = "Freeze on arrival."

_SMALL_TIER_LIMIT_G = 100
_MEDIUM_TIER_LIMIT_G = 1000
_LARGE_TIER_LIMIT_G = 10000

_logger = logging.getLogger(__name__)


def round_to_packs(gross_g: float, pack_size_g: float) -> tuple[int, float]:
    """Return the pack count and ordered grams for a fixed pack size."""
    if gross_g <= 0:
        return 0, 0.0
    packs = math.ceil(round(gross_g / pack_size_g, 9))
    if packs * pack_size_g < gross_g:
        packs += 1
    return packs, packs * pack_size_g


def round_tiered_g(gross_g: float) -> float:
    """Round a requirement in grams up to a purchasable quantity.

    Below 100 g the next 10 g step is ordered, below 1 kg the next 0.5 kg,
    up to 10 kg the next full kilogram and above that the next 5 kg.
    """
    if gross_g <= 0:
        return 0.0
    if gross_g < _SMALL_TIER_LIMIT_G:
        # Always the next step, even on an exact multiple: 40 g orders 50 g.
        return float((math.floor(round(gross_g / 10, 9)) + 1) * 10)
    if gross_g < _MEDIUM_TIER_LIMIT_G:
        return _ceil_to_step(gross_g, 500)
    if gross_g <= _LARGE_TIER_LIMIT_G:
        return _ceil_to_step(gross_g, 1000)
    return _ceil_to_step(gross_g, 5000)


def round_tiered_kg(quantity_kg: float) -> float:
    """Tiered rounding for a quantity expressed in kilograms."""
    return round_tiered_g(quantity_kg * 1000) / 1000


def delivery_day_for(first_use_weekday: int) -> DeliveryDay:
    """Pick the delivery day covering the first use (Monday is 0).

    Short shelf lives do not move the delivery; they are buffered and frozen
    on arrival instead.
    """
    if first_use_weekday <= 2:
        return DeliveryDay.MONDAY
    if first_use_weekday <= 4:
        return DeliveryDay.WEDNESDAY
    return DeliveryDay.FRIDAY


def schedule_line(line: OrderLine, meta: IngredientMeta) -> OrderItem:
    """Buffer, round and schedule one aggregated order line."""
    gross_g = line.gross_required_g
    note = None
    if meta.shelf_life_days < SHORT_SHELF_LIFE_DAYS:
        gross_g *= SHORT_SHELF_LIFE_BUFFER
        note = FREEZE_NOTE

    pack_size_g = line.pack_size_g or meta.pack_size_g
    if pack_size_g:
        packs, order_qty_g = round_to_packs(gross_g, pack_size_g)
    else:
        packs, order_qty_g = 0, round_tiered_g(gross_g)

    return OrderItem(
        ingredient_id=line.ingredient_id,
        name=line.name,
        supplier=meta.supplier,
        net_required_g=line.net_required_g,
        gross_required_g=gross_g,
        order_qty_g=order_qty_g,
        delivery_day=delivery_day_for(line.first_use_weekday),
        packs=packs,
        pack_size_g=pack_size_g,
        allergens=meta.allergens,
        note=note,
    )


def build_weekly_order(
    aggregation: AggregationResult, metadata: dict[str, IngredientMeta]
) -> WeeklyOrder:
    """Schedule every aggregated line and group the items by supplier."""
    warnings = list(aggregation.warnings)
    grouped: dict[str, list[OrderItem]] = {}
    for ingredient_id, line in aggregation.lines.items():
        meta = metadata.get(ingredient_id)
        if meta is None:
            warnings.append(missing_metadata_warning(line))
            continue
        item = schedule_line(line, meta)
        grouped.setdefault(item.supplier, []).append(item)

    by_supplier = {
        supplier: sorted(grouped[supplier], key=lambda item: item.name.casefold())
        for supplier in sorted(grouped)
    }
    return WeeklyOrder(by_supplier=by_supplier, warnings=warnings)


def missing_metadata_warning(line: OrderLine) -> str:
    """Warning text for an ingredient without purchasing metadata."""
    label = line.name
    if line.ingredient_id != line.name:
        label = f"{line.name} ({line.ingredient_id})"
    return f"No order metadata found for {label}; it was left out of the order."


@dataclass
class OrderService:
    """Builds scheduled weekly orders from week plans."""

    settings: Settings
    catalogue: Catalogue
    metadata: dict[str, IngredientMeta]

    def weekly_order(self, plan: WeekPlan) -> WeeklyOrder:
        """Aggregate a week plan and turn it into a supplier order."""
        estimates = HitEstimates(
            lunch_hit_diners_per_day=self.settings.lunch_hit_diners_per_day,
            dinner_hit_diners_per_day=self.settings.dinner_hit_diners_per_day,
        )
        aggregation = aggregate_weekly_order(plan, self.catalogue, estimates)
        order = build_weekly_order(aggregation, self.metadata)
        for warning in order.warnings:
            _logger.warning("Weekly order %s: %s", plan.week_start, warning)
        return order


def _ceil_to_step(value: float, step: float) -> float:
    steps = math.ceil(round(value / step, 9))
    if steps * step < value:
        steps += 1
    return float(steps * step)
