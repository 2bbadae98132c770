"""Domain models for ingredient orders."""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum


class DeliveryDay(str, Enum):
    """Supplier delivery days."""

    MONDAY = "monday"
    WEDNESDAY = "wednesday"
    FRIDAY = "friday"


@dataclass(frozen=True)
class IngredientMeta:
    """Purchasing metadata for one ingredient."""

    supplier: str
    shelf_life_days: int
    pack_size_g: float | None = None
    allergens: tuple[str, ...] = ()


@dataclass(frozen=True)
class OrderLine:
    """Accumulated demand for one ingredient over the week."""

    ingredient_id: str
    name: str
    category_key: str
    net_required_g: float
    gross_required_g: float
    first_use_date: date
    first_use_weekday: int
    pack_size_g: float | None = None


@dataclass(frozen=True)
class OrderItem:
    """Order line after rounding and delivery scheduling."""

    ingredient_id: str
    name: str
    supplier: str
    net_required_g: float
    gross_required_g: float
    order_qty_g: float
    delivery_day: DeliveryDay
    packs: int = 0
    pack_size_g: float | None = None
    allergens: tuple[str, ...] = ()
    note: str | None = None


@dataclass(frozen=True)
class AggregationResult:
    """Per-ingredient demand plus recoverable warnings."""

    lines: dict[str, OrderLine]
    warnings: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class WeeklyOrder:
    """Scheduled order items grouped by supplier."""

    by_supplier: dict[str, list[OrderItem]]
    warnings: list[str] = field(default_factory=list)

    def items(self) -> list[OrderItem]:
        """Return all order items across suppliers."""
        return [item for items in self.by_supplier.values() for item in items]
