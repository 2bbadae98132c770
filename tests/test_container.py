"""Tests for container wiring."""

from kitchen_planner.config import Settings
from kitchen_planner.containers import build_container


def test_build_container_loads_bundled_catalogue(settings: Settings) -> None:
    container = build_container(settings)

    assert len(container.catalogue) == 7
    assert "Trout fillet" in container.metadata
    assert container.order_service.catalogue is container.catalogue
    assert container.week_plan_service.default_servings == 120
