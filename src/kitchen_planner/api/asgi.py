"""ASGI entrypoint for the kitchen planner API."""

from kitchen_planner.api.app import create_app
from kitchen_planner.config import Settings
from kitchen_planner.containers import build_container

settings = Settings()
app = create_app(build_container(settings))
