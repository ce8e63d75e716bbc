"""ASGI entrypoint for the McNutrition API."""

from mcnutrition.api.app import create_app
from mcnutrition.containers import build_container

app = create_app(build_container())
