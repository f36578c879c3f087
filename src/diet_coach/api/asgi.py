"""ASGI entrypoint for the diet coach API."""

from diet_coach.api.app import create_app
from diet_coach.containers import build_container

app = create_app(build_container())
