"""ASGI entrypoint for the drink tracker API."""

from drink_tracker.api.app import create_app
from drink_tracker.containers import build_container

app = create_app(build_container())
