"""ASGI entrypoint for the fitting room API."""

from fitting_room.api.app import create_app
from fitting_room.containers import build_container

app = create_app(build_container())
