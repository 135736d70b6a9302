"""ASGI entrypoint for the cookery API."""

from cookery.api.app import create_app
from cookery.containers import build_container

app = create_app(build_container())
