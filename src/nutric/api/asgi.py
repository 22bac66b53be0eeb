"""ASGI entrypoint for the nutric API."""

from nutric.api.app import create_app
from nutric.containers import build_container

app = create_app(build_container())
