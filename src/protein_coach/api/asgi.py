"""ASGI entrypoint for the protein coach API."""

from protein_coach.api.app import create_app
from protein_coach.containers import build_container

app = create_app(build_container())
