"""HTTP service mode for the project content gateway."""

from .app import create_app, run_service

__all__ = ["create_app", "run_service"]
