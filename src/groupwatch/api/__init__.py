"""REST API - FastAPI application exposing the dashboard."""

from groupwatch.api.app import create_app

__all__ = ["create_app"]
