"""
AirMode API package.

Provides the FastAPI application for the AirMode flight diary service.
"""

from .app import app, create_app

__all__ = ["app", "create_app"]
