"""
API Interface - FastAPI REST API.

Thin upload surface over the ingestion and analysis domains.
"""

from .main import app, create_app

__all__ = ["app", "create_app"]
