"""
API Routes.
"""

from . import documents, health

__all__ = ["health", "documents"]
