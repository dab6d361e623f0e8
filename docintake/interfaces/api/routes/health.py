"""
Health Routes - System health and status endpoints.
"""

from typing import Any

from fastapi import APIRouter

from docintake import __version__

from ..deps import ocr_status

router = APIRouter()


@router.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy", "service": "docintake"}


@router.get("/api")
async def api_info() -> dict[str, Any]:
    """API info endpoint."""
    return {
        "name": "docintake API",
        "version": __version__,
        "description": "Document text extraction and item analysis",
        "docs": "/docs",
        "ocr": await ocr_status(),
    }
