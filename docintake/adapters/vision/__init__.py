"""
Vision Adapter - Google Cloud Vision OCR.

This is the ONLY place that calls the Cloud Vision API.
"""

from .client import CloudVisionClient
from .models import VisionConfig, VisionOCRResult

__all__ = [
    "CloudVisionClient",
    "VisionConfig",
    "VisionOCRResult",
]
