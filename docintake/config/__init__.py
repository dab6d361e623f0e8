"""
Configuration - Application settings and error taxonomy.
"""

from .errors import (
    ErrorCode,
    IntakeError,
    LLMError,
    ProcessingError,
    VisionError,
    is_processing_error,
)
from .settings import Settings, get_settings

__all__ = [
    # Settings
    "Settings",
    "get_settings",
    # Errors
    "ErrorCode",
    "IntakeError",
    "ProcessingError",
    "VisionError",
    "LLMError",
    "is_processing_error",
]
