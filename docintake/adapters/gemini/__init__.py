"""
Gemini Adapter - Google Gemini API client.

This is the ONLY place that calls the Gemini API.
"""

from .client import GeminiAPIError, GeminiClient, RateLimitError
from .models import GeminiConfig, GeminiResponse

__all__ = [
    "GeminiClient",
    "GeminiConfig",
    "GeminiResponse",
    "GeminiAPIError",
    "RateLimitError",
]
