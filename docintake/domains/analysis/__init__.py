"""
Analysis Domain - Classifier output to validated items.

This domain handles:
- Building the classification prompt
- Defensive validation of classifier JSON
- Primary category majority vote
"""

from .contracts import ClassificationOracle
from .models import (
    AnalysisConfig,
    AnalysisItem,
    AnalysisResult,
    ItemType,
    PrimaryCategory,
)
from .validator import derive_primary_category, validate_analysis_result
from .analyzer import DocumentAnalyzer, build_analysis_prompt

__all__ = [
    # Contracts
    "ClassificationOracle",
    # Models
    "AnalysisConfig",
    "AnalysisItem",
    "AnalysisResult",
    "ItemType",
    "PrimaryCategory",
    # Implementations
    "validate_analysis_result",
    "derive_primary_category",
    "DocumentAnalyzer",
    "build_analysis_prompt",
]
