"""
Analysis Models - Validated classification of a document's items.

Field names are snake_case in Python and camelCase on the wire, matching
the classifier payload (``itemType``, ``destinationSystem``, ...).
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ItemType(str, Enum):
    """Kind of item found in a document."""

    MEAL = "meal"
    WORKOUT = "workout"
    ROUTINE = "routine"
    CALENDAR = "calendar"
    PLAN = "plan"


class PrimaryCategory(str, Enum):
    """Best-fit label for a whole document."""

    MEALS = "meals"
    WORKOUTS = "workouts"
    ROUTINES = "routines"
    CALENDAR = "calendar"
    MIXED = "mixed"


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AnalysisItem(_CamelModel):
    """A single importable item (meal, workout, ...)."""

    id: str
    item_type: ItemType
    title: str
    description: str = ""
    details: dict[str, Any] = Field(default_factory=dict)
    destination_system: str = ""
    confidence: float = Field(default=50.0, ge=0.0, le=100.0)
    is_selected: bool = True


class AnalysisResult(_CamelModel):
    """Validated classifier output for one document."""

    document_title: str
    summary: str
    confidence: float
    items: list[AnalysisItem] = Field(default_factory=list)
    primary_category: PrimaryCategory = PrimaryCategory.MIXED
    clarifying_questions: list[str] | None = None

    @property
    def item_count(self) -> int:
        return len(self.items)

    @property
    def selected_items(self) -> list[AnalysisItem]:
        return [item for item in self.items if item.is_selected]


class AnalysisConfig(BaseModel):
    """Settings for document analysis."""

    max_prompt_chars: int = Field(default=30000, ge=1)
    majority_threshold: float = Field(default=0.6, gt=0.0, le=1.0)

    model_config = {"frozen": True}
