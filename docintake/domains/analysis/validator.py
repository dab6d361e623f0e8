"""
Analysis Validator - Salvage a typed AnalysisResult from classifier JSON.

The classifier is an LLM and its output is untrusted. A malformed item is
dropped on its own instead of failing the whole result; only the top-level
fields are load-bearing. ``primaryCategory`` is always recomputed here.
"""

from __future__ import annotations

import logging
import math
from collections import Counter
from collections.abc import Mapping, Sequence
from typing import Any

from pydantic import ValidationError

from .models import AnalysisItem, AnalysisResult, ItemType, PrimaryCategory

logger = logging.getLogger(__name__)

__all__ = ["validate_analysis_result", "derive_primary_category"]

DEFAULT_ITEM_CONFIDENCE = 50.0

_TYPE_CATEGORIES = {
    ItemType.MEAL: PrimaryCategory.MEALS,
    ItemType.WORKOUT: PrimaryCategory.WORKOUTS,
    ItemType.ROUTINE: PrimaryCategory.ROUTINES,
    ItemType.CALENDAR: PrimaryCategory.CALENDAR,
}

_DESTINATION_CATEGORIES = {
    "nutrition": PrimaryCategory.MEALS,
    "meals": PrimaryCategory.MEALS,
    "workout": PrimaryCategory.WORKOUTS,
    "workouts": PrimaryCategory.WORKOUTS,
    "fitness": PrimaryCategory.WORKOUTS,
    "routine": PrimaryCategory.ROUTINES,
    "routines": PrimaryCategory.ROUTINES,
    "calendar": PrimaryCategory.CALENDAR,
    "schedule": PrimaryCategory.CALENDAR,
}


def _is_number(value: Any) -> bool:
    # bool is an int subclass but never a confidence
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


def _clamp(value: float) -> float:
    return max(0.0, min(100.0, float(value)))


def _item_confidence(value: Any) -> float:
    if _is_number(value):
        return _clamp(value)
    if isinstance(value, str):
        try:
            parsed = float(value.strip())
        except ValueError:
            return DEFAULT_ITEM_CONFIDENCE
        if math.isfinite(parsed):
            return _clamp(parsed)
    return DEFAULT_ITEM_CONFIDENCE


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _parse_item(raw: Any) -> AnalysisItem | None:
    if not isinstance(raw, Mapping):
        return None

    item_id = _text(raw.get("id"))
    title = _text(raw.get("title"))
    type_name = _text(raw.get("itemType")).lower()
    if not item_id or not title or not type_name:
        return None

    try:
        item_type = ItemType(type_name)
    except ValueError:
        logger.debug("Dropping item %s with unknown type %r", item_id, type_name)
        return None

    details = raw.get("details")
    try:
        return AnalysisItem(
            id=item_id,
            item_type=item_type,
            title=title,
            description=_text(raw.get("description")),
            details=(
                {str(key): value for key, value in details.items()}
                if isinstance(details, Mapping)
                else {}
            ),
            destination_system=_text(raw.get("destinationSystem")),
            confidence=_item_confidence(raw.get("confidence")),
            is_selected=raw.get("isSelected") is not False,
        )
    except ValidationError as e:
        logger.debug("Dropping item %s: %s", item_id, e)
        return None


def _item_category(item: AnalysisItem) -> PrimaryCategory | None:
    category = _TYPE_CATEGORIES.get(item.item_type)
    if category is None:
        category = _DESTINATION_CATEGORIES.get(item.destination_system.lower())
    return category


def derive_primary_category(
    items: Sequence[AnalysisItem],
    threshold: float = 0.6,
) -> PrimaryCategory:
    """
    Majority vote over item categories.

    Each item counts toward at most one category, by type first and
    destination second. The leading category wins when its share of all
    items reaches ``threshold``; otherwise the document is ``mixed``.

    Example:
        >>> derive_primary_category(four_meals_two_workouts)
        <PrimaryCategory.MEALS: 'meals'>
    """
    if not items:
        return PrimaryCategory.MIXED

    votes = Counter(
        category for category in map(_item_category, items) if category is not None
    )
    if not votes:
        return PrimaryCategory.MIXED

    category, count = votes.most_common(1)[0]
    if count / len(items) >= threshold:
        return category
    return PrimaryCategory.MIXED


def validate_analysis_result(
    raw: Any,
    majority_threshold: float = 0.6,
) -> AnalysisResult | None:
    """
    Build an AnalysisResult from untrusted classifier output.

    Never raises. Returns None when the payload lacks a usable shape:
    ``documentTitle`` and ``summary`` must be non-empty strings,
    ``confidence`` a number and ``items`` a list. Individual malformed items
    are dropped.
    """
    if not isinstance(raw, Mapping):
        logger.warning("Analysis payload is %s, not an object", type(raw).__name__)
        return None

    title = raw.get("documentTitle")
    summary = raw.get("summary")
    confidence = raw.get("confidence")
    raw_items = raw.get("items")

    if not isinstance(title, str) or not title.strip():
        logger.warning("Analysis payload missing documentTitle")
        return None
    if not isinstance(summary, str) or not summary.strip():
        logger.warning("Analysis payload missing summary")
        return None
    if not _is_number(confidence):
        logger.warning("Analysis payload confidence is not numeric: %r", confidence)
        return None
    if not isinstance(raw_items, list):
        logger.warning("Analysis payload items is not a list")
        return None

    try:
        items = [item for item in map(_parse_item, raw_items) if item is not None]
        dropped = len(raw_items) - len(items)
        if dropped:
            logger.info("Dropped %d of %d malformed analysis items", dropped, len(raw_items))

        questions = raw.get("clarifyingQuestions")
        return AnalysisResult(
            document_title=title,
            summary=summary,
            confidence=_clamp(confidence),
            items=items,
            primary_category=derive_primary_category(items, majority_threshold),
            clarifying_questions=(
                [str(q) for q in questions] if isinstance(questions, list) else None
            ),
        )
    except Exception:
        logger.exception("Unexpected error validating analysis payload")
        return None
