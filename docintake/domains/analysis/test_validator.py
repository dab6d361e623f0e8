"""
Tests for analysis result validation and the category vote.
"""

from __future__ import annotations

from typing import Any
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from .models import AnalysisItem, ItemType, PrimaryCategory
from .validator import derive_primary_category, validate_analysis_result


def _item(index: int, item_type: str = "meal", **extra: Any) -> dict[str, Any]:
    return {"id": f"item-{index}", "itemType": item_type, "title": f"Item {index}", **extra}


def _payload(items: list[Any], **extra: Any) -> dict[str, Any]:
    return {
        "documentTitle": "4-Week Reset",
        "summary": "Meal prep and training plan.",
        "confidence": 82,
        "items": items,
        **extra,
    }


# --- Top-level shape ---


@pytest.mark.parametrize(
    "raw",
    [
        None,
        [],
        "not json",
        _payload([], documentTitle=""),
        _payload([], documentTitle=42),
        _payload([], summary=None),
        _payload([], confidence="82"),
        _payload([], confidence=True),
        _payload([], confidence=float("nan")),
        _payload({"0": _item(0)}),
    ],
)
def test_unusable_payload_returns_none(raw: Any) -> None:
    """Test load-bearing fields reject the payload without raising."""
    assert validate_analysis_result(raw) is None


def test_valid_payload() -> None:
    result = validate_analysis_result(
        _payload(
            [
                _item(
                    1,
                    description="Chicken, rice, broccoli",
                    details={"servings": 4},
                    destinationSystem="nutrition",
                    confidence=91,
                    isSelected=False,
                )
            ],
            clarifyingQuestions=["Which week should this start?", 2],
        )
    )

    assert result is not None
    assert result.document_title == "4-Week Reset"
    assert result.confidence == 82
    item = result.items[0]
    assert item.item_type == ItemType.MEAL
    assert item.details == {"servings": 4}
    assert item.destination_system == "nutrition"
    assert item.confidence == 91
    assert item.is_selected is False
    assert result.clarifying_questions == ["Which week should this start?", "2"]


def test_partial_salvage() -> None:
    """Test one malformed item is dropped and its siblings kept."""
    broken = _item(2)
    del broken["id"]

    result = validate_analysis_result(_payload([_item(1), broken, _item(3, "workout")]))

    assert result is not None
    assert [item.id for item in result.items] == ["item-1", "item-3"]


def test_non_string_detail_keys_do_not_sink_siblings() -> None:
    """Test details with non-string keys keep the item and its siblings."""
    result = validate_analysis_result(
        _payload([_item(1), _item(2, details={1: "x", "sets": 3}), _item(3)])
    )

    assert result is not None
    assert [item.id for item in result.items] == ["item-1", "item-2", "item-3"]
    assert result.items[1].details == {"1": "x", "sets": 3}


def test_unbuildable_item_is_dropped_alone() -> None:
    """Test an item that fails model validation is skipped, not the payload."""
    with patch(
        "docintake.domains.analysis.validator.AnalysisItem",
        side_effect=[
            AnalysisItem(id="item-1", item_type=ItemType.MEAL, title="Item 1"),
            ValidationError.from_exception_data("AnalysisItem", []),
            AnalysisItem(id="item-3", item_type=ItemType.MEAL, title="Item 3"),
        ],
    ):
        result = validate_analysis_result(_payload([_item(1), _item(2), _item(3)]))

    assert result is not None
    assert [item.id for item in result.items] == ["item-1", "item-3"]


def test_items_dropped_for_bad_shape() -> None:
    result = validate_analysis_result(
        _payload(
            [
                "meal",
                None,
                _item(1, title=""),
                _item(2, "snack"),
                _item(3, " Workout "),
            ]
        )
    )

    assert result is not None
    assert len(result.items) == 1
    assert result.items[0].item_type == ItemType.WORKOUT


def test_item_defaults() -> None:
    result = validate_analysis_result(_payload([_item(1, details=["not", "a", "dict"])]))

    assert result is not None
    item = result.items[0]
    assert item.description == ""
    assert item.details == {}
    assert item.destination_system == ""
    assert item.confidence == 50
    assert item.is_selected is True
    assert result.clarifying_questions is None


@pytest.mark.parametrize(
    ("value", "expected"),
    [(None, 50), ("high", 50), (True, 50), ("75", 75), (0, 0), (140, 100), (-5, 0)],
)
def test_item_confidence_coercion(value: Any, expected: float) -> None:
    result = validate_analysis_result(_payload([_item(1, confidence=value)]))
    assert result is not None
    assert result.items[0].confidence == expected


def test_is_selected_only_false_deselects() -> None:
    result = validate_analysis_result(
        _payload([_item(1, isSelected=0), _item(2, isSelected="false"), _item(3, isSelected=False)])
    )
    assert result is not None
    assert [item.is_selected for item in result.items] == [True, True, False]
    assert [item.id for item in result.selected_items] == ["item-1", "item-2"]


def test_input_category_is_ignored() -> None:
    """Test primaryCategory is recomputed, never copied."""
    result = validate_analysis_result(
        _payload([_item(1), _item(2)], primaryCategory="workouts")
    )
    assert result is not None
    assert result.primary_category == PrimaryCategory.MEALS


def test_serializes_with_camel_case() -> None:
    result = validate_analysis_result(_payload([_item(1, destinationSystem="nutrition")]))
    assert result is not None

    data = result.model_dump(by_alias=True, mode="json")

    assert data["documentTitle"] == "4-Week Reset"
    assert data["primaryCategory"] == "meals"
    assert data["items"][0]["itemType"] == "meal"
    assert data["items"][0]["isSelected"] is True


# --- Category vote ---


def _typed(types: list[str], destination: str = "") -> list[AnalysisItem]:
    return [
        AnalysisItem(
            id=str(i), item_type=ItemType(t), title=t, destination_system=destination
        )
        for i, t in enumerate(types)
    ]


def test_majority_wins() -> None:
    """Test 4 of 6 meals clears the 60% bar."""
    items = _typed(["meal"] * 4 + ["workout"] * 2)
    assert derive_primary_category(items) == PrimaryCategory.MEALS


def test_even_split_is_mixed() -> None:
    """Test 3 of 6 meals falls short."""
    items = _typed(["meal"] * 3 + ["workout"] * 3)
    assert derive_primary_category(items) == PrimaryCategory.MIXED


def test_empty_is_mixed() -> None:
    assert derive_primary_category([]) == PrimaryCategory.MIXED


def test_destination_fallback_for_plan_items() -> None:
    """Test plan items vote by destination."""
    items = _typed(["plan", "plan", "calendar"], destination="schedule")
    assert derive_primary_category(items) == PrimaryCategory.CALENDAR


def test_plan_without_destination_counts_against_majority() -> None:
    items = _typed(["routine", "plan"])
    assert derive_primary_category(items) == PrimaryCategory.MIXED


def test_threshold_is_configurable() -> None:
    items = _typed(["meal"] * 3 + ["workout"] * 3)
    assert derive_primary_category(items, threshold=0.5) in {
        PrimaryCategory.MEALS,
        PrimaryCategory.WORKOUTS,
    }
