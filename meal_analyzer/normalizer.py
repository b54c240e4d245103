"""Turn a free-text model reply into a NutritionRecord."""

import json
import math
import re
from typing import Any, Dict, Optional

from meal_analyzer.errors import ResponseParsingFailure
from meal_analyzer.schemas import FoodItem, NutritionRecord

DEFAULT_FOOD_NAME = "Unknown Food"
DEFAULT_QUANTITY = "Unknown"
DEFAULT_ITEM_CONFIDENCE = 0.5
DEFAULT_HEALTH_SCORE = 70.0
DEFAULT_AI_CONFIDENCE = 0.7
DEFAULT_SUGGESTIONS = ("Analysis completed",)

_FENCE_RE = re.compile(r"```(?:json)?", re.IGNORECASE)
_decoder = json.JSONDecoder()


def extract_json(text: str) -> Dict[str, Any]:
    """
    Return the first complete JSON object embedded in text.

    Models often wrap the JSON in prose or ```json fences. Each "{" is tried
    with a raw decoder so unbalanced braces in the prose do not matter; if no
    object decodes, the whole text is parsed as JSON.
    Raises ValueError if nothing usable is found.
    """
    if not text or not text.strip():
        raise ValueError("Empty model output")

    cleaned = _FENCE_RE.sub("", text)

    start = cleaned.find("{")
    while start != -1:
        try:
            parsed, _ = _decoder.raw_decode(cleaned, start)
        except (ValueError, RecursionError):
            pass
        else:
            if isinstance(parsed, dict):
                return parsed
        start = cleaned.find("{", start + 1)

    parsed = json.loads(cleaned.strip())
    if not isinstance(parsed, dict):
        raise ValueError("No JSON object detected")
    return parsed


def _to_number(value: Any) -> Optional[float]:
    """Numbers and numeric strings -> float; anything else -> None."""
    if isinstance(value, bool):
        return None
    if not isinstance(value, (int, float, str)):
        return None
    try:
        number = float(value.strip() if isinstance(value, str) else value)
    except (ValueError, OverflowError):
        # e.g. "abc", or an integer too large for a float
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def _number(value: Any, default: float, low: float = 0.0, high: float = math.inf) -> float:
    number = _to_number(value)
    if number is None:
        return default
    return min(max(number, low), high)


def _text(value: Any, default: str) -> str:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return default


def _food_item(raw: Any) -> FoodItem:
    # non-object entries are kept, every field falls back to its default
    data = raw if isinstance(raw, dict) else {}
    return FoodItem(
        name=_text(data.get("name"), DEFAULT_FOOD_NAME),
        calories=_number(data.get("calories"), 0.0),
        protein=_number(data.get("protein"), 0.0),
        carbs=_number(data.get("carbs"), 0.0),
        fat=_number(data.get("fat"), 0.0),
        quantity=_text(data.get("quantity"), DEFAULT_QUANTITY),
        confidence=_number(data.get("confidence"), DEFAULT_ITEM_CONFIDENCE, high=1.0),
    )


def _suggestions(value: Any) -> tuple:
    if not isinstance(value, list):
        return DEFAULT_SUGGESTIONS
    return tuple(str(s).strip() for s in value if s is not None and str(s).strip())


def normalize(raw_text: str, meal_type: str) -> NutritionRecord:
    """
    Parse the model reply and coerce it into a NutritionRecord.

    Only food_items is mandatory; every other field has a default.
    Raises ResponseParsingFailure when no JSON object or no food items exist.
    """
    try:
        parsed = extract_json(raw_text)
    except (TypeError, ValueError, RecursionError) as exc:
        raise ResponseParsingFailure(f"no JSON object in model reply: {exc}") from exc

    raw_items = parsed.get("food_items")
    if not isinstance(raw_items, list):
        raise ResponseParsingFailure("Invalid food_items in response")
    if not raw_items:
        raise ResponseParsingFailure("Empty food_items in response")

    items = tuple(_food_item(raw) for raw in raw_items)

    # the model's own total wins over the item sum when it is numeric
    total = _to_number(parsed.get("total_calories"))
    if total is None:
        total = sum(item.calories for item in items)

    return NutritionRecord(
        food_items=items,
        total_calories=max(total, 0.0),
        health_score=_number(parsed.get("health_score"), DEFAULT_HEALTH_SCORE, high=100.0),
        ai_confidence=_number(parsed.get("ai_confidence"), DEFAULT_AI_CONFIDENCE, high=1.0),
        suggestions=_suggestions(parsed.get("suggestions")),
        meal_type=meal_type,
        auto_detected=True,
    )
