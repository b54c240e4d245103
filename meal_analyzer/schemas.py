"""Domain records produced by the analysis pipeline."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Tuple

LANGUAGES = ("zh", "en")
MODEL_CHOICES = ("primary", "backup", "budget")

# Bilingual meal labels accepted from callers
MEAL_TYPES = (
    "早餐",
    "午餐",
    "晚餐",
    "點心",
    "breakfast",
    "lunch",
    "dinner",
    "snack",
)


@dataclass(frozen=True)
class AnalysisRequest:
    image: str
    meal_type: str
    language: str = "zh"
    model_choice: str = "primary"


@dataclass(frozen=True)
class FoodItem:
    name: str
    calories: float
    protein: float
    carbs: float
    fat: float
    quantity: str
    confidence: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "calories": self.calories,
            "protein": self.protein,
            "carbs": self.carbs,
            "fat": self.fat,
            "quantity": self.quantity,
            "confidence": self.confidence,
        }


@dataclass(frozen=True)
class NutritionRecord:
    food_items: Tuple[FoodItem, ...]
    total_calories: float
    health_score: float
    ai_confidence: float
    suggestions: Tuple[str, ...]
    meal_type: str
    auto_detected: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "foodItems": [item.to_dict() for item in self.food_items],
            "totalCalories": self.total_calories,
            "healthScore": self.health_score,
            "aiConfidence": self.ai_confidence,
            "suggestions": list(self.suggestions),
            "mealType": self.meal_type,
            "autoDetected": self.auto_detected,
        }


@dataclass(frozen=True)
class AnalysisResult:
    """Normalized record plus response metadata. Never persisted."""

    record: NutritionRecord
    model: str
    timestamp: datetime
    processing_time_ms: int
    version: str

    def to_dict(self) -> Dict[str, Any]:
        payload = self.record.to_dict()
        payload["metadata"] = {
            "model": self.model,
            "timestamp": self.timestamp.isoformat(),
            "processingTime": self.processing_time_ms,
            "version": self.version,
        }
        return payload
