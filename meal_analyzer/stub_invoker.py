"""Offline invoker returning a canned model reply.

Used with AI_MODE=stub for local development and demos; the reply still
goes through the normal normalizer.
"""

import json
import logging

from meal_analyzer.models import ModelProfile

logger = logging.getLogger(__name__)

STUB_REPLY = {
    "food_items": [
        {
            "name": "海鲜炒饭",
            "calories": 485,
            "protein": 24.5,
            "carbs": 58.2,
            "fat": 16.8,
            "quantity": "1 份",
            "confidence": 0.92,
        },
        {
            "name": "炒虾仁",
            "calories": 158,
            "protein": 18.2,
            "carbs": 2.1,
            "fat": 8.4,
            "quantity": "约100g",
            "confidence": 0.88,
        },
    ],
    "total_calories": 643,
    "health_score": 78,
    "ai_confidence": 0.9,
    "suggestions": [
        "这道海鲜炒饭营养丰富，蛋白质含量高",
        "建议搭配蔬菜沙拉增加纤维摄入",
        "注意控制份量，避免过量摄入",
    ],
}


class StubInvoker:
    async def invoke(self, prompt: str, image_b64: str, profile: ModelProfile) -> str:
        logger.warning("AI_MODE=stub: returning canned reply for model=%s", profile.identifier)
        return "Here is the analysis:\n" + json.dumps(STUB_REPLY, ensure_ascii=False)
