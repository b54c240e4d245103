"""Prompts for the nutrition analysis model."""

DEFAULT_LANGUAGE = "en"

PROMPT_ZH = """請分析這張食物照片，並以JSON格式回覆營養資訊。餐次類型是：{meal_type}

請回覆以下格式的JSON：
{{
  "food_items": [
    {{
      "name": "食物名稱",
      "calories": 卡路里數值,
      "protein": 蛋白質克數,
      "carbs": 碳水化合物克數,
      "fat": 脂肪克數,
      "quantity": "份量描述",
      "confidence": 信心度(0-1)
    }}
  ],
  "total_calories": 總卡路里,
  "health_score": 健康分數(0-100),
  "ai_confidence": 整體分析信心度(0-1),
  "suggestions": ["建議1", "建議2"]
}}

請準確識別食物並提供營養資訊。如果無法清楚識別某些食物，請在confidence中反映較低的信心度。"""

PROMPT_EN = """Please analyze this food image and respond with nutritional information in JSON format. Meal type: {meal_type}

Please respond with JSON in this format:
{{
  "food_items": [
    {{
      "name": "Food name",
      "calories": calorie_value,
      "protein": protein_grams,
      "carbs": carbs_grams,
      "fat": fat_grams,
      "quantity": "portion description",
      "confidence": confidence_score(0-1)
    }}
  ],
  "total_calories": total_calories,
  "health_score": health_score(0-100),
  "ai_confidence": overall_confidence(0-1),
  "suggestions": ["suggestion1", "suggestion2"]
}}

Please accurately identify foods and provide nutritional information. If you cannot clearly identify certain foods, reflect lower confidence in the confidence score."""

PROMPTS = {
    "zh": PROMPT_ZH,
    "en": PROMPT_EN,
}


def build_prompt(meal_type: str, language: str) -> str:
    """Render the analysis prompt; unsupported languages get the English one."""
    template = PROMPTS.get(language, PROMPTS[DEFAULT_LANGUAGE])
    return template.format(meal_type=meal_type)
