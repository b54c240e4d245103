"""
Meal photo nutrition analyzer:
- models: registry of hosted model profiles
- prompts: analysis prompt templates (zh / en)
- invoker: single outbound model call with failure mapping
- normalizer: model reply -> NutritionRecord
- analyzer: orchestrator used by every entry point
- main: FastAPI app
"""
