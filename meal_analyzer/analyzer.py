"""Analysis orchestrator: validate -> prompt -> invoke -> normalize."""

import base64
import binascii
import logging
import time
from datetime import datetime, timezone
from typing import Optional

from meal_analyzer.config import APP_VERSION, MAX_IMAGE_BYTES
from meal_analyzer.errors import AnalysisError, InternalFailure, ValidationFailure
from meal_analyzer.models import ModelRegistry
from meal_analyzer.normalizer import normalize
from meal_analyzer.prompts import build_prompt
from meal_analyzer.schemas import (
    LANGUAGES,
    MEAL_TYPES,
    MODEL_CHOICES,
    AnalysisRequest,
    AnalysisResult,
)

logger = logging.getLogger(__name__)

DEFAULT_LANGUAGE = "zh"
DEFAULT_MODEL_CHOICE = "primary"


def _decoded_size(image: str) -> int:
    try:
        return len(base64.b64decode(image, validate=True))
    except (binascii.Error, ValueError) as exc:
        raise ValidationFailure("Image must be a valid base64 string") from exc


def validate_request(
    image,
    meal_type,
    language=None,
    model_choice=None,
    max_image_bytes: int = MAX_IMAGE_BYTES,
) -> AnalysisRequest:
    """Check caller input and build an AnalysisRequest, or raise ValidationFailure."""
    if not isinstance(image, str) or not image:
        raise ValidationFailure("Both image and mealType are required")
    if not isinstance(meal_type, str) or not meal_type:
        raise ValidationFailure("Both image and mealType are required")

    if _decoded_size(image) > max_image_bytes:
        raise ValidationFailure(
            f"Image size must be less than {round(max_image_bytes / (1024 * 1024))}MB",
            status_code=413,
        )

    if meal_type not in MEAL_TYPES:
        raise ValidationFailure("Meal type must be one of: " + ", ".join(MEAL_TYPES))

    language = language or DEFAULT_LANGUAGE
    if language not in LANGUAGES:
        raise ValidationFailure('Language must be either "zh" or "en"')

    model_choice = model_choice or DEFAULT_MODEL_CHOICE
    if model_choice not in MODEL_CHOICES:
        raise ValidationFailure("Model must be one of: " + ", ".join(MODEL_CHOICES))

    return AnalysisRequest(
        image=image,
        meal_type=meal_type,
        language=language,
        model_choice=model_choice,
    )


class FoodAnalyzer:
    """
    Public entry point of the pipeline.

    Holds only read-only collaborators (registry, invoker); every call is
    independent and nothing is cached between requests.
    """

    def __init__(self, registry: ModelRegistry, invoker, version: str = APP_VERSION,
                 max_image_bytes: int = MAX_IMAGE_BYTES):
        self.registry = registry
        self.invoker = invoker
        self.version = version
        self.max_image_bytes = max_image_bytes

    async def analyze(
        self,
        image: str,
        meal_type: str,
        language: Optional[str] = None,
        model_choice: Optional[str] = None,
        started_at: Optional[float] = None,
    ) -> AnalysisResult:
        """
        Run the full analysis for one photo.

        started_at is a time.perf_counter() value taken when the request was
        accepted; defaults to now.
        """
        total_start = started_at if started_at is not None else time.perf_counter()

        image_size = len(image) if isinstance(image, str) else 0
        logger.info(
            "[PIPELINE] Starting food analysis: image_size=%s, meal_type=%s, "
            "language=%s, model_choice=%s",
            image_size,
            meal_type,
            language,
            model_choice,
            extra={
                "meal_type": meal_type,
                "language": language,
                "model_choice": model_choice,
                "image_size": image_size,
            },
        )

        try:
            request = validate_request(
                image, meal_type, language, model_choice, self.max_image_bytes
            )
            profile = self.registry.lookup(request.model_choice)
            logger.info(
                "[PIPELINE] Resolved model=%s (choice=%s, language=%s)",
                profile.identifier,
                request.model_choice,
                request.language,
            )
            prompt = build_prompt(request.meal_type, request.language)
            raw_text = await self.invoker.invoke(prompt, request.image, profile)
            record = normalize(raw_text, request.meal_type)
        except AnalysisError as exc:
            logger.warning(
                "[PIPELINE] Food analysis failed: kind=%s, error=%s: %s",
                exc.kind,
                type(exc).__name__,
                exc,
                extra={"kind": exc.kind, "error_type": type(exc).__name__},
            )
            raise
        except Exception as exc:
            logger.exception("[PIPELINE] Food analysis failed unexpectedly")
            raise InternalFailure(str(exc)) from exc

        processing_time_ms = max(int((time.perf_counter() - total_start) * 1000), 0)

        logger.info(
            "[PIPELINE] Food analysis completed successfully: total_calories=%s, "
            "item_count=%s, model=%s, processing_time_ms=%s",
            record.total_calories,
            len(record.food_items),
            profile.identifier,
            processing_time_ms,
            extra={
                "total_calories": record.total_calories,
                "item_count": len(record.food_items),
                "model": profile.identifier,
                "processing_time_ms": processing_time_ms,
            },
        )

        return AnalysisResult(
            record=record,
            model=profile.identifier,
            timestamp=datetime.now(timezone.utc),
            processing_time_ms=processing_time_ms,
            version=self.version,
        )
