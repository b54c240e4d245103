"""Main FastAPI application."""

import logging
import sys
import time
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from meal_analyzer.analyzer import FoodAnalyzer
from meal_analyzer.config import (
    AI_MODE,
    ALLOW_ALL_ORIGINS,
    APP_VERSION,
    CORS_ORIGINS,
    LOG_LEVEL,
    MODEL_OVERRIDES,
)
from meal_analyzer.errors import AnalysisError
from meal_analyzer.invoker import ModelInvoker
from meal_analyzer.models import default_registry
from meal_analyzer.stub_invoker import StubInvoker

logging.basicConfig(
    level=LOG_LEVEL,
    stream=sys.stdout,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)

logger = logging.getLogger(__name__)


def create_analyzer(mode: str = AI_MODE) -> FoodAnalyzer:
    """Wire the registry and the invoker once per process."""
    registry = default_registry(MODEL_OVERRIDES)
    invoker = StubInvoker() if mode == "stub" else ModelInvoker()
    logger.info("Food analyzer ready (mode=%s, models=%s)", mode, registry.names())
    return FoodAnalyzer(registry, invoker)


class AnalyzeBody(BaseModel):
    model_config = ConfigDict(populate_by_name=True, protected_namespaces=())

    image: str
    meal_type: str = Field(validation_alias=AliasChoices("mealType", "meal_type"))
    language: Optional[str] = None
    model_choice: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("useModel", "modelChoice", "model_choice"),
    )


# -----------------------------------
# App initialization
# -----------------------------------

app = FastAPI()
app.state.analyzer = create_analyzer()

# -----------------------------------
# CORS
# -----------------------------------

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=not ALLOW_ALL_ORIGINS,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "X-API-Key"],
)

# -----------------------------------
# Error handlers
# -----------------------------------


@app.exception_handler(AnalysisError)
async def analysis_error_handler(request: Request, exc: AnalysisError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


def _body_error_message(errors) -> str:
    """Describe the first invalid body field, e.g. "language: Input should be a valid string"."""
    if not errors:
        return "Invalid request body"
    first = errors[0]
    fields = [str(part) for part in first.get("loc", ()) if part != "body"]
    if not fields:
        return "Invalid request body"
    return f"{'.'.join(fields)}: {first.get('msg', 'invalid value')}"


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    logger.info("Rejected request body on %s: %s", request.url.path, errors)
    return JSONResponse(
        status_code=400,
        content={"error": "validation-failed", "message": _body_error_message(errors)},
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s", request.url.path)
    return JSONResponse(
        status_code=500,
        content={"error": "internal-error", "message": "An unexpected error occurred"},
    )


# -----------------------------------
# Endpoints
# -----------------------------------


@app.get("/api/health")
def health():
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": APP_VERSION,
    }


@app.post("/api/analyze")
async def analyze_food(body: AnalyzeBody, request: Request):
    started_at = time.perf_counter()
    logger.info(
        "[PIPELINE] /api/analyze request received from %s",
        request.client.host if request.client else "unknown",
    )

    analyzer: FoodAnalyzer = request.app.state.analyzer
    result = await analyzer.analyze(
        body.image,
        body.meal_type,
        language=body.language,
        model_choice=body.model_choice,
        started_at=started_at,
    )
    return result.to_dict()
