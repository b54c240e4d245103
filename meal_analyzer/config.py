import os


def _parse_cors_origins(raw: str) -> list[str]:
    origins = [origin.strip() for origin in raw.split(",") if origin.strip()]
    return origins or ["*"]


# -----------------------------------
# Provider (OpenRouter) configuration
# -----------------------------------

OPENROUTER_API_KEY = os.getenv("OPENROUTER_API_KEY")
OPENROUTER_BASE_URL = os.getenv("OPENROUTER_BASE_URL", "https://openrouter.ai/api/v1")

# AI_REQUEST_TIMEOUT_S: hard limit for a single model call, in seconds
AI_REQUEST_TIMEOUT_S = float(os.getenv("AI_REQUEST_TIMEOUT_S", "30"))

# Attribution headers expected by OpenRouter
APP_REFERER = os.getenv("APP_REFERER", "https://magic-nutritionist.com")
APP_TITLE = os.getenv("APP_TITLE", "Magic Nutritionist")

# AI_MODE:
# - "openrouter" (default): real model call
# - "stub": canned reply, no network
AI_MODE = os.getenv("AI_MODE", "openrouter").lower()

# Optional per-profile model identifier overrides
MODEL_OVERRIDES = {
    "primary": os.getenv("AI_PRIMARY_MODEL"),
    "backup": os.getenv("AI_BACKUP_MODEL"),
    "budget": os.getenv("AI_BUDGET_MODEL"),
}

# -----------------------------------
# Request limits / HTTP
# -----------------------------------

# MAX_IMAGE_BYTES: ceiling for the decoded image size (default 10 MiB)
MAX_IMAGE_BYTES = int(os.getenv("MAX_IMAGE_BYTES", str(10 * 1024 * 1024)))

CORS_ORIGINS = _parse_cors_origins(os.getenv("CORS_ORIGINS", "*"))
ALLOW_ALL_ORIGINS = CORS_ORIGINS == ["*"]

APP_VERSION = os.getenv("APP_VERSION", "1.0.0")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
