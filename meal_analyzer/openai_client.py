import logging
from functools import lru_cache

from openai import AsyncOpenAI

logger = logging.getLogger(__name__)


@lru_cache
def get_openai_client(api_key: str, base_url: str, timeout_s: float) -> AsyncOpenAI:
    # the caller checks api_key before asking for a client
    logger.info("Initializing OpenRouter client (base_url=%s)", base_url)
    # retries are the caller's policy, never the SDK's
    return AsyncOpenAI(
        api_key=api_key,
        base_url=base_url,
        timeout=timeout_s,
        max_retries=0,
    )
