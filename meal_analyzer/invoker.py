"""Single-call multimodal model invoker (OpenRouter via the OpenAI SDK)."""

import asyncio
import logging
import time
from typing import Any, Dict, List, Optional

from openai import (
    APIConnectionError,
    APIStatusError,
    APITimeoutError,
    AuthenticationError,
    PermissionDeniedError,
    RateLimitError,
)

from meal_analyzer.config import (
    AI_REQUEST_TIMEOUT_S,
    APP_REFERER,
    APP_TITLE,
    OPENROUTER_API_KEY,
    OPENROUTER_BASE_URL,
)
from meal_analyzer.errors import (
    ConfigurationFailure,
    UpstreamAuthFailure,
    UpstreamMalformed,
    UpstreamRateLimited,
    UpstreamTimeout,
    UpstreamTransportFailure,
)
from meal_analyzer.models import ModelProfile
from meal_analyzer.openai_client import get_openai_client

logger = logging.getLogger(__name__)

IMAGE_MIME_TYPE = "image/jpeg"


def build_messages(prompt: str, image_b64: str) -> List[Dict[str, Any]]:
    return [
        {
            "role": "user",
            "content": [
                {"type": "text", "text": prompt},
                {
                    "type": "image_url",
                    "image_url": {"url": f"data:{IMAGE_MIME_TYPE};base64,{image_b64}"},
                },
            ],
        }
    ]


def _extract_text(response: Any) -> str:
    """Return choices[0].message.content or raise UpstreamMalformed."""
    choices = getattr(response, "choices", None) or []
    if not choices:
        raise UpstreamMalformed("response has no choices")
    message = getattr(choices[0], "message", None)
    content = getattr(message, "content", None)
    if not isinstance(content, str) or not content.strip():
        raise UpstreamMalformed("response has no text content")
    return content


class ModelInvoker:
    """
    Sends one prompt + image to the provider and returns the raw reply text.

    No retries: a timeout or provider error is mapped to a typed failure and
    raised straight to the caller.
    """

    def __init__(
        self,
        api_key: Optional[str] = OPENROUTER_API_KEY,
        base_url: str = OPENROUTER_BASE_URL,
        timeout_s: float = AI_REQUEST_TIMEOUT_S,
        client: Any = None,
    ):
        self.api_key = api_key
        self.base_url = base_url
        self.timeout_s = timeout_s
        self._client = client

    def _get_client(self):
        if self._client is not None:
            return self._client
        return get_openai_client(self.api_key, self.base_url, self.timeout_s)

    async def invoke(self, prompt: str, image_b64: str, profile: ModelProfile) -> str:
        if not self.api_key:
            raise ConfigurationFailure("OpenRouter API key not configured")

        client = self._get_client()
        start = time.perf_counter()
        logger.info(
            "Sending %.1fkb image to model=%s",
            len(image_b64) / 1024,
            profile.identifier,
        )

        try:
            response = await asyncio.wait_for(
                client.chat.completions.create(
                    model=profile.identifier,
                    messages=build_messages(prompt, image_b64),
                    max_tokens=profile.max_output_tokens,
                    temperature=profile.sampling_temperature,
                    extra_headers={"HTTP-Referer": APP_REFERER, "X-Title": APP_TITLE},
                ),
                timeout=self.timeout_s,
            )
        except asyncio.TimeoutError as exc:
            raise UpstreamTimeout(f"no reply within {self.timeout_s}s") from exc
        except APITimeoutError as exc:
            raise UpstreamTimeout(str(exc)) from exc
        except (AuthenticationError, PermissionDeniedError) as exc:
            raise UpstreamAuthFailure(f"{exc.status_code}:{exc}") from exc
        except RateLimitError as exc:
            raise UpstreamRateLimited(str(exc)) from exc
        except APIStatusError as exc:
            raise UpstreamTransportFailure(f"{exc.status_code}:{exc}") from exc
        except APIConnectionError as exc:
            raise UpstreamTransportFailure(str(exc)) from exc
        finally:
            elapsed_ms = int((time.perf_counter() - start) * 1000)
            logger.info(
                "Model call finished: model=%s, elapsed_ms=%s, timeout_s=%s",
                profile.identifier,
                elapsed_ms,
                self.timeout_s,
                extra={
                    "model": profile.identifier,
                    "elapsed_ms": elapsed_ms,
                    "timeout_s": self.timeout_s,
                },
            )

        text = _extract_text(response)
        logger.info("Model response received, length: %s", len(text))
        return text
