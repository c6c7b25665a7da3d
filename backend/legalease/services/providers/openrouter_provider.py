"""
OpenRouter AI Provider.

Provides completions through the OpenRouter API (OpenAI-compatible), which
fronts many hosted models.
"""
import openai
from openai import OpenAI

from ...api.exceptions import GatewayError
from ...core.config import (
    MODEL_TEMPERATURE,
    MODEL_TIMEOUT_SECONDS,
    OPENROUTER_API_KEY,
    OPENROUTER_BASE_URL,
    OPENROUTER_MODEL,
)
from ...core.logging_config import get_logger
from .base import AIProvider

logger = get_logger(__name__)


class OpenRouterProvider(AIProvider):
    """AI Provider using the OpenRouter chat completions API."""

    name = "openrouter"

    def __init__(self, api_key: str = OPENROUTER_API_KEY, model: str = OPENROUTER_MODEL):
        self.api_key = api_key
        self.model = model
        if self.api_key:
            self.client = OpenAI(
                base_url=OPENROUTER_BASE_URL,
                api_key=self.api_key,
                timeout=MODEL_TIMEOUT_SECONDS,
                max_retries=0,  # retries are owned by the analysis engine
            )
        else:
            self.client = None

    def complete(self, prompt: str, max_tokens: int) -> str:
        if not self.client:
            raise GatewayError(GatewayError.NOT_CONFIGURED, "OpenRouter API key not configured")

        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                max_tokens=max_tokens,
                temperature=MODEL_TEMPERATURE,
            )
        except openai.APITimeoutError as e:
            raise GatewayError(GatewayError.TIMEOUT, "OpenRouter request timed out", cause=e)
        except openai.RateLimitError as e:
            raise GatewayError(GatewayError.RATE_LIMITED, "OpenRouter rate limit exceeded", cause=e)
        except (openai.APIConnectionError, openai.InternalServerError) as e:
            raise GatewayError(GatewayError.UNAVAILABLE, f"OpenRouter unavailable: {e}", cause=e)
        except openai.APIStatusError as e:
            logger.error(f"OpenRouter API Error: {e.status_code} {e}")
            raise GatewayError(GatewayError.PROVIDER_ERROR, f"OpenRouter error {e.status_code}", cause=e)

        if not response.choices:
            raise GatewayError(GatewayError.MALFORMED_RESPONSE, "OpenRouter returned no choices")
        return self._require_text(response.choices[0].message.content)
