"""
Anthropic AI Provider.

Provides completions using Anthropic's Claude Messages API directly.
"""
import anthropic

from ...api.exceptions import GatewayError
from ...core.config import ANTHROPIC_API_KEY, ANTHROPIC_MODEL, MODEL_TEMPERATURE, MODEL_TIMEOUT_SECONDS
from ...core.logging_config import get_logger
from .base import AIProvider

logger = get_logger(__name__)


class AnthropicProvider(AIProvider):
    """AI Provider using Anthropic Claude API directly."""

    name = "anthropic"

    def __init__(self, api_key: str = ANTHROPIC_API_KEY, model: str = ANTHROPIC_MODEL):
        self.api_key = api_key
        self.model = model
        if self.api_key:
            self.client = anthropic.Anthropic(
                api_key=self.api_key,
                timeout=MODEL_TIMEOUT_SECONDS,
                max_retries=0,
            )
        else:
            self.client = None

    def complete(self, prompt: str, max_tokens: int) -> str:
        if not self.client:
            raise GatewayError(GatewayError.NOT_CONFIGURED, "Anthropic API key not configured")

        try:
            message = self.client.messages.create(
                model=self.model,
                max_tokens=max_tokens,
                temperature=MODEL_TEMPERATURE,
                messages=[{"role": "user", "content": prompt}],
            )
        except anthropic.APITimeoutError as e:
            raise GatewayError(GatewayError.TIMEOUT, "Anthropic request timed out", cause=e)
        except anthropic.RateLimitError as e:
            raise GatewayError(GatewayError.RATE_LIMITED, "Anthropic rate limit exceeded", cause=e)
        except (anthropic.APIConnectionError, anthropic.InternalServerError) as e:
            raise GatewayError(GatewayError.UNAVAILABLE, f"Anthropic unavailable: {e}", cause=e)
        except anthropic.APIStatusError as e:
            # 529 overloaded surfaces as a plain status error
            if e.status_code == 529:
                raise GatewayError(GatewayError.UNAVAILABLE, "Anthropic is overloaded", cause=e)
            logger.error(f"Anthropic API Error: {e.status_code} {e}")
            raise GatewayError(GatewayError.PROVIDER_ERROR, f"Anthropic error {e.status_code}", cause=e)

        text_blocks = [block.text for block in message.content if getattr(block, "type", None) == "text"]
        return self._require_text("".join(text_blocks))
