"""
Gemini AI Provider.

Provides completions using Google's Gemini API through the google-genai SDK.
"""
import httpx
from google import genai
from google.genai import errors, types

from ...api.exceptions import GatewayError
from ...core.config import GEMINI_API_KEY, GEMINI_MODEL, MODEL_TEMPERATURE, MODEL_TIMEOUT_SECONDS
from ...core.logging_config import get_logger
from .base import AIProvider

logger = get_logger(__name__)


class GeminiProvider(AIProvider):
    """AI Provider using the Gemini generate_content API."""

    name = "gemini"

    def __init__(self, api_key: str = GEMINI_API_KEY, model: str = GEMINI_MODEL):
        self.api_key = api_key
        self.model = model
        if self.api_key:
            self.client = genai.Client(
                api_key=self.api_key,
                http_options=types.HttpOptions(timeout=int(MODEL_TIMEOUT_SECONDS * 1000)),
            )
            logger.info(f"Initialized Gemini client with model {self.model}")
        else:
            self.client = None

    def complete(self, prompt: str, max_tokens: int) -> str:
        if not self.client:
            raise GatewayError(GatewayError.NOT_CONFIGURED, "Gemini API key not configured")

        config = types.GenerateContentConfig(
            temperature=MODEL_TEMPERATURE,
            max_output_tokens=max_tokens,
        )

        try:
            response = self.client.models.generate_content(
                model=self.model,
                contents=prompt,
                config=config,
            )
        except errors.APIError as e:
            raise _classify_api_error(e)
        except httpx.TimeoutException as e:
            raise GatewayError(GatewayError.TIMEOUT, "Gemini request timed out", cause=e)
        except httpx.TransportError as e:
            raise GatewayError(GatewayError.UNAVAILABLE, f"Gemini unavailable: {e}", cause=e)

        try:
            text = response.text
        except ValueError as e:
            # Raised when the candidate was blocked or carries no text parts
            raise GatewayError(GatewayError.MALFORMED_RESPONSE, f"Gemini returned no text: {e}", cause=e)
        return self._require_text(text)


def _classify_api_error(e: "errors.APIError") -> GatewayError:
    code = getattr(e, "code", None)
    if code == 429:
        return GatewayError(GatewayError.RATE_LIMITED, "Gemini rate limit exceeded", cause=e)
    if code in (408, 504):
        return GatewayError(GatewayError.TIMEOUT, "Gemini request timed out", cause=e)
    if isinstance(e, errors.ServerError):
        return GatewayError(GatewayError.UNAVAILABLE, f"Gemini unavailable: {e}", cause=e)
    logger.error(f"Gemini API Error: {code} {e}")
    return GatewayError(GatewayError.PROVIDER_ERROR, f"Gemini error {code}", cause=e)
