"""
AI Provider Factory.

Manages provider selection and initialization based on configuration.
Uses the Factory pattern to provide plug-and-play model gateway support.
"""
from typing import Dict, Optional

from ...core.config import (
    AI_PROVIDER,
    ANTHROPIC_API_KEY,
    GEMINI_API_KEY,
    OPENROUTER_API_KEY,
)
from ...core.logging_config import get_logger
from .base import AIProvider
from .anthropic_provider import AnthropicProvider
from .gemini_provider import GeminiProvider
from .mock_provider import MockProvider
from .openrouter_provider import OpenRouterProvider

logger = get_logger(__name__)

# Order is the fallback order when the configured provider has no key
_PROVIDERS: Dict[str, tuple] = {
    "gemini": (GEMINI_API_KEY, GeminiProvider),
    "openrouter": (OPENROUTER_API_KEY, OpenRouterProvider),
    "anthropic": (ANTHROPIC_API_KEY, AnthropicProvider),
}


class AIProviderFactory:
    """
    Factory for creating AI provider instances.

    Selects the provider by:
    1. AI_PROVIDER configuration
    2. Available API keys
    3. Fallback to MockProvider if no keys available
    """

    @staticmethod
    def get_provider(provider_type: Optional[str] = None) -> AIProvider:
        provider_type = (provider_type or AI_PROVIDER).lower()

        if provider_type == "mock":
            logger.info("Using MockProvider (configured)")
            return MockProvider()

        if provider_type in _PROVIDERS:
            api_key, provider_cls = _PROVIDERS[provider_type]
            if api_key:
                logger.info(f"Using {provider_type} provider")
                return provider_cls()
            logger.warning(f"{provider_type} API key not configured, checking other providers...")
        else:
            logger.warning(f"Unknown provider '{provider_type}', checking available API keys...")

        for name, (api_key, provider_cls) in _PROVIDERS.items():
            if api_key:
                logger.info(f"Using {name} provider as fallback")
                return provider_cls()

        logger.warning("No API keys configured, using MockProvider")
        return MockProvider()
