"""
AI Providers Module - Model gateway implementations.

To add a new provider:
1. Create a provider class inheriting from AIProvider
2. Implement complete(), mapping SDK failures to GatewayError kinds
3. Register it in AIProviderFactory
"""
from .base import AIProvider
from .factory import AIProviderFactory
from .openrouter_provider import OpenRouterProvider
from .anthropic_provider import AnthropicProvider
from .gemini_provider import GeminiProvider
from .mock_provider import MockProvider

__all__ = [
    "AIProvider",
    "AIProviderFactory",
    "OpenRouterProvider",
    "AnthropicProvider",
    "GeminiProvider",
    "MockProvider",
]
