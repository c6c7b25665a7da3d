"""
Base AI Provider Interface.

All model gateway providers must inherit from this base class. A provider
turns a prompt into completion text, or raises a classified GatewayError.
"""
from abc import ABC, abstractmethod

from ...api.exceptions import GatewayError


class AIProvider(ABC):
    """
    Abstract base class for AI providers.

    complete() is blocking; the analysis engine runs it in a worker thread
    under its own timeout.
    """

    name = "base"

    @abstractmethod
    def complete(self, prompt: str, max_tokens: int) -> str:
        """
        Generate a completion for prompt.

        Args:
            prompt: Full prompt text
            max_tokens: Upper bound on generated tokens

        Returns:
            Non-empty completion text

        Raises:
            GatewayError: classified failure (see GatewayError kinds)
        """
        pass

    def _require_text(self, text) -> str:
        """Reject empty completions as malformed responses."""
        if not text or not str(text).strip():
            raise GatewayError(GatewayError.MALFORMED_RESPONSE, f"{self.name} returned an empty completion")
        return str(text)
