"""
AI Retry Handler

Handles retry decisions for failed model gateway calls.
Provides exponential backoff and retry limits for AI operations.
"""
from ..api.exceptions import GatewayError
from ..core.config import MODEL_MAX_RETRIES, MODEL_RETRY_BASE_DELAY
from ..core.logging_config import get_logger

logger = get_logger(__name__)


class AIRetryHandler:
    """
    Handles retry logic for model gateway failures.

    Features:
    - Exponential backoff for retries
    - Maximum retry attempts
    - Only transient failures (rate limited, unavailable) are retried
    """

    def __init__(
        self,
        max_retries: int = MODEL_MAX_RETRIES,
        base_delay: float = MODEL_RETRY_BASE_DELAY,
        max_delay: float = 30.0,
        backoff_multiplier: float = 2.0
    ):
        """
        Args:
            max_retries: Maximum number of retry attempts after the first call
            base_delay: Delay in seconds before the first retry
            max_delay: Maximum delay in seconds between retries
            backoff_multiplier: Multiplier for exponential backoff
        """
        self.max_retries = max_retries
        self.base_delay = base_delay
        self.max_delay = max_delay
        self.backoff_multiplier = backoff_multiplier

    def should_retry(self, error: GatewayError, retry_count: int) -> bool:
        """
        Determine if a failed call should be attempted again.

        Args:
            error: The classified gateway failure
            retry_count: Retries already performed (0 after the first failure)
        """
        if not error.retryable:
            return False
        if retry_count >= self.max_retries:
            logger.info(f"Gateway call exceeded max retries ({self.max_retries}): {error}")
            return False
        return True

    def calculate_retry_delay(self, retry_count: int) -> float:
        """
        Calculate delay before next retry using exponential backoff.

        Args:
            retry_count: Current retry attempt number (0-indexed)
        """
        delay = self.base_delay * (self.backoff_multiplier ** retry_count)
        return min(delay, self.max_delay)
